# kindlang

This package holds building blocks of a compiler for the Kind language.

- **Source positions** (`kindlang.span`)
  - `Pos`, `Range` and `SyntaxCtxIndex`.
  - `EncodedRange`, the packed 64-bit form of a range. It uses 24 bits for the start, 24 bits for the end and the upper bits for the context.
- **Identifiers and trees**
  - `kindlang.symbol` provides `Symbol`, `Ident` and `QualifiedIdent`.
  - `kindlang.telescope` provides `Telescope`.
  - `kindlang.tree` provides `Operator` and `Attributes`.
  - `kindlang.desugared` is the desugared tree.
  - `kindlang.untyped` is the untyped tree that the back ends consume.
- **Diagnostics**
  - `kindlang.diagnostics` describes the data: `DiagnosticFrame`, `Marker`, `Subtitle`, `Word`, `Severity`, `Color`, the log messages, and the abstract classes `Diagnostic` and `FileCache`.
  - `kindlang.render.render` prints that data in one of two modes:
    - **classic** (`kindlang.classic`) gives coloured output with code frames.
    - **compact** (`kindlang.compact`) gives terse plain text that is easy to parse.
- **Back ends**
  - `kindlang.kdl_target.compile_book` turns an untyped book into a Kindelia file. It flattens nested patterns, shortens long names with a Keccak hash and linearizes variables.
  - `kindlang.hvm_target.compile_book` turns an untyped book into HVM rewrite rules.

## Installation

```
pip install kindlang
```

## Compiling to HVM

```python
from kindlang.span import Range
from kindlang.symbol import Ident, QualifiedIdent
from kindlang.untyped import Book, Entry, Expr, Rule
from kindlang.tree import Attributes
from kindlang.hvm_target import compile_book

r = Range.ghost_range()
name = QualifiedIdent.new_static("Main.id", None, r)
x = Ident.new_static("x", r)
rule = Rule(name=name, pats=[Expr.var(x)], body=Expr.var(x), range=r)
entry = Entry(name=name, args=[("x", r, False)], rules=[rule], attrs=Attributes(), range=r)
book = Book(entrs={"Main.id": entry}, names={"Main.id": 0})

hvm_file = compile_book(book, trace=False)
print(hvm_file)
```

Tracing can be switched on in two ways: pass `trace=True`, or set `Attributes(trace=...)` on an entry. Each traced function is then compiled under the name `<name>__trace`. A wrapper rule is added that logs the function's name through `Apps.HVM.log`.

## Compiling to Kindelia

`kindlang.kdl_target.compile_book(book, sender, namespace)` takes three arguments:

- the book to compile;
- `sender`, a callable that receives each diagnostic as it is found;
- `namespace`, whose length limits how long generated names may be. A Kindelia name holds at most twelve characters.

If any diagnostic was sent, the function raises `kindlang.kdl_diagnostic.KdlCompilationError`. Otherwise it returns a `kindlang.kdl_compile.KdlFile`, whose string form is the Kindelia program.

```python
from kindlang.kdl_target import compile_book

errors = []
kdl_file = compile_book(book, errors.append, "")
print(kdl_file)
```

## Rendering diagnostics

1. Build a `kindlang.render_config.RenderConfig` with `RenderConfig.unicode`, `RenderConfig.ascii` or `RenderConfig.compact`. `check_if_utf8_is_supported` picks one of these for you.
2. Subclass `FileCache`. Its `fetch` method returns a `(path, source)` pair for a syntax context, or `None`.
3. Call `kindlang.render.render(item, cache, config)`. The item can be a `Diagnostic`, a `DiagnosticFrame` or a log message. The function returns the rendered text. It raises `LookupError` if a marker points into a context that the cache does not know.

To turn ANSI colours off, call `kindlang.style.set_colors_enabled(False)`, or call `check_if_colors_are_supported(True)`.

## What this package does not do

The package has no parser and no type checker. It does not desugar concrete syntax. It offers no command-line program. You build the untyped book yourself, then hand it to a back end.