"""Identifiers and symbols of the language."""

from __future__ import annotations

import string
from dataclasses import dataclass, replace
from typing import Callable, Optional

from kindlang.span import Range, SyntaxCtxIndex

_ALPHABET = "." + string.digits + string.ascii_uppercase + string.ascii_lowercase + "_"


@dataclass(frozen=True)
class Symbol:
    """The name of a variable or constructor."""

    data: str

    def is_empty(self) -> bool:
        return not self.data

    def __str__(self) -> str:
        return self.data


@dataclass(frozen=True)
class Ident:
    """An identifier inside a syntax context."""

    data: Symbol
    range: Range
    generated: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.data, str):
            object.__setattr__(self, "data", Symbol(self.data))

    @staticmethod
    def new_static(data: str, range: Range) -> Ident:
        return Ident(Symbol(data), range)

    @staticmethod
    def new_by_sugar(data: str, range: Range) -> Ident:
        """An identifier created by desugaring."""
        return Ident(Symbol(data), range, generated=True)

    @staticmethod
    def generate(data: str) -> Ident:
        """A generated identifier with a ghost range."""
        return Ident(Symbol(data), Range.ghost_range(), generated=True)

    def with_name(self, f: Callable[[str], str]) -> Ident:
        return replace(self, data=Symbol(f(self.data.data)))

    def add_underscore(self) -> Ident:
        return replace(self, data=Symbol(f"{self.data.data}_"))

    def to_str(self) -> str:
        return self.data.data

    def to_generated(self) -> Ident:
        return replace(self, generated=True)

    def to_qualified_ident(self) -> QualifiedIdent:
        return QualifiedIdent(self.data, None, self.range)

    @staticmethod
    def decode(num: int) -> str:
        """Decode a base-64 packed name."""
        chars = []
        while num > 0:
            chars.append(_ALPHABET[num % 64])
            num //= 64
        return "".join(reversed(chars))

    def encode(self) -> int:
        """Pack the first ten characters of the name, six bits each."""
        num = 0
        for chr_ in self.to_str()[:10]:
            code = _ALPHABET.find(chr_)
            if code < 0:
                raise ValueError(f"Invalid name character {chr_!r}.")
            num = (num << 6) + code
        return num

    def set_ctx(self, ctx: SyntaxCtxIndex) -> Ident:
        """Return a non-generated copy; the range itself is kept unchanged."""
        return Ident(self.data, self.range, generated=False)

    def add_segment(self, name: str) -> Ident:
        return Ident(Symbol(f"{self.data.data}.{name}"), self.range)

    def __str__(self) -> str:
        return self.data.data


@dataclass(unsafe_hash=True)
class QualifiedIdent:
    """A qualified identifier; always refers to a top level definition."""

    root: Symbol
    aux: Optional[Symbol]
    range: Range
    generated: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.root, str):
            self.root = Symbol(self.root)
        if isinstance(self.aux, str):
            self.aux = Symbol(self.aux)

    @staticmethod
    def new_static(root: str, aux: Optional[str], range: Range) -> QualifiedIdent:
        return QualifiedIdent(Symbol(root), Symbol(aux) if aux is not None else None, range)

    @staticmethod
    def new_sugared(root: str, extension: str, range: Range) -> QualifiedIdent:
        return QualifiedIdent(Symbol(f"{root}.{extension}"), None, range, generated=True)

    def to_str(self) -> str:
        return self.root.data

    def get_root(self) -> str:
        return self.root.data

    def get_aux(self) -> Optional[Symbol]:
        return self.aux

    def reset_aux(self) -> None:
        self.aux = None

    def change_root(self, root: str) -> None:
        self.root = Symbol(root)

    def to_generated(self) -> QualifiedIdent:
        return replace(self, generated=True)

    def to_ident(self) -> Ident:
        return Ident(Symbol(str(self)), self.range, self.generated)

    def pop_last_segment(self) -> QualifiedIdent:
        segments = self.root.data.split(".")[:-1]
        return QualifiedIdent(Symbol(".".join(segments)), self.aux, self.range, self.generated)

    def add_segment(self, extension: str) -> QualifiedIdent:
        return QualifiedIdent(
            Symbol(f"{self.root.data}.{extension}"), self.aux, self.range, self.generated
        )

    def __str__(self) -> str:
        if self.aux is not None:
            return f"{self.root}/{self.aux}"
        return str(self.root)