"""Compilation of the untyped tree to Kindelia statements."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from Crypto.Hash import keccak

from kindlang import kdl_ast as kdl
from kindlang import untyped
from kindlang.diagnostics import Diagnostic
from kindlang.kdl_ast import Name, Oper
from kindlang.kdl_diagnostic import (
    FloatUsed,
    InvalidVarName,
    KdlCompilationError,
    NoInitEntry,
    ShouldHaveOnlyOneRule,
    ShouldNotHaveArguments,
)
from kindlang.symbol import Ident, QualifiedIdent
from kindlang.tree import Operator

KDL_NAME_LEN = 12
U60_MAX = 0xFFFFFFFFFFFFFFF
_U120_LIMIT = 1 << 120

Sender = Callable[[Diagnostic], None]


def from_str(name_txt: str) -> Name:
    """Encode a Kindelia name; raises ValueError if it cannot be one."""
    return Name.from_str_unsafe(name_txt)


def _try_name(text: str) -> Optional[Name]:
    try:
        return from_str(text)
    except ValueError:
        return None


@dataclass
class KdlFile:
    """The compiled program: constructors, functions and run blocks."""

    ctrs: dict[str, kdl.CtrStatement] = field(default_factory=dict)
    funs: dict[str, kdl.FunStatement] = field(default_factory=dict)
    runs: list[kdl.RunStatement] = field(default_factory=list)

    def __str__(self) -> str:
        out = [f"{ctr}\n" for ctr in self.ctrs.values()]
        if self.ctrs and self.funs:
            out.append("\n")
        out.extend(f"{fun}\n" for fun in self.funs.values())
        out.extend(f"{run}\n" for run in self.runs)
        return "".join(out)


class CompileCtx:
    """State shared while compiling one book."""

    def __init__(self, book: untyped.Book, sender: Sender) -> None:
        self.file = KdlFile()
        self.kdl_names: dict[str, Name] = {}
        self.kdl_states: list[str] = []
        self.book = book
        self.kdl_used_names: set[str] = set()
        self.sender = sender
        self.failed = False

    def send_err(self, err: Diagnostic) -> None:
        self.sender(err)
        self.failed = True


def _encode_base64(num: int) -> str:
    if num <= 9:
        return chr(num + ord("0"))
    if num <= 35:
        return chr(num - 10 + ord("A"))
    if num <= 61:
        return chr(num - 36 + ord("a"))
    return "_"


def _u128_to_kdl_name(num: int) -> str:
    chars = []
    for _ in range(KDL_NAME_LEN):
        chars.append(_encode_base64(num & 0x3F))
        num >>= 6
    return "".join(chars)


def _keccak128(data: bytes) -> bytes:
    return keccak.new(digest_bits=256, data=data).digest()[:16]


def _name_shortener(name: QualifiedIdent, namespace: str) -> str:
    max_fn_name = KDL_NAME_LEN - len(namespace)
    if max_fn_name < 0:
        raise ValueError(f"namespace {namespace!r} is longer than a Kindelia name")
    text = name.to_str()
    if len(text) > max_fn_name:
        digest = int.from_bytes(_keccak128(text.encode("utf-8")), "little")
        return _u128_to_kdl_name(digest)[:max_fn_name]
    return str(name)


def compile_book(book: untyped.Book, sender: Sender, namespace: str) -> KdlFile:
    """Compile every entry of ``book``; raises KdlCompilationError if any error was sent."""
    ctx = CompileCtx(book, sender)

    for name, entry in book.entrs.items():
        kdl_name = entry.attrs.kdl_name
        new_name = str(kdl_name) if kdl_name is not None else _name_shortener(
            entry.name, namespace
        )
        encoded = _try_name(new_name)
        if encoded is not None:
            ctx.kdl_names[name] = encoded
        else:
            ctx.send_err(InvalidVarName(str(entry.name), entry.name.range))

    for entry in book.entrs.values():
        compile_entry(ctx, entry)

    if ctx.failed:
        raise KdlCompilationError()
    return ctx.file


def compile_rule(ctx: CompileCtx, rule: untyped.Rule) -> kdl.Rule:
    name = ctx.kdl_names[rule.name.to_str()]
    args = [compile_expr(ctx, pat) for pat in rule.pats]
    lhs = kdl.Fun(name, args)
    rhs = compile_expr(ctx, rule.body)
    return kdl.Rule(lhs, rhs)


def err_term() -> kdl.Term:
    return kdl.Num(99999)


def _bind(ctx: CompileCtx, param: Ident, scope: untyped.Expr) -> tuple[Optional[Name], kdl.Term]:
    """Compile ``scope`` with ``param`` bound; an unused binder gets the empty name."""
    text = param.to_str()
    name = _try_name(text)
    was_pending = text in ctx.kdl_used_names
    ctx.kdl_used_names.add(text)
    body = compile_expr(ctx, scope)
    if text in ctx.kdl_used_names:
        name = Name.NONE
        ctx.kdl_used_names.discard(text)
    if was_pending:
        ctx.kdl_used_names.add(text)
    return name, body


_INLINE_OPS = {
    "Data.U60.add_unsafe": Oper.ADD,
    "Data.U120.add": Oper.ADD,
    "Data.U120.sub": Oper.ADD,
    "Data.U120.mul": Oper.MUL,
    "Data.U120.div": Oper.DIV,
    "Data.U120.mod": Oper.MOD,
    "Data.U120.num_equal": Oper.EQL,
    "Data.U120.num_not_equal": Oper.NEQ,
    "Data.U120.shift_left": Oper.SHL,
    "Data.U120.shift_right": Oper.SHR,
    "Data.U120.num_less_than": Oper.LTN,
    "Data.U120.num_less_equal": Oper.LTE,
    "Data.U120.num_greater_than": Oper.GTN,
    "Data.U120.num_greater_equal": Oper.GTE,
    "Data.U120.bitwise_and": Oper.AND,
    "Data.U120.bitwise_or": Oper.OR,
    "Data.U120.bitwise_xor": Oper.XOR,
}

_TRUNCATED = (Operator.ADD, Operator.SUB, Operator.MUL)
_SHIFTS = (Operator.SHL, Operator.SHR)


def _compile_binary(ctx: CompileCtx, node: untyped.Binary) -> kdl.Term:
    oper = Oper[node.op.name]
    val0 = compile_expr(ctx, node.left)
    val1 = compile_expr(ctx, node.right)
    if node.op in _TRUNCATED:
        # These can overflow past 60 bits, so the result is truncated.
        return kdl.Op2(Oper.AND, kdl.Op2(oper, val0, val1), kdl.Num(U60_MAX))
    if node.op in _SHIFTS:
        # Shifts wrap around every 60 bits.
        return kdl.Op2(oper, val0, kdl.Op2(Oper.MOD, val1, kdl.Num(60)))
    return kdl.Op2(oper, val0, val1)


def _compile_fun(ctx: CompileCtx, node: untyped.Fun) -> kdl.Term:
    name = node.name.to_str()
    args = node.args
    oper = _INLINE_OPS.get(name)
    if oper is not None:
        return kdl.Op2(oper, compile_expr(ctx, args[0]), compile_expr(ctx, args[1]))
    if name == "Data.U60.to_u120":
        return compile_expr(ctx, args[0])
    if name == "Data.U120.to_u60":
        return kdl.Op2(Oper.AND, compile_expr(ctx, args[0]), kdl.Num(U60_MAX))
    kdl_name = ctx.kdl_names[name]
    return kdl.Fun(kdl_name, [compile_expr(ctx, arg) for arg in args])


def _compile_str(ctx: CompileCtx, val: str) -> kdl.Term:
    term: kdl.Term = kdl.Ctr(ctx.kdl_names["Data.String.nil"], [])
    cons_name = ctx.kdl_names["Data.String.cons"]
    for chr_ in reversed(val):
        numb = ord(chr_)
        if numb >= _U120_LIMIT:
            raise ValueError(f"character {chr_!r} does not fit in 120 bits")
        term = kdl.Ctr(cons_name, [kdl.Num(numb), term])
    return term


def compile_expr(ctx: CompileCtx, expr: untyped.Expr) -> kdl.Term:
    """Compile one untyped expression to a Kindelia term."""
    data = expr.data
    match data:
        case untyped.Var(name=name):
            text = name.to_str()
            ctx.kdl_used_names.discard(text)
            encoded = _try_name(text)
            if encoded is not None:
                return kdl.Var(encoded)
            ctx.send_err(InvalidVarName(str(name), name.range))
            return err_term()
        case untyped.Lambda(param=param, body=body):
            name, compiled = _bind(ctx, param, body)
            if name is not None:
                return kdl.Lam(name, compiled)
            ctx.send_err(InvalidVarName(str(param), param.range))
            return err_term()
        case untyped.Let(name=param, val=val, next=next_):
            name, compiled = _bind(ctx, param, next_)
            argm = compile_expr(ctx, val)
            if name is not None:
                return kdl.App(kdl.Lam(name, compiled), argm)
            ctx.send_err(InvalidVarName(str(param), param.range))
            return err_term()
        case untyped.App(fun=fun, args=args):
            term = compile_expr(ctx, fun)
            for arg in args:
                term = kdl.App(term, compile_expr(ctx, arg))
            return term
        case untyped.Binary():
            return _compile_binary(ctx, data)
        case untyped.Ctr(name=name, args=args):
            if name.to_str() == "Data.U120.new":
                hi, lo = args[0].data, args[1].data
                if isinstance(hi, untyped.U60) and isinstance(lo, untyped.U60):
                    return kdl.Num((hi.numb << 60) | lo.numb)
            kdl_name = ctx.kdl_names[name.to_str()]
            return kdl.Ctr(kdl_name, [compile_expr(ctx, arg) for arg in args])
        case untyped.Fun():
            return _compile_fun(ctx, data)
        case untyped.U60(numb=numb):
            return kdl.Num(numb)
        case untyped.F60():
            ctx.send_err(FloatUsed(expr.range))
            return err_term()
        case untyped.Str(val=val):
            return _compile_str(ctx, val)
        case untyped.Err():
            raise ValueError("error nodes cannot appear during code generation")
    raise TypeError(f"unknown expression kind {data!r}")


def compile_entry(ctx: CompileCtx, entry: untyped.Entry) -> None:
    """Compile one entry into the context's file."""
    if entry.attrs.kdl_erase:
        return
    if entry.attrs.kdl_run:
        if entry.args:
            ctx.send_err(ShouldNotHaveArguments(entry.range))
        elif len(entry.rules) != 1:
            ctx.send_err(ShouldHaveOnlyOneRule(entry.range))
        else:
            expr = compile_expr(ctx, entry.rules[0].body)
            ctx.file.runs.append(kdl.RunStatement(expr))
    elif entry.name.to_str() == "Data.U120.new":
        _compile_u120_new(ctx, entry)
    else:
        _compile_common_function(ctx, entry)


def _compile_init(ctx: CompileCtx, state_name: Ident) -> Optional[kdl.Term]:
    init_entry = ctx.book.entrs.get(state_name.to_str())
    if init_entry is None:
        ctx.send_err(NoInitEntry(state_name.range))
        return None
    if init_entry.args:
        ctx.send_err(ShouldNotHaveArguments(init_entry.range))
        return None
    if len(init_entry.rules) != 1:
        ctx.send_err(ShouldHaveOnlyOneRule(init_entry.range))
        return None
    ctx.kdl_states.append(str(state_name))
    return compile_expr(ctx, init_entry.rules[0].body)


def _compile_common_function(ctx: CompileCtx, entry: untyped.Entry) -> None:
    name = ctx.kdl_names[entry.name.to_str()]

    args = []
    for arg_name, arg_range, _strict in entry.args:
        encoded = _try_name(arg_name)
        if encoded is not None:
            args.append(encoded)
        else:
            ctx.send_err(InvalidVarName(arg_name, arg_range))

    if not entry.rules:
        # Entries without rules are constructors.
        ctx.file.ctrs[str(entry.name)] = kdl.CtrStatement(name, args)
        return

    func = kdl.Func([compile_rule(ctx, rule) for rule in entry.rules])
    state = entry.attrs.kdl_state
    init = _compile_init(ctx, state) if state is not None else None
    ctx.file.funs[str(entry.name)] = kdl.FunStatement(name, args, func, init)


def _compile_u120_new(ctx: CompileCtx, entry: untyped.Entry) -> None:
    """``Data.U120.new hi lo = (hi << 60) | lo``."""
    hi_name = from_str("hi")
    lo_name = from_str("lo")
    name = ctx.kdl_names[entry.name.to_str()]
    rule = kdl.Rule(
        lhs=kdl.Fun(name, [kdl.Var(hi_name), kdl.Var(lo_name)]),
        rhs=kdl.Op2(
            Oper.OR,
            kdl.Op2(Oper.SHL, kdl.Var(hi_name), kdl.Num(60)),
            kdl.Var(lo_name),
        ),
    )
    ctx.file.funs[str(entry.name)] = kdl.FunStatement(
        name, [hi_name, lo_name], kdl.Func([rule]), None
    )