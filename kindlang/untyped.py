"""The desugared, untyped intermediate tree used by the back ends."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from kindlang.span import Range
from kindlang.symbol import Ident, QualifiedIdent
from kindlang.tree import Attributes, Operator


@dataclass
class Var:
    name: Ident


@dataclass
class Lambda:
    param: Ident
    body: Expr
    erased: bool


@dataclass
class App:
    fun: Expr
    args: list[Expr]


@dataclass
class Fun:
    name: QualifiedIdent
    args: list[Expr]


@dataclass
class Ctr:
    name: QualifiedIdent
    args: list[Expr]


@dataclass
class Let:
    name: Ident
    val: Expr
    next: Expr


@dataclass
class U60:
    numb: int


@dataclass
class F60:
    numb: int


@dataclass
class Str:
    val: str


@dataclass
class Binary:
    op: Operator
    left: Expr
    right: Expr


@dataclass
class Err:
    pass


ExprKind = Union[Var, Lambda, App, Fun, Ctr, Let, U60, F60, Str, Binary, Err]


@dataclass
class Expr:
    """An untyped expression with its source range."""

    data: ExprKind
    range: Range

    @staticmethod
    def var(name: Ident) -> Expr:
        return Expr(Var(name), name.range)

    @staticmethod
    def str(range: Range, val: str) -> Expr:
        return Expr(Str(val), range)

    @staticmethod
    def lambda_(range: Range, param: Ident, body: Expr, erased: bool) -> Expr:
        return Expr(Lambda(param, body, erased), range)

    @staticmethod
    def fun(range: Range, name: QualifiedIdent, args: list[Expr]) -> Expr:
        return Expr(Fun(name, list(args)), range)

    @staticmethod
    def app(range: Range, fun: Expr, args: list[Expr]) -> Expr:
        return Expr(App(fun, list(args)), range)

    @staticmethod
    def ctr(range: Range, name: QualifiedIdent, args: list[Expr]) -> Expr:
        return Expr(Ctr(name, list(args)), range)

    @staticmethod
    def let_(range: Range, name: Ident, val: Expr, next: Expr) -> Expr:
        return Expr(Let(name, val, next), range)

    @staticmethod
    def u60(range: Range, numb: int) -> Expr:
        return Expr(U60(numb), range)

    @staticmethod
    def f60(range: Range, numb: int) -> Expr:
        return Expr(F60(numb), range)

    @staticmethod
    def binary(range: Range, op: Operator, left: Expr, right: Expr) -> Expr:
        return Expr(Binary(op, left, right), range)

    @staticmethod
    def err(range: Range) -> Expr:
        return Expr(Err(), range)

    def __str__(self) -> str:
        match self.data:
            case Err():
                return "ERR"
            case Str(val=val):
                return f'"{val}"'
            case U60(numb=numb):
                return f"{numb}"
            case F60():
                raise ValueError("F60 literals have no textual form")
            case Var(name=name):
                return f"{name}"
            case Lambda(param=param, body=body, erased=erased):
                tilde = "~" if erased else ""
                return f"({tilde}{param} => {body})"
            case App(fun=fun, args=args):
                return f"({fun}{''.join(f' {arg}' for arg in args)})"
            case Fun(name=name, args=args) | Ctr(name=name, args=args):
                if not args:
                    return f"{name}"
                return f"({name}{''.join(f' {arg}' for arg in args)})"
            case Let(name=name, val=val, next=next_):
                return f"(let {name} = {val}; {next_})"
            case Binary(op=op, left=left, right=right):
                return f"({op} {left} {right})"
        raise TypeError(f"unknown expression kind {self.data!r}")


_BRACKETS = {
    (False, False): ("(", ")"),
    (False, True): ("+<", ">"),
    (True, False): ("-(", ")"),
    (True, True): ("<", ">"),
}


@dataclass
class Argument:
    """A binding of a name to a type, possibly hidden or erased."""

    hidden: bool
    erased: bool
    name: Ident
    typ: Expr
    range: Range

    def to_irrelevant(self) -> Argument:
        return Argument(True, True, self.name, self.typ, self.range)

    @staticmethod
    def from_field(name: Ident, typ: Expr, range: Range) -> Argument:
        return Argument(False, False, name, typ, range)

    def __str__(self) -> str:
        open_, close = _BRACKETS[(self.erased, self.hidden)]
        return f"{open_}{self.name}: {self.typ}{close}"


@dataclass
class Rule:
    """An equation with patterns on the left and a body on the right."""

    name: QualifiedIdent
    pats: list[Expr]
    body: Expr
    range: Range

    def __str__(self) -> str:
        pats = "".join(f" {pat}" for pat in self.pats)
        return f"{self.name}{pats} = {self.body}"


@dataclass
class Entry:
    """A top level definition with its arguments and rules."""

    name: QualifiedIdent
    args: list[tuple[str, Range, bool]]
    rules: list[Rule]
    attrs: Attributes
    range: Range

    def __str__(self) -> str:
        return "".join(f"\n{rule}" for rule in self.rules)


@dataclass
class Book:
    """An ordered collection of entries by name."""

    entrs: dict[str, Entry] = field(default_factory=dict)
    names: dict[str, int] = field(default_factory=dict)

    def __str__(self) -> str:
        return "".join(
            f"{entr}\n" if entr.rules else f"ctr {entr.name}\n" for entr in self.entrs.values()
        )