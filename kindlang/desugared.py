"""The desugared tree used by the type checker and the back ends."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from kindlang.span import Range
from kindlang.symbol import Ident, QualifiedIdent
from kindlang.telescope import Telescope
from kindlang.tree import Attributes, Operator

_U60_MASK = 0xFFFFFFFFFFFFFFF


@dataclass
class Var:
    name: Ident


@dataclass
class All:
    param: Ident
    typ: Expr
    body: Expr
    erased: bool


@dataclass
class Lambda:
    param: Ident
    body: Expr
    erased: bool


@dataclass
class App:
    fun: Expr
    args: list[AppBinding]


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
class Ann:
    expr: Expr
    typ: Expr


@dataclass
class Sub:
    name: Ident
    indx: int
    redx: int
    expr: Expr


@dataclass
class Typ:
    pass


@dataclass
class NumTypeU60:
    pass


@dataclass
class NumTypeF60:
    pass


@dataclass
class NumU60:
    numb: int


@dataclass
class NumF60:
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
class Hole:
    num: int


@dataclass
class Hlp:
    name: Ident


@dataclass
class Err:
    """Sentinel node that lets compilation continue past broken parts."""


ExprKind = Union[
    Var, All, Lambda, App, Fun, Ctr, Let, Ann, Sub, Typ, NumTypeU60, NumTypeF60,
    NumU60, NumF60, Str, Binary, Hole, Hlp, Err,
]


@dataclass
class AppBinding:
    """An argument of an application, possibly erased."""

    data: Expr
    erased: bool = False

    def __str__(self) -> str:
        return f"~({self.data})" if self.erased else f"{self.data}"


def _spine(args: Sequence[object]) -> str:
    return "".join(f" {arg}" for arg in args)


@dataclass
class Expr:
    """A desugared expression with its source range."""

    data: ExprKind
    range: Range

    @staticmethod
    def var(name: Ident) -> Expr:
        return Expr(Var(name), name.range)

    @staticmethod
    def all(range: Range, param: Ident, typ: Expr, body: Expr, erased: bool) -> Expr:
        return Expr(All(param, typ, body, erased), range)

    @staticmethod
    def sub(range: Range, name: Ident, indx: int, redx: int, expr: Expr) -> Expr:
        return Expr(Sub(name, indx, redx, expr), range)

    @staticmethod
    def lambda_(range: Range, param: Ident, body: Expr, erased: bool) -> Expr:
        return Expr(Lambda(param, body, erased), range)

    @staticmethod
    def identity_lambda(ident: Ident) -> Expr:
        return Expr(Lambda(ident, Expr.var(ident), False), ident.range)

    @staticmethod
    def unfold_lambda(irrelev: Sequence[bool], idents: Sequence[Ident], body: Expr) -> Expr:
        """Wrap ``body`` in lambdas; identifiers are taken in reverse order."""
        for ident, erased in zip(reversed(idents), irrelev):
            body = Expr.lambda_(ident.range, ident, body, erased)
        return body

    @staticmethod
    def unfold_all(
        irrelev: Sequence[bool], idents: Sequence[tuple[Ident, Expr]], body: Expr
    ) -> Expr:
        """Wrap ``body`` in pi types; binders are taken in reverse order."""
        for (ident, typ), erased in zip(reversed(idents), irrelev):
            body = Expr.all(ident.range, ident, typ, body, erased)
        return body

    @staticmethod
    def app(range: Range, fun: Expr, args: list[AppBinding]) -> Expr:
        return Expr(App(fun, list(args)), range)

    @staticmethod
    def fun(range: Range, name: QualifiedIdent, args: list[Expr]) -> Expr:
        return Expr(Fun(name, list(args)), range)

    @staticmethod
    def ctr(range: Range, name: QualifiedIdent, args: list[Expr]) -> Expr:
        return Expr(Ctr(name, list(args)), range)

    @staticmethod
    def let_(range: Range, name: Ident, val: Expr, next: Expr) -> Expr:
        return Expr(Let(name, val, next), range)

    @staticmethod
    def ann(range: Range, expr: Expr, typ: Expr) -> Expr:
        return Expr(Ann(expr, typ), range)

    @staticmethod
    def typ(range: Range) -> Expr:
        return Expr(Typ(), range)

    @staticmethod
    def type_u60(range: Range) -> Expr:
        return Expr(NumTypeU60(), range)

    @staticmethod
    def type_f60(range: Range) -> Expr:
        return Expr(NumTypeF60(), range)

    @staticmethod
    def num_u60(range: Range, numb: int) -> Expr:
        return Expr(NumU60(numb), range)

    @staticmethod
    def num_u120(range: Range, numb: int) -> Expr:
        """A 120-bit number as ``Data.U120.new hi lo`` of two 60-bit halves."""
        name = QualifiedIdent.new_static("Data.U120.new", None, range)
        lo = Expr.num_u60(range, numb & _U60_MASK)
        hi = Expr.num_u60(range, numb >> 60)
        return Expr(Ctr(name, [hi, lo]), range)

    @staticmethod
    def num_f60(range: Range, numb: int) -> Expr:
        return Expr(NumF60(numb), range)

    @staticmethod
    def binary(range: Range, op: Operator, left: Expr, right: Expr) -> Expr:
        return Expr(Binary(op, left, right), range)

    @staticmethod
    def hole(range: Range, num: int) -> Expr:
        return Expr(Hole(num), range)

    @staticmethod
    def str(range: Range, val: str) -> Expr:
        return Expr(Str(val), range)

    @staticmethod
    def hlp(range: Range, hlp: Ident) -> Expr:
        return Expr(Hlp(hlp), range)

    @staticmethod
    def err(range: Range) -> Expr:
        return Expr(Err(), range)

    def traverse_pi_types(self) -> str:
        """Render a chain of pi types without the outer parentheses."""
        if isinstance(self.data, All):
            node = self.data
            tilde = "~" if node.erased else ""
            body = node.body.traverse_pi_types()
            if str(node.param).startswith("_"):
                return f"{tilde}{node.typ} -> {body}"
            return f"{tilde}({node.param} : {node.typ}) -> {body}"
        return f"{self}"

    def __str__(self) -> str:
        match self.data:
            case Typ():
                return "Type"
            case NumTypeU60():
                return "Data.U60"
            case NumTypeF60():
                return "Data.F60"
            case Str(val=val):
                return f'"{val}"'
            case NumU60(numb=numb):
                return f"{numb}"
            case NumF60():
                raise ValueError("F60 literals have no textual form")
            case All():
                return f"({self.traverse_pi_types()})"
            case Var(name=name):
                return f"{name}"
            case Lambda(param=param, body=body, erased=erased):
                tilde = "~" if erased else ""
                return f"({tilde}{param} => {body})"
            case Sub(name=name, redx=redx, expr=expr):
                return f"(## {name}/{redx} {expr})"
            case App(fun=fun, args=args):
                return f"({fun}{_spine(args)})"
            case Fun(name=name, args=args) | Ctr(name=name, args=args):
                nat = try_desugar_to_nat(name, args, 0)
                if nat is not None:
                    return f"{nat}n"
                if not args:
                    return f"{name}"
                return f"({name}{_spine(args)})"
            case Let(name=name, val=val, next=next_):
                return f"(let {name} = {val}; {next_})"
            case Ann(expr=expr, typ=typ):
                return f"({expr} :: {typ})"
            case Binary(op=op, left=left, right=right):
                return f"({op} {left} {right})"
            case Hole():
                return "_"
            case Hlp(name=name):
                return f"?{name}"
            case Err():
                return "ERR"
        raise TypeError(f"unknown expression kind {self.data!r}")


def try_desugar_to_nat(name: QualifiedIdent, spine: Sequence[Expr], acc: int = 0) -> Optional[int]:
    """Read a chain of ``Data.Nat.succ`` ending in ``Data.Nat.zero`` as a number."""
    match (name.to_str(), len(spine)):
        case ("Data.Nat.zero", 0):
            return acc
        case ("Data.Nat.succ", 1):
            inner = spine[0].data
            if isinstance(inner, Ctr):
                return try_desugar_to_nat(inner.name, inner.args, acc + 1)
    return None


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
        return f"{self.name}{_spine(self.pats)} = {self.body}"


@dataclass
class Entry:
    """A typed top level definition with its rules."""

    name: QualifiedIdent
    args: list[Argument]
    typ: Expr
    rules: list[Rule]
    attrs: Attributes
    range: Range

    def __str__(self) -> str:
        rules = "".join(f"\n{rule}" for rule in self.rules)
        return f"{self.name}{_spine(self.args)} : {self.typ}{rules}"


@dataclass
class Family:
    """A type family: its parameters and constructors."""

    name: QualifiedIdent
    parameters: Telescope[Argument]
    constructors: list[QualifiedIdent]


@dataclass
class Book:
    """A collection of desugared entries."""

    entrs: dict[str, Entry] = field(default_factory=dict)
    names: dict[str, int] = field(default_factory=dict)
    families: dict[str, Family] = field(default_factory=dict)
    holes: int = 0

    def __str__(self) -> str:
        return "".join(f"{entr}\n\n" for entr in self.entrs.values())