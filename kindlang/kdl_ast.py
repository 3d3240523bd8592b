"""Terms, rules and statements of the Kindelia language."""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, Union

_ALPHABET = "." + string.digits + string.ascii_uppercase + string.ascii_lowercase + "_"
_CODES = {chr_: code for code, chr_ in enumerate(_ALPHABET)}


@dataclass(frozen=True, order=True)
class Name:
    """A Kindelia name: up to twelve characters packed six bits each."""

    value: int

    MAX_CHARS: ClassVar[int] = 12
    NONE: ClassVar[Name]

    @staticmethod
    def from_str_unsafe(text: str) -> Name:
        """Encode ``text``; raises ValueError when it is too long or has a bad letter."""
        num = 0
        for i, chr_ in enumerate(text):
            if i >= Name.MAX_CHARS:
                raise ValueError("Too big")
            code = _CODES.get(chr_)
            if code is None:
                raise ValueError(f"Invalid Kindelia Name letter '{chr_}'.")
            num = (num << 6) + code
        return Name(num)

    def is_none(self) -> bool:
        return self.value == 0

    def __str__(self) -> str:
        chars = []
        num = self.value
        while num > 0:
            chars.append(_ALPHABET[num % 64])
            num //= 64
        return "".join(reversed(chars))


Name.NONE = Name(0)


def _show(name: Name) -> str:
    return "~" if name.is_none() else str(name)


class Oper(Enum):
    """Native numeric operators, valued by their textual form."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    AND = "&"
    OR = "|"
    XOR = "^"
    SHL = "<<"
    SHR = ">>"
    LTN = "<"
    LTE = "<="
    EQL = "=="
    GTE = ">="
    GTN = ">"
    NEQ = "!="

    def __str__(self) -> str:
        return self.value


def _spine(args: list[Term]) -> str:
    return "".join(f" {arg}" for arg in args)


@dataclass
class Var:
    name: Name

    def __str__(self) -> str:
        return _show(self.name)


@dataclass
class Dup:
    nam0: Name
    nam1: Name
    expr: Term
    body: Term

    def __str__(self) -> str:
        return f"dup {_show(self.nam0)} {_show(self.nam1)} = {self.expr}; {self.body}"


@dataclass
class Lam:
    name: Name
    body: Term

    def __str__(self) -> str:
        return f"@{_show(self.name)} {self.body}"


@dataclass
class App:
    func: Term
    argm: Term

    def __str__(self) -> str:
        return f"(!{self.func} {self.argm})"


@dataclass
class Ctr:
    name: Name
    args: list[Term] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{{{self.name}{_spine(self.args)}}}"


@dataclass
class Fun:
    name: Name
    args: list[Term] = field(default_factory=list)

    def __str__(self) -> str:
        return f"({self.name}{_spine(self.args)})"


@dataclass
class Num:
    numb: int

    def __str__(self) -> str:
        return f"#{self.numb}"


@dataclass
class Op2:
    oper: Oper
    val0: Term
    val1: Term

    def __str__(self) -> str:
        return f"({self.oper} {self.val0} {self.val1})"


Term = Union[Var, Dup, Lam, App, Ctr, Fun, Num, Op2]


@dataclass
class Rule:
    lhs: Term
    rhs: Term

    def __str__(self) -> str:
        return f"{self.lhs} = {self.rhs}"


@dataclass
class Func:
    rules: list[Rule] = field(default_factory=list)


def _names(args: list[Name]) -> str:
    return "".join(f" {_show(arg)}" for arg in args)


@dataclass
class CtrStatement:
    name: Name
    args: list[Name]
    sign: Optional[object] = None

    def __str__(self) -> str:
        return f"ctr {{{self.name}{_names(self.args)}}}"


@dataclass
class FunStatement:
    name: Name
    args: list[Name]
    func: Func
    init: Optional[Term] = None
    sign: Optional[object] = None

    def __str__(self) -> str:
        rules = "\n".join(f"  {rule}" for rule in self.func.rules)
        text = f"fun ({self.name}{_names(self.args)}) {{\n{rules}\n}}"
        if self.init is not None:
            text += f" with {{ {self.init} }}"
        return text


@dataclass
class RunStatement:
    expr: Term
    sign: Optional[object] = None

    def __str__(self) -> str:
        return f"run {{ {self.expr} }}"


Statement = Union[CtrStatement, FunStatement, RunStatement]