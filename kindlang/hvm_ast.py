"""Terms, rules and files of the HVM runtime language."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass
class Var:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass
class Lam:
    name: str
    body: Term

    def __str__(self) -> str:
        return f"@{self.name} {self.body}"


@dataclass
class App:
    func: Term
    argm: Term

    def __str__(self) -> str:
        return f"({self.func} {self.argm})"


@dataclass
class Ctr:
    name: str
    args: list[Term] = field(default_factory=list)

    def __str__(self) -> str:
        args = "".join(f" {arg}" for arg in self.args)
        return f"({self.name}{args})"


@dataclass
class U60:
    numb: int

    def __str__(self) -> str:
        return f"{self.numb}"


@dataclass
class Let:
    name: str
    expr: Term
    body: Term

    def __str__(self) -> str:
        return f"let {self.name} = {self.expr}; {self.body}"


Term = Union[Var, Lam, App, Ctr, U60, Let]


@dataclass
class Rule:
    lhs: Term
    rhs: Term

    def __str__(self) -> str:
        return f"{self.lhs} = {self.rhs}"


@dataclass
class File:
    """A list of rewrite rules and the strictness maps of functions."""

    rules: list[Rule] = field(default_factory=list)
    smaps: list[tuple[str, list[bool]]] = field(default_factory=list)

    def __str__(self) -> str:
        return "".join(f"{rule}\n" for rule in self.rules)