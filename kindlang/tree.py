"""Attributes and operators shared by the syntax trees."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from kindlang.symbol import Ident


@dataclass
class Attributes:
    """Compiler specific aspects of an entry, such as inlining."""

    inlined: bool = False
    kdl_run: bool = False
    kdl_erase: bool = False
    kdl_name: Optional[Ident] = None
    kdl_state: Optional[Ident] = None
    # None: disabled; False: enabled; True: enabled with arguments.
    trace: Optional[bool] = None
    keep: bool = False
    partial: bool = False
    axiom: bool = False


class Operator(Enum):
    """Binary operators, valued by their textual form."""

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