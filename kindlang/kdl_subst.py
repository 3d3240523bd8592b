"""Substitution of a variable by an expression in the untyped tree."""

from __future__ import annotations

import copy

from kindlang.symbol import Ident
from kindlang.untyped import App, Binary, Ctr, Err, Expr, Fun, Lambda, Let, Var


def subst(term: Expr, from_: Ident, to: Expr) -> None:
    """Replace, in place, the free occurrences of ``from_`` in ``term`` by copies of ``to``."""
    name = from_.to_str()
    match term.data:
        case Var(name=var) if var.to_str() == name:
            replacement = copy.deepcopy(to)
            term.data = replacement.data
            term.range = replacement.range
        case App(fun=fun, args=args):
            subst(fun, from_, to)
            for arg in args:
                subst(arg, from_, to)
        case Fun(args=args) | Ctr(args=args):
            for arg in args:
                subst(arg, from_, to)
        case Let(name=bound, val=val, next=next_):
            subst(val, from_, to)
            if bound.to_str() != name:
                subst(next_, from_, to)
        case Binary(left=left, right=right):
            subst(left, from_, to)
            subst(right, from_, to)
        case Lambda(param=param, body=body) if param.to_str() != name:
            subst(body, from_, to)
        case Err():
            raise ValueError("error nodes cannot appear inside the compiler")
        case _:
            pass