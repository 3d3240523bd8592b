"""Compilation of the untyped tree to HVM rewrite rules."""

from __future__ import annotations

from kindlang import untyped
from kindlang.hvm_ast import App, Ctr, File, Lam, Let, Rule, Term, U60, Var

_U60_MASK = 0xFFFFFFFFFFFFFFF


def compile_book(book: untyped.Book, trace: bool) -> File:
    """Compile every entry of ``book``; ``trace`` logs every function call."""
    file = File()
    for entry in book.entrs.values():
        _compile_entry(file, entry, trace)
    return file


def compile_str(val: str) -> Term:
    """A string as a list of ``Data.String.cons`` cells ending in ``Data.String.nil``."""
    term: Term = Ctr("Data.String.nil", [])
    for chr_ in reversed(val):
        term = Ctr("Data.String.cons", [U60(ord(chr_)), term])
    return term


def compile_term(expr: untyped.Expr) -> Term:
    match expr.data:
        case untyped.Var(name=name):
            return Var(str(name))
        case untyped.Lambda(param=param, body=body):
            return Lam(str(param), compile_term(body))
        case untyped.App(fun=fun, args=args):
            term = compile_term(fun)
            for arg in args:
                term = App(term, compile_term(arg))
            return term
        case untyped.Fun(name=name, args=args) | untyped.Ctr(name=name, args=args):
            return Ctr(str(name), [compile_term(arg) for arg in args])
        case untyped.Let(name=name, val=val, next=next_):
            return Let(str(name), compile_term(val), compile_term(next_))
        case untyped.U60(numb=numb):
            return U60(numb & _U60_MASK)
        case untyped.F60():
            raise ValueError("F60 numbers cannot be compiled to HVM")
        case untyped.Binary(op=op, left=left, right=right):
            return Ctr(str(op), [compile_term(left), compile_term(right)])
        case untyped.Str(val=val):
            return compile_str(val)
        case untyped.Err():
            raise ValueError("'ERR' cannot be a relevant term")
    raise TypeError(f"unknown expression kind {expr.data!r}")


def _compile_rule(name: str, rule: untyped.Rule) -> Rule:
    lhs = Ctr(name, [compile_term(pat) for pat in rule.pats])
    return Rule(lhs, compile_term(rule.body))


def _compile_entry(file: File, entry: untyped.Entry, trace: bool) -> None:
    name = str(entry.name)
    if entry.attrs.trace is None and not trace:
        file.rules.extend(_compile_rule(name, rule) for rule in entry.rules)
        return

    name_trace = f"{entry.name}__trace"
    file.rules.extend(_compile_rule(name_trace, rule) for rule in entry.rules)

    def args() -> list[Term]:
        return [Var(f"_{i}{arg[0]}") for i, arg in enumerate(entry.args)]

    file.rules.append(
        Rule(
            lhs=Ctr(name, args()),
            rhs=Ctr("Apps.HVM.log", [compile_str(entry.name.to_str()), Ctr(name_trace, args())]),
        )
    )