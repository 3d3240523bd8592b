"""Flattening of nested patterns into chains of auxiliary functions."""

from __future__ import annotations

import copy
import itertools
from dataclasses import replace
from typing import Iterator

from kindlang.kdl_subst import subst
from kindlang.span import Range
from kindlang.symbol import Ident, QualifiedIdent
from kindlang.untyped import F60, U60, Book, Ctr, Entry, Expr, Rule, Var

_LITERAL_OR_CTR = (Ctr, U60, F60)


def _must_split(rule: Rule) -> bool:
    """Whether a constructor pattern holds a constructor or a literal."""
    return any(
        isinstance(arg.data, _LITERAL_OR_CTR)
        for pat in rule.pats
        if isinstance(pat.data, Ctr)
        for arg in pat.data.args
    )


def _matches_together(a: Rule, b: Rule) -> tuple[bool, bool]:
    """Whether rule ``b`` can match what ``a`` matches, and whether they share a shape."""
    same_shape = True
    for a_pat, b_pat in zip(a.pats, b.pats):
        x, y = a_pat.data, b_pat.data
        if isinstance(x, Ctr) and isinstance(y, Ctr):
            if x.name != y.name:
                return False, False
        elif isinstance(x, U60) and isinstance(y, U60) or isinstance(x, F60) and isinstance(y, F60):
            if x.numb != y.numb:
                return False, False
        elif isinstance(x, _LITERAL_OR_CTR) and isinstance(y, _LITERAL_OR_CTR):
            return False, False
        elif isinstance(x, _LITERAL_OR_CTR) and isinstance(y, Var):
            same_shape = False
    return True, same_shape


def _split_rule(
    rule: Rule, entry: Entry, i: int, names: Iterator[int], skip: set[int]
) -> tuple[Rule, list[Entry]]:
    num = next(names)
    new_entry_name = QualifiedIdent.new_static(f"{entry.name.to_str()}{num}_", None, entry.range)
    new_entry_attrs = replace(entry.attrs, kdl_name=None)

    var_count = itertools.count()

    def fresh(range_: Range) -> Expr:
        return Expr.var(Ident.new_static(f".x{next(var_count)}", range_))

    old_rule_pats: list[Expr] = []
    old_rule_body_args: list[Expr] = []

    for pat in rule.pats:
        match pat.data:
            case Var(name=name):
                old_rule_pats.append(copy.deepcopy(pat))
                old_rule_body_args.append(Expr.var(name))
            case U60() | F60():
                old_rule_pats.append(copy.deepcopy(pat))
            case Ctr(name=name, args=args):
                new_pat_args = []
                for field in args:
                    if isinstance(field.data, _LITERAL_OR_CTR):
                        arg = fresh(field.range)
                    elif isinstance(field.data, Var):
                        arg = copy.deepcopy(field)
                    else:
                        raise ValueError("cannot use this kind of expression during flattening")
                    new_pat_args.append(arg)
                    old_rule_body_args.append(copy.deepcopy(arg))
                old_rule_pats.append(Expr.ctr(pat.range, name, new_pat_args))
            case _:
                raise ValueError("invalid pattern while flattening")

    old_rule = Rule(
        name=entry.name,
        pats=old_rule_pats,
        body=Expr.fun(rule.range, new_entry_name, old_rule_body_args),
        range=rule.range,
    )

    new_entry_rules: list[Rule] = []
    for j, other in enumerate(entry.rules[i:], start=i):
        compatible, same_shape = _matches_together(rule, other)
        if not compatible:
            continue
        if same_shape:
            skip.add(j)
        new_rule_pats: list[Expr] = []
        new_rule_body = copy.deepcopy(other.body)
        for rule_pat, other_pat in zip(rule.pats, other.pats):
            x, y = rule_pat.data, other_pat.data
            if isinstance(x, Ctr) and isinstance(y, Ctr):
                new_rule_pats.extend(copy.deepcopy(y.args))
            elif isinstance(x, Ctr) and isinstance(y, Var):
                new_ctr_args = []
                for _ in x.args:
                    new_arg = fresh(rule_pat.range)
                    new_ctr_args.append(new_arg)
                    new_rule_pats.append(copy.deepcopy(new_arg))
                new_ctr = Expr.ctr(x.name.range, x.name, new_ctr_args)
                subst(new_rule_body, y.name, new_ctr)
            elif isinstance(x, Var):
                new_rule_pats.append(copy.deepcopy(other_pat))
            elif isinstance(x, (U60, F60)) and type(x) is type(y):
                pass
            elif isinstance(x, (U60, F60)) and isinstance(y, Var):
                subst(new_rule_body, y.name, rule_pat)
            else:
                raise RuntimeError("incompatible patterns while flattening")
        new_entry_rules.append(
            Rule(new_entry_name, new_rule_pats, new_rule_body, new_entry_name.range)
        )

    if not new_entry_rules:
        raise RuntimeError("a split rule must produce at least one rule")

    new_entry = Entry(
        name=new_entry_name,
        args=[(f"x{n}", Range.ghost_range(), False) for n in range(len(new_entry_rules[0].pats))],
        rules=new_entry_rules,
        attrs=new_entry_attrs,
        range=entry.range,
    )
    return old_rule, _flatten_entry(new_entry)


def _flatten_entry(entry: Entry) -> list[Entry]:
    names = itertools.count()
    skip: set[int] = set()
    new_entries: list[Entry] = []
    old_entry_rules: list[Rule] = []

    for i, rule in enumerate(entry.rules):
        if i in skip:
            continue
        if _must_split(rule):
            old_rule, split_entries = _split_rule(rule, entry, i, names, skip)
            old_entry_rules.append(old_rule)
            new_entries.extend(split_entries)
        else:
            old_entry_rules.append(copy.deepcopy(rule))

    new_entries.append(
        Entry(
            name=entry.name,
            args=list(entry.args),
            rules=old_entry_rules,
            attrs=entry.attrs,
            range=entry.range,
        )
    )
    return new_entries


def flatten(book: Book) -> Book:
    """Return a book in which no constructor pattern nests another pattern."""
    names: dict[str, int] = {}
    entrs: dict[str, Entry] = {}
    for name in book.names:
        for entry in _flatten_entry(book.entrs[name]):
            key = str(entry.name)
            names[key] = len(entrs)
            entrs[key] = entry
    return Book(entrs=entrs, names=names)