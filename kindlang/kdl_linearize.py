"""Make every variable of a Kindelia rule linear and uniquely named.

Variables get globally unique names. Variables used more than once are
duplicated with ``dup``, variables used once are bound by a ``let`` (a lambda
applied to the value) and variables never used are renamed to the empty name.
For example ``(Foo a b) = (+ a a)`` becomes
``(Foo x0 ~) = dup x0.0 x0.1 = x0; (+ x0.0 x0.1)``.
"""

from __future__ import annotations

from kindlang.kdl_ast import (
    App,
    Ctr,
    Dup,
    Fun,
    Func,
    FunStatement,
    Lam,
    Name,
    Num,
    Op2,
    Rule,
    RunStatement,
    Term,
    Var,
)
from kindlang.kdl_compile import KdlFile


class LinearizeCtx:
    """Use counts and renamings for the variables of one rule or term."""

    def __init__(self) -> None:
        self.uses: dict[Name, int] = {}
        self.name_table: dict[Name, Name] = {}
        self.name_count = 0

    def create_name(self) -> Name:
        """A fresh name of the form ``x<n>``."""
        name = Name.from_str_unsafe(f"x{self.name_count}")
        self.name_count += 1
        return name

    def _bind(self, name: Name, new_name: Name) -> None:
        # Rebinding moves the entry to the end, keeping insertion order meaningful.
        self.name_table.pop(name, None)
        self.name_table[name] = new_name

    def create_param_names(self, rule: Rule) -> None:
        """Give a fresh name to every variable on the left-hand side of ``rule``."""
        if not isinstance(rule.lhs, Fun):
            raise ValueError(f"invalid left-hand side term: expected a function, got {rule.lhs!r}")
        for arg in rule.lhs.args:
            match arg:
                case Var(name=name):
                    self._bind(name, self.create_name())
                case Ctr(args=fields):
                    for field in fields:
                        if not isinstance(field, Var):
                            raise ValueError("expected a flat rule")
                        self._bind(field.name, self.create_name())
                case Num():
                    pass
                case _:
                    raise ValueError(
                        f"invalid left-hand side parameter: expected Var, Ctr or Num, got {arg!r}"
                    )


def linearize_file(file: KdlFile) -> KdlFile:
    """Linearize every function rule, initial state and run block of ``file``."""
    runs = []
    for stmt in file.runs:
        if not isinstance(stmt, RunStatement):
            raise ValueError(f"expected a run statement, found {stmt!r}")
        runs.append(RunStatement(linearize_term_independent(stmt.expr)))

    funs: dict[str, FunStatement] = {}
    for kind_name, stmt in file.funs.items():
        if not isinstance(stmt, FunStatement):
            raise ValueError(f"expected a function statement, found {stmt!r}")
        init = linearize_term_independent(stmt.init) if stmt.init is not None else None
        func = Func([linearize_rule(rule) for rule in stmt.func.rules])
        funs[kind_name] = FunStatement(stmt.name, stmt.args, func, init)

    return KdlFile(ctrs=file.ctrs, funs=funs, runs=runs)


def linearize_rule(rule: Rule) -> Rule:
    ctx = LinearizeCtx()
    ctx.create_param_names(rule)
    rhs = linearize_term(ctx, rule.rhs, False)
    lhs = linearize_term(ctx, rule.lhs, True)
    for val in list(ctx.name_table.values()):
        rhs = dup_var(ctx, val, Var(val), rhs)
    return Rule(lhs, rhs)


def linearize_term(ctx: LinearizeCtx, term: Term, lhs: bool) -> Term:
    """Rename and count variables of ``term``; ``lhs`` marks a rule's left side."""
    match term:
        case Var(name=name):
            if lhs:
                return Var(rename_erased(ctx, ctx.name_table.get(name, name)))
            new_name = ctx.name_table.get(name)
            if new_name is None:
                raise ValueError(f"unbound variable '{name}' in kdl compilation")
            used = ctx.uses.get(new_name, 0) + 1
            ctx.uses[new_name] = used
            return Var(Name.from_str_unsafe(f"{new_name}.{used - 1}"))
        case Dup(nam0=nam0, nam1=nam1, expr=expr, body=body):
            new_nam0 = ctx.create_name()
            new_nam1 = ctx.create_name()
            expr = linearize_term(ctx, expr, lhs)
            got_0 = ctx.name_table.pop(nam0, None)
            got_1 = ctx.name_table.pop(nam0, None)
            ctx._bind(nam0, new_nam0)
            ctx._bind(nam1, new_nam1)
            body = linearize_term(ctx, body, lhs)
            ctx.name_table.pop(nam0, None)
            if got_0 is not None:
                ctx.name_table[nam0] = got_0
            ctx.name_table.pop(nam1, None)
            if got_1 is not None:
                ctx.name_table[nam1] = got_1
            return Dup(
                Name.from_str_unsafe(f"{new_nam0}.0"),
                Name.from_str_unsafe(f"{new_nam1}.0"),
                expr,
                body,
            )
        case Lam(name=name, body=body):
            new_name = ctx.create_name()
            saved = ctx.name_table.pop(name, None)
            ctx.name_table[name] = new_name
            body = linearize_term(ctx, body, lhs)
            ctx.name_table.pop(name, None)
            if saved is not None:
                ctx.name_table[name] = saved
            body = dup_var(ctx, new_name, Var(new_name), body)
            return Lam(rename_erased(ctx, new_name), body)
        case App(func=func, argm=argm):
            func = linearize_term(ctx, func, lhs)
            argm = linearize_term(ctx, argm, lhs)
            return App(func, argm)
        case Ctr(name=name, args=args):
            return Ctr(name, [linearize_term(ctx, arg, lhs) for arg in args])
        case Fun(name=name, args=args):
            return Fun(name, [linearize_term(ctx, arg, lhs) for arg in args])
        case Num(numb=numb):
            return Num(numb)
        case Op2(oper=oper, val0=val0, val1=val1):
            val0 = linearize_term(ctx, val0, lhs)
            val1 = linearize_term(ctx, val1, lhs)
            return Op2(oper, val0, val1)
    raise TypeError(f"unknown term {term!r}")


def linearize_term_independent(term: Term) -> Term:
    """Linearize a term that is not part of a rule, with a context of its own."""
    return linearize_term(LinearizeCtx(), term, False)


def rename_erased(ctx: LinearizeCtx, name: Name) -> Name:
    """The empty name if ``name`` is never used, otherwise ``name`` itself."""
    if ctx.uses.get(name, 0) <= 0:
        return Name.NONE
    return name


def dup_var(ctx: LinearizeCtx, name: Name, expr: Term, body: Term) -> Term:
    """Bind the uses of ``name`` in ``body`` to ``expr``, duplicating when needed."""
    amount = ctx.uses.get(name)
    if amount is None or amount == 0:
        return body
    if amount == 1:
        return App(Lam(Name.from_str_unsafe(f"{name}.0"), body), expr)

    dup_times = amount - 1
    aux_amount = amount - 2
    names = [
        Name.from_str_unsafe(f"{name}.{i - aux_amount}")
        for i in reversed(range(aux_amount, dup_times * 2))
    ]
    names.extend(Name.from_str_unsafe(f"c.{i}") for i in reversed(range(aux_amount)))

    nam0 = names.pop()
    nam1 = names.pop()
    pairs = [(names.pop(), names.pop()) for _ in range(1, dup_times)]

    inner = body
    for idx, (first, second) in reversed(list(enumerate(pairs, start=1))):
        inner = Dup(first, second, Var(Name.from_str_unsafe(f"c.{idx - 1}")), inner)
    return Dup(nam0, nam1, expr, inner)