import pytest

from kindlang.span import Pos, Range, SyntaxCtxIndex
from kindlang.symbol import Ident, QualifiedIdent
from kindlang.tree import Attributes, Operator
from kindlang.untyped import (
    Argument,
    Book,
    Ctr,
    Entry,
    Expr,
    Lambda,
    Rule,
    U60,
    Var,
)

GHOST = Range.ghost_range()
SOME_RANGE = Range(Pos(2), Pos(9), SyntaxCtxIndex(1))


def ident(name, rng=GHOST):
    return Ident.new_static(name, rng)


def qual(name):
    return QualifiedIdent.new_static(name, None, GHOST)


def test_var_takes_range_of_ident():
    expr = Expr.var(ident("x", SOME_RANGE))
    assert expr.range == SOME_RANGE
    assert expr.data == Var(ident("x", SOME_RANGE))
    assert str(expr) == "x"


def test_lambda_display():
    body = Expr.var(ident("x"))
    assert str(Expr.lambda_(GHOST, ident("x"), body, False)) == "(x => x)"
    assert str(Expr.lambda_(GHOST, ident("x"), body, True)) == "(~x => x)"


def test_app_display():
    expr = Expr.app(GHOST, Expr.var(ident("f")), [Expr.var(ident("a")), Expr.var(ident("b"))])
    assert str(expr) == "(f a b)"


def test_fun_without_args_prints_name():
    assert str(Expr.fun(GHOST, qual("Nat.zero"), [])) == "Nat.zero"


def test_ctr_with_args():
    expr = Expr.ctr(SOME_RANGE, qual("Pair"), [Expr.u60(GHOST, 1), Expr.u60(GHOST, 2)])
    assert str(expr).startswith("(Pair ")
    assert expr.range == SOME_RANGE
    assert isinstance(expr.data, Ctr) and len(expr.data.args) == 2


def test_let_and_binary_display():
    let = Expr.let_(GHOST, ident("y"), Expr.u60(GHOST, 1), Expr.var(ident("y")))
    assert str(let) == "(let y = 1; y)"
    binary = Expr.binary(GHOST, Operator.ADD, Expr.u60(GHOST, 1), Expr.u60(GHOST, 2))
    assert str(binary) == f"({Operator.ADD} 1 2)"


def test_str_and_err_display():
    assert str(Expr.str(GHOST, "hi")) == '"hi"'
    assert str(Expr.err(GHOST)) == "ERR"


def test_f60_has_no_display():
    with pytest.raises(ValueError):
        str(Expr.f60(GHOST, 0))


def test_factories_copy_arg_lists():
    args = [Expr.u60(GHOST, 3)]
    expr = Expr.fun(GHOST, qual("F"), args)
    args.append(Expr.u60(GHOST, 4))
    assert expr.data.args == [Expr.u60(GHOST, 3)]


def test_expr_equality():
    assert Expr.u60(GHOST, 5) == Expr(U60(5), GHOST)
    body = Expr.var(ident("x"))
    assert Expr.lambda_(GHOST, ident("x"), body, False).data == Lambda(ident("x"), body, False)


def test_argument_irrelevant_and_from_field():
    arg = Argument.from_field(ident("a"), Expr.var(ident("T")), SOME_RANGE)
    assert (arg.hidden, arg.erased) == (False, False)
    irr = arg.to_irrelevant()
    assert (irr.hidden, irr.erased) == (True, True)
    assert irr.name == arg.name and irr.range == arg.range


def test_argument_display_brackets():
    arg = Argument.from_field(ident("a"), Expr.var(ident("T")), GHOST)
    assert str(arg) == "(a: T)"
    assert str(arg.to_irrelevant()) == "<a: T>"


def test_rule_display():
    rule = Rule(qual("Id"), [Expr.var(ident("x"))], Expr.var(ident("x")), GHOST)
    assert str(rule) == "Id x = x"


def test_book_display_distinguishes_constructors():
    rule = Rule(qual("Id"), [Expr.var(ident("x"))], Expr.var(ident("x")), GHOST)
    fun = Entry(qual("Id"), [("x", GHOST, False)], [rule], Attributes(), GHOST)
    ctr = Entry(qual("Nil"), [], [], Attributes(), GHOST)
    book = Book(entrs={"Id": fun, "Nil": ctr}, names={"Id": 0, "Nil": 1})
    assert str(book) == f"\n{rule}\nctr Nil\n"