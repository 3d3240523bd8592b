import pytest

from kindlang.desugared import (
    All,
    AppBinding,
    Argument,
    Book,
    Ctr,
    Entry,
    Expr,
    Lambda,
    NumU60,
    Rule,
    try_desugar_to_nat,
)
from kindlang.span import Range
from kindlang.symbol import Ident, QualifiedIdent
from kindlang.tree import Attributes, Operator

R = Range.ghost_range()


def ident(name):
    return Ident.new_static(name, R)


def qual(name):
    return QualifiedIdent.new_static(name, None, R)


def nat(n):
    expr = Expr.ctr(R, qual("Data.Nat.zero"), [])
    for _ in range(n):
        expr = Expr.ctr(R, qual("Data.Nat.succ"), [expr])
    return expr


def test_num_u120_splits_into_halves():
    expr = Expr.num_u120(R, (5 << 60) | 7)
    assert isinstance(expr.data, Ctr)
    assert expr.data.name.to_str() == "Data.U120.new"
    hi, lo = expr.data.args
    assert hi.data == NumU60(5)
    assert lo.data == NumU60(7)


def test_num_u120_low_half_is_masked():
    expr = Expr.num_u120(R, (1 << 60) - 1)
    hi, lo = expr.data.args
    assert hi.data.numb == 0
    assert lo.data.numb == (1 << 60) - 1


@pytest.mark.parametrize("n", [0, 1, 4])
def test_try_desugar_to_nat(n):
    expr = nat(n)
    assert try_desugar_to_nat(expr.data.name, expr.data.args, 0) == n
    assert str(expr) == f"{n}n"


def test_try_desugar_to_nat_rejects_non_constructor():
    assert try_desugar_to_nat(qual("Data.Nat.succ"), [Expr.var(ident("x"))], 0) is None
    assert try_desugar_to_nat(qual("Other"), [], 0) is None


def test_display_of_basic_forms():
    assert str(Expr.typ(R)) == "Type"
    assert str(Expr.type_u60(R)) == "Data.U60"
    assert str(Expr.hole(R, 3)) == "_"
    assert str(Expr.err(R)) == "ERR"
    assert str(Expr.hlp(R, ident("goal"))) == "?goal"


def test_display_of_function_application():
    call = Expr.fun(R, qual("Foo"), [Expr.num_u60(R, 1), Expr.var(ident("y"))])
    assert str(call) == "(Foo 1 y)"
    assert str(Expr.fun(R, qual("Foo"), [])) == "Foo"


def test_display_of_app_with_erased_binding():
    expr = Expr.app(
        R, Expr.var(ident("f")), [AppBinding(Expr.var(ident("a"))), AppBinding(Expr.var(ident("b")), True)]
    )
    assert str(expr) == "(f a ~(b))"


def test_display_of_lambda_let_binary_ann():
    body = Expr.var(ident("x"))
    assert str(Expr.lambda_(R, ident("x"), body, False)) == "(x => x)"
    assert str(Expr.lambda_(R, ident("x"), body, True)) == "(~x => x)"
    let = Expr.let_(R, ident("x"), Expr.num_u60(R, 2), body)
    assert str(let) == "(let x = 2; x)"
    binary = Expr.binary(R, Operator.ADD, Expr.num_u60(R, 1), Expr.num_u60(R, 2))
    assert str(binary) == "(+ 1 2)"
    assert str(Expr.ann(R, body, Expr.typ(R))) == "(x :: Type)"


def test_traverse_pi_types_hides_underscore_binders():
    body = Expr.typ(R)
    anonymous = Expr.all(R, ident("_x"), Expr.type_u60(R), body, False)
    named = Expr.all(R, ident("a"), Expr.type_u60(R), body, True)
    assert str(anonymous) == "(Data.U60 -> Type)"
    assert str(named) == "(~(a : Data.U60) -> Type)"


def test_num_f60_has_no_text():
    with pytest.raises(ValueError):
        str(Expr.num_f60(R, 0))


def test_identity_lambda():
    expr = Expr.identity_lambda(ident("z"))
    assert isinstance(expr.data, Lambda)
    assert expr.data.body == Expr.var(ident("z"))
    assert expr.data.erased is False


def test_unfold_lambda_nests_in_order():
    body = Expr.var(ident("c"))
    expr = Expr.unfold_lambda([False, True], [ident("a"), ident("b")], body)
    assert expr.data.param == ident("a")
    assert expr.data.erased is True
    inner = expr.data.body
    assert inner.data.param == ident("b")
    assert inner.data.erased is False
    assert inner.data.body == body


def test_unfold_all_nests_in_order():
    body = Expr.typ(R)
    expr = Expr.unfold_all([False], [(ident("a"), Expr.type_u60(R))], body)
    assert isinstance(expr.data, All)
    assert expr.data.param == ident("a")
    assert expr.data.body == body


def test_argument_helpers_and_display():
    arg = Argument.from_field(ident("x"), Expr.typ(R), R)
    assert str(arg) == "(x: Type)"
    irrelevant = arg.to_irrelevant()
    assert irrelevant.hidden and irrelevant.erased
    assert str(irrelevant) == "<x: Type>"


def test_entry_and_book_display():
    rule = Rule(qual("Id"), [Expr.var(ident("x"))], Expr.var(ident("x")), R)
    entry = Entry(
        qual("Id"), [Argument.from_field(ident("x"), Expr.typ(R), R)], Expr.typ(R), [rule], Attributes(), R
    )
    assert str(entry) == "Id (x: Type) : Type\nId x = x"
    book = Book(entrs={"Id": entry})
    assert str(book) == f"{entry}\n\n"
    assert book.holes == 0