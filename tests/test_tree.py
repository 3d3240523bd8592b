from dataclasses import replace

import pytest

from kindlang.symbol import Ident
from kindlang.tree import Attributes, Operator


@pytest.mark.parametrize(
    "op,text",
    [
        (Operator.ADD, "+"),
        (Operator.SUB, "-"),
        (Operator.MUL, "*"),
        (Operator.DIV, "/"),
        (Operator.MOD, "%"),
        (Operator.AND, "&"),
        (Operator.OR, "|"),
        (Operator.XOR, "^"),
        (Operator.SHL, "<<"),
        (Operator.SHR, ">>"),
        (Operator.LTN, "<"),
        (Operator.LTE, "<="),
        (Operator.EQL, "=="),
        (Operator.GTE, ">="),
        (Operator.GTN, ">"),
        (Operator.NEQ, "!="),
    ],
)
def test_operator_display(op, text):
    assert str(op) == text
    assert Operator(text) is op


def test_operator_count_and_round_trip():
    round_tripped = [Operator(str(op)) for op in Operator]
    assert round_tripped == list(Operator)
    assert len(round_tripped) == 16


def test_attributes_defaults():
    attrs = Attributes()
    assert attrs.kdl_name is None
    assert attrs.trace is None
    assert not any([attrs.inlined, attrs.kdl_run, attrs.kdl_erase, attrs.keep, attrs.partial, attrs.axiom])


def test_attributes_copy_is_independent():
    attrs = Attributes(kdl_name=Ident.generate("Foo"))
    copy = replace(attrs, kdl_name=None)
    assert copy.kdl_name is None
    assert attrs.kdl_name.to_str() == "Foo"