import pytest

from kindlang.span import Pos, Range, SyntaxCtxIndex
from kindlang.symbol import Ident, QualifiedIdent, Symbol

GHOST = Range.ghost_range()
SOME_RANGE = Range(Pos(3), Pos(8), SyntaxCtxIndex(1))


def test_symbol_equality_and_emptiness():
    assert Symbol("a") == Symbol("a")
    assert Symbol("").is_empty()
    assert not Symbol("a").is_empty()


@pytest.mark.parametrize("name", ["Foo", "a_b9", "x.y", "Z"])
def test_encode_decode_round_trip(name):
    assert Ident.decode(Ident.new_static(name, GHOST).encode()) == name


def test_encode_rejects_invalid_character():
    with pytest.raises(ValueError):
        Ident.new_static("a-b", GHOST).encode()


def test_encode_uses_only_ten_characters():
    long = Ident.new_static("abcdefghijkl", GHOST)
    short = Ident.new_static("abcdefghij", GHOST)
    assert long.encode() == short.encode()


def test_decode_zero_is_empty():
    assert Ident.decode(0) == ""


def test_ident_from_string_coerces():
    assert Ident("x", GHOST) == Ident.new_static("x", GHOST)


def test_sugar_marks_generated():
    sugared = Ident.new_by_sugar("x", GHOST)
    assert sugared.generated
    assert not Ident.new_static("x", GHOST).generated
    assert sugared.to_str() == "x"


def test_add_underscore_and_segment():
    base = Ident.new_static("foo", SOME_RANGE)
    assert base.add_underscore().to_str() == "foo_"
    segmented = base.add_segment("bar")
    assert segmented.to_str() == "foo.bar"
    assert segmented.range == SOME_RANGE


def test_with_name():
    assert Ident.new_static("foo", GHOST).with_name(str.upper).to_str() == "FOO"


def test_to_generated_keeps_name():
    gen = Ident.new_static("foo", SOME_RANGE).to_generated()
    assert gen.generated
    assert gen.range == SOME_RANGE


def test_generate_uses_ghost_range():
    gen = Ident.generate("tmp")
    assert gen.range == GHOST
    assert gen.generated


def test_set_ctx_clears_generated_and_keeps_range():
    ident = Ident.new_by_sugar("x", SOME_RANGE)
    moved = ident.set_ctx(SyntaxCtxIndex(5))
    assert moved.generated is False
    assert moved.range == ident.range
    assert moved.to_str() == "x"


def test_ident_to_qualified():
    qual = Ident.new_static("Data.Nat", SOME_RANGE).to_qualified_ident()
    assert qual.to_str() == "Data.Nat"
    assert qual.get_aux() is None
    assert qual.range == SOME_RANGE


def test_qualified_display_with_aux():
    qual = QualifiedIdent.new_static("A", "B", GHOST)
    assert str(qual) == "A/B"
    assert qual.get_aux() == Symbol("B")


def test_qualified_reset_aux():
    qual = QualifiedIdent.new_static("A", "B", GHOST)
    qual.reset_aux()
    assert str(qual) == "A"


def test_qualified_change_root():
    qual = QualifiedIdent.new_static("A", None, GHOST)
    qual.change_root("Other")
    assert qual.get_root() == "Other"


def test_pop_last_segment():
    qual = QualifiedIdent.new_static("Data.U60.add", None, SOME_RANGE)
    popped = qual.pop_last_segment()
    assert popped.to_str() == "Data.U60"
    assert popped.range == SOME_RANGE


def test_add_segment_then_pop_round_trip():
    qual = QualifiedIdent.new_static("Data.List", None, GHOST)
    assert qual.add_segment("cons").pop_last_segment() == qual


def test_new_sugared():
    qual = QualifiedIdent.new_sugared("Data.String", "cons", GHOST)
    assert qual.to_str() == "Data.String.cons"
    assert qual.generated


def test_to_ident_uses_display():
    qual = QualifiedIdent.new_static("A", "B", SOME_RANGE).to_generated()
    ident = qual.to_ident()
    assert ident.to_str() == str(qual)
    assert ident.generated


def test_qualified_hashable():
    first = QualifiedIdent.new_static("A", None, GHOST)
    second = QualifiedIdent.new_static("A", None, GHOST)
    assert len({first, second}) == 1