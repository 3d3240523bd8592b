import pytest

from kindlang.span import EncodedRange, Pos, Range, SyntaxCtxIndex


def make(start, end, ctx):
    return Range(Pos(start), Pos(end), SyntaxCtxIndex(ctx))


@pytest.mark.parametrize(
    "start,end,ctx",
    [(0, 0, 0), (1, 2, 3), (0xFFFFFF, 0xFFFFFF, 0xFFFF), (100, 5000, 42)],
)
def test_encode_round_trip(start, end, ctx):
    rng = make(start, end, ctx)
    assert rng.encode().to_range() == rng


def test_ghost_range_encodes_to_zero():
    assert Range.ghost_range().encode() == EncodedRange(0)


def test_ghost_range_is_root():
    assert Range.ghost_range().ctx.is_root()
    assert not SyntaxCtxIndex(1).is_root()


def test_encode_layout():
    packed = make(1, 2, 3).encode().value
    assert packed >> 48 == 3
    assert packed & 0xFFFFFF == 1
    assert (packed >> 24) & 0xFFFFFF == 2


def test_start_truncated_to_24_bits():
    decoded = make(0x1000005, 7, 0).encode().to_range()
    assert decoded.start == Pos(5)
    assert decoded.end == Pos(7)


def test_context_truncated_to_64_bits():
    decoded = make(0, 0, 0x10001).encode().to_range()
    assert decoded.ctx == SyntaxCtxIndex(1)


def test_mix_keeps_first_context():
    first = make(1, 5, 2)
    second = make(10, 20, 7)
    assert first.mix(second) == make(1, 20, 2)


def test_set_ctx():
    moved = make(1, 2, 3).set_ctx(SyntaxCtxIndex(9))
    assert moved.ctx == SyntaxCtxIndex(9)
    assert (moved.start, moved.end) == (Pos(1), Pos(2))


def test_pos_ordering():
    assert sorted([Pos(3), Pos(1), Pos(2)]) == [Pos(1), Pos(2), Pos(3)]


def test_ranges_are_hashable():
    assert len({make(1, 2, 3), make(1, 2, 3), make(1, 2, 4)}) == 2