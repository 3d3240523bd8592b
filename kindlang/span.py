"""Source positions, ranges and their packed 64-bit encoding."""

from __future__ import annotations

from dataclasses import dataclass

_MASK24 = 0xFFFFFF
_MASK64 = 0xFFFF_FFFF_FFFF_FFFF


@dataclass(frozen=True, order=True)
class Pos:
    """Byte offset inside a syntax context."""

    index: int


@dataclass(frozen=True, order=True)
class SyntaxCtxIndex:
    """Index of a syntax context (usually a source file)."""

    value: int

    def is_root(self) -> bool:
        """Whether this is the root context (index zero)."""
        return self.value == 0


@dataclass(frozen=True, order=True)
class EncodedRange:
    """A range packed into one 64-bit integer."""

    value: int

    def to_range(self) -> Range:
        """Unpack the encoded value back into a range."""
        return Range(
            start=Pos(self.value & _MASK24),
            end=Pos((self.value >> 24) & _MASK24),
            ctx=SyntaxCtxIndex(self.value >> 48),
        )


@dataclass(frozen=True)
class Range:
    """A span of source code inside a syntax context."""

    start: Pos
    end: Pos
    ctx: SyntaxCtxIndex

    @staticmethod
    def ghost_range() -> Range:
        """A zero-width range at the start of the root context."""
        return Range(Pos(0), Pos(0), SyntaxCtxIndex(0))

    def mix(self, next: Range) -> Range:
        """Join two ranges, keeping the syntax context of this one."""
        return Range(self.start, next.end, self.ctx)

    def set_ctx(self, ctx: SyntaxCtxIndex) -> Range:
        """Return the same range in another syntax context."""
        return Range(self.start, self.end, ctx)

    def encode(self) -> EncodedRange:
        """Pack the range: 24 bits start, 24 bits end, 16 bits context."""
        packed = (
            (self.ctx.value << 48)
            | (self.start.index & _MASK24)
            | ((self.end.index & _MASK24) << 24)
        )
        return EncodedRange(packed & _MASK64)