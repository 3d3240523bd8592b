"""Data describing diagnostics, log messages and the files they point into."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from kindlang.span import Range, SyntaxCtxIndex

if TYPE_CHECKING:
    from kindlang.render_config import RenderConfig


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Color(Enum):
    """Marker colours, in order of use."""

    FST = 1
    SND = 2
    THR = 3
    FOR = 4
    FFT = 5


class WordStyle(Enum):
    DIMMED = "dimmed"
    WHITE = "white"
    NORMAL = "normal"
    PAINTED = "painted"


@dataclass
class Word:
    """A word of a subtitle phrase; ``color`` is set for painted words."""

    style: WordStyle
    text: str
    color: Optional[Color] = None

    @classmethod
    def dimmed(cls, text: str) -> Word:
        return cls(WordStyle.DIMMED, text)

    @classmethod
    def white(cls, text: str) -> Word:
        return cls(WordStyle.WHITE, text)

    @classmethod
    def normal(cls, text: str) -> Word:
        return cls(WordStyle.NORMAL, text)

    @classmethod
    def painted(cls, color: Color, text: str) -> Word:
        return cls(WordStyle.PAINTED, text, color)


class SubtitleKind(Enum):
    FIELD = "field"
    NORMAL = "normal"
    BOLD = "bold"
    PHRASE = "phrase"
    LINE_BREAK = "line_break"


@dataclass
class Subtitle:
    """A line under the diagnostic title."""

    kind: SubtitleKind
    color: Optional[Color] = None
    text: str = ""
    words: list[Word] = field(default_factory=list)

    @classmethod
    def of_field(cls, color: Color, text: str) -> Subtitle:
        return cls(SubtitleKind.FIELD, color, text)

    @classmethod
    def normal(cls, color: Color, text: str) -> Subtitle:
        return cls(SubtitleKind.NORMAL, color, text)

    @classmethod
    def bold(cls, color: Color, text: str) -> Subtitle:
        return cls(SubtitleKind.BOLD, color, text)

    @classmethod
    def phrase(cls, color: Color, words: list[Word]) -> Subtitle:
        return cls(SubtitleKind.PHRASE, color, words=list(words))

    @classmethod
    def line_break(cls) -> Subtitle:
        return cls(SubtitleKind.LINE_BREAK)


@dataclass
class Marker:
    """A highlighted span of code with a label."""

    position: Range
    color: Color
    text: str
    no_code: bool = False
    main: bool = False


@dataclass
class DiagnosticFrame:
    """Everything needed to render one diagnostic."""

    code: int
    severity: Severity
    title: str
    subtitles: list[Subtitle] = field(default_factory=list)
    hints: list[str] = field(default_factory=list)
    positions: list[Marker] = field(default_factory=list)


@dataclass
class Checking:
    file: str


@dataclass
class Checked:
    duration: timedelta


@dataclass
class Compiled:
    duration: timedelta


@dataclass
class Rewrites:
    count: int


@dataclass
class Failed:
    duration: timedelta
    total: int
    hidden: int


@dataclass
class Empty:
    pass


Log = Union[Checking, Checked, Compiled, Rewrites, Failed, Empty]


class Diagnostic(ABC):
    """Something that can be reported to the user."""

    @abstractmethod
    def get_syntax_ctx(self) -> Optional[SyntaxCtxIndex]:
        """The syntax context the diagnostic belongs to, if any."""

    @abstractmethod
    def get_severity(self) -> Severity:
        """How serious the diagnostic is."""

    @abstractmethod
    def to_diagnostic_frame(self, config: RenderConfig) -> DiagnosticFrame:
        """Build the frame that is rendered for this diagnostic."""


class FileCache(ABC):
    """Gives the path and the text of a syntax context."""

    @abstractmethod
    def fetch(self, ctx: SyntaxCtxIndex) -> Optional[tuple[Path, str]]:
        """The file path and source code of ``ctx``, or None if unknown."""