from datetime import timedelta
from pathlib import Path

import pytest

from kindlang.diagnostics import (
    Color,
    Diagnostic,
    DiagnosticFrame,
    Failed,
    FileCache,
    Marker,
    Severity,
    Subtitle,
    SubtitleKind,
    Word,
    WordStyle,
)
from kindlang.span import Pos, Range, SyntaxCtxIndex


RANGE = Range(Pos(1), Pos(4), SyntaxCtxIndex(2))


class _Sample(Diagnostic):
    def get_syntax_ctx(self):
        return RANGE.ctx

    def get_severity(self):
        return Severity.WARNING

    def to_diagnostic_frame(self, config):
        return DiagnosticFrame(
            code=1,
            severity=self.get_severity(),
            title="sample",
            positions=[Marker(RANGE, Color.FST, "Here!", main=True)],
        )


class _Cache(FileCache):
    def __init__(self, files):
        self.files = files

    def fetch(self, ctx):
        return self.files.get(ctx)


def test_abstract_diagnostic_cannot_be_created():
    with pytest.raises(TypeError):
        Diagnostic()


def test_concrete_diagnostic_builds_frame():
    diag = _Sample()
    frame = diag.to_diagnostic_frame(None)
    assert diag.get_syntax_ctx() == SyntaxCtxIndex(2)
    assert frame.severity is Severity.WARNING
    assert frame.positions[0].position == RANGE
    assert frame.positions[0].main is True
    assert frame.positions[0].no_code is False
    assert frame.subtitles == [] and frame.hints == []


def test_file_cache_fetch():
    cache = _Cache({SyntaxCtxIndex(0): (Path("a.kind2"), "code")})
    assert cache.fetch(SyntaxCtxIndex(0)) == (Path("a.kind2"), "code")
    assert cache.fetch(SyntaxCtxIndex(1)) is None


def test_word_constructors():
    painted = Word.painted(Color.SND, "x")
    assert painted.style is WordStyle.PAINTED
    assert painted.color is Color.SND
    assert Word.dimmed("y").style is WordStyle.DIMMED
    assert Word.normal("z").color is None


def test_subtitle_constructors():
    words = [Word.white("a")]
    phrase = Subtitle.phrase(Color.THR, words)
    assert phrase.kind is SubtitleKind.PHRASE
    assert phrase.words == words
    assert phrase.words is not words
    assert Subtitle.of_field(Color.FST, "f").kind is SubtitleKind.FIELD
    assert Subtitle.bold(Color.FST, "b").text == "b"
    assert Subtitle.line_break().color is None


def test_failed_log_fields():
    log = Failed(timedelta(seconds=2), 3, 1)
    assert log.duration.total_seconds() == 2
    assert (log.total, log.hidden) == (3, 1)