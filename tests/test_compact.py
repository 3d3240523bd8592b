from datetime import timedelta
from pathlib import Path

import pytest

from kindlang.compact import (
    render_code_block,
    render_frame,
    render_header,
    render_log,
    render_markers,
    render_subtitles,
)
from kindlang.diagnostics import (
    Checked,
    Checking,
    Color,
    Compiled,
    DiagnosticFrame,
    Empty,
    FileCache,
    Marker,
    Severity,
    Subtitle,
    Word,
)
from kindlang.render_config import RenderConfig
from kindlang.span import Pos, Range, SyntaxCtxIndex

CTX = SyntaxCtxIndex(0)


def span(start, end, ctx=CTX):
    return Range(Pos(start), Pos(end), ctx)


class DictCache(FileCache):
    def __init__(self, files):
        self.files = files

    def fetch(self, ctx):
        return self.files.get(ctx)


CONFIG = RenderConfig.compact(0, False, False)


def test_header_is_lowercased():
    assert render_header("Invalid Name") == "invalid name\n"


def test_empty_subtitles_render_nothing():
    assert render_subtitles([]) == ""


def test_subtitle_kinds():
    subtitles = [
        Subtitle.of_field(Color.FST, "Expected"),
        Subtitle.normal(Color.SND, "plain"),
        Subtitle.bold(Color.THR, "strong"),
        Subtitle.phrase(Color.FST, [Word.normal("a"), Word.painted(Color.SND, "b")]),
        Subtitle.line_break(),
    ]
    assert render_subtitles(subtitles) == "\nexpected\n- plain\n- strong\n- a b \n"


def test_code_block_marks_spans_in_column_order():
    code = "let x = 1\n"
    markers = [
        Marker(span(8, 9), Color.SND, "value"),
        Marker(span(4, 5), Color.FST, "name"),
    ]
    assert render_code_block(code, markers) == "location\nlet {{x}} = {{1}}\n"


def test_code_block_shows_only_marked_line():
    code = "a\nbb\nccc\n"
    markers = [Marker(span(2, 4), Color.FST, "here")]
    assert render_code_block(code, markers) == "location\n{{bb}}\n"


def test_main_marker_shows_surrounding_lines():
    code = "a\nbb\nccc\n"
    markers = [Marker(span(2, 4), Color.FST, "here", main=True)]
    out = render_code_block(code, markers)
    assert out.splitlines() == ["location", "a", "{{bb}}", "ccc"]


def test_render_markers_uses_cache():
    cache = DictCache({CTX: (Path("file.kind2"), "let x = 1\n")})
    markers = [Marker(span(4, 5), Color.FST, "name")]
    assert render_markers(markers, cache) == render_code_block("let x = 1\n", markers)


def test_render_markers_missing_file_raises():
    with pytest.raises(LookupError):
        render_markers([Marker(span(0, 1), Color.FST, "x")], DictCache({}))


def test_render_frame_joins_parts():
    code = "let x = 1\n"
    cache = DictCache({CTX: (Path("file.kind2"), code)})
    markers = [Marker(span(4, 5), Color.FST, "Here!", main=True)]
    subtitles = [Subtitle.normal(Color.FST, "detail")]
    frame = DiagnosticFrame(600, Severity.ERROR, "Some Error", subtitles, ["a hint"], markers)
    out = render_frame(frame, cache, CONFIG)
    assert out == (
        render_header("Some Error")
        + render_subtitles(subtitles)
        + render_code_block(code, markers)
    )
    assert "a hint" not in out


def test_render_log():
    assert render_log(Compiled(timedelta(seconds=2))) == "compiled\n"
    assert render_log(Checked(timedelta(seconds=2))) == "checked\n"
    assert render_log(Checking("file.kind2")) == ""
    assert render_log(Empty()) == ""