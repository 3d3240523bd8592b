"""The compact rendering of diagnostics: terse text that is easy to parse."""

from __future__ import annotations

from kindlang.code import LineGuide, MarkerSpan, group_marker_lines, group_markers
from kindlang.diagnostics import (
    Checked,
    Compiled,
    DiagnosticFrame,
    FileCache,
    Log,
    Marker,
    Subtitle,
    SubtitleKind,
    Word,
)
from kindlang.render_config import RenderConfig


def _source_lines(code: str) -> list[str]:
    lines = code.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _render_word(word: Word) -> str:
    return f"{word.text} "


def _render_subtitle(subtitle: Subtitle) -> str:
    kind = subtitle.kind
    if kind is SubtitleKind.FIELD:
        return f"{subtitle.text.lower()}\n"
    if kind is SubtitleKind.PHRASE:
        words = "".join(_render_word(word) for word in subtitle.words)
        return f"- {words}\n"
    if kind is SubtitleKind.LINE_BREAK:
        return ""
    return f"- {subtitle.text}\n"


def render_subtitles(subtitles: list[Subtitle]) -> str:
    head = "\n" if subtitles else ""
    return head + "".join(_render_subtitle(subtitle) for subtitle in subtitles)


def render_header(title: str) -> str:
    return f"{title.lower()}\n"


def _mark_code(markers: list[MarkerSpan], code_line: str) -> str:
    raw = code_line.encode("utf-8")

    def cut(start: int, end: int) -> str:
        return raw[start:end].decode("utf-8", errors="replace")

    out = []
    start = 0
    for begin, end_point, _marker in sorted(markers, key=lambda m: m[0].column):
        if start < begin.column:
            out.append(cut(start, begin.column))
            start = begin.column
        end = end_point.column if begin.line == end_point.line else len(raw)
        if start < end:
            out.append("{{" + cut(start, end) + "}}")
            start = end
    if start < len(raw):
        out.append(cut(start, len(raw)))
    out.append("\n")
    return "".join(out)


def render_code_block(code: str, markers: list[Marker]) -> str:
    """The marked lines of one file, with marked spans wrapped in ``{{ }}``."""
    out = ["location\n"]
    guide = LineGuide.from_code(code)
    lines_set, by_line, _ = group_marker_lines(guide, markers)
    code_lines = _source_lines(code)

    for line in sorted(line for line in lines_set if line < len(code_lines)):
        inline = [m for m in by_line.get(line, []) if m[0].line == m[1].line]
        if inline:
            out.append(_mark_code(inline, code_lines[line]))
        else:
            out.append(f"{code_lines[line]}\n")
    return "".join(out)


def render_markers(markers: list[Marker], cache: FileCache) -> str:
    out = []
    for ctx, file_markers in group_markers(markers).items():
        fetched = cache.fetch(ctx)
        if fetched is None:
            raise LookupError(f"no source for syntax context {ctx.value}")
        _path, code = fetched
        out.append(render_code_block(code, file_markers))
    return "".join(out)


def render_frame(frame: DiagnosticFrame, cache: FileCache, config: RenderConfig) -> str:
    return (
        render_header(frame.title)
        + render_subtitles(frame.subtitles)
        + render_markers(frame.positions, cache)
    )


def render_log(log: Log) -> str:
    if isinstance(log, Compiled):
        return "compiled\n"
    if isinstance(log, Checked):
        return "checked\n"
    return ""