"""The classic, human friendly rendering of diagnostics and logs."""

from __future__ import annotations

import os
from functools import partial
from pathlib import Path
from typing import Callable

from kindlang.code import (
    LineGuide,
    MarkerSpan,
    count_width,
    group_marker_lines,
    group_markers,
)
from kindlang.diagnostics import (
    Checked,
    Checking,
    Color,
    Compiled,
    DiagnosticFrame,
    Empty,
    Failed,
    FileCache,
    Log,
    Marker,
    Rewrites,
    Severity,
    Subtitle,
    SubtitleKind,
    Word,
    WordStyle,
)
from kindlang.render_config import RenderConfig
from kindlang.style import paint

_COLOR_NAMES = {
    Color.FST: "red",
    Color.SND: "blue",
    Color.THR: "green",
    Color.FOR: "yellow",
    Color.FFT: "cyan",
}

_PAD = " " * 5


def _colorize(color: Color, text: object) -> str:
    return paint(text, fg=_COLOR_NAMES[color], bold=True)


def _paint_line(text: object) -> str:
    return paint(text, fg="cyan", dimmed=True)


def _source_lines(code: str) -> list[str]:
    lines = code.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _slice(raw: bytes, start: int, end: int) -> str:
    return raw[start:end].decode("utf-8", errors="replace")


def _by_column(markers: list[MarkerSpan]) -> list[MarkerSpan]:
    return sorted(markers, key=lambda marker: marker[0].column)


def _colorize_code(
    markers: list[MarkerSpan], code_line: str, modify: Callable[[str], str]
) -> str:
    raw = code_line.encode("utf-8")
    out = []
    start = 0
    for begin, end_point, marker in _by_column(markers):
        if start < begin.column:
            out.append(modify(_slice(raw, start, begin.column)))
            start = begin.column
        end = end_point.column if begin.line == end_point.line else len(raw)
        if start < end:
            out.append(_colorize(marker.color, _slice(raw, start, end)))
            start = end
    if start < len(raw):
        out.append(modify(_slice(raw, start, len(raw))))
    out.append("\n")
    return "".join(out)


def _padding(raw: bytes, start: int, end: int) -> str:
    spaces = count_width(_slice(raw, start, end))
    return " " * spaces.width + "\t" * spaces.tabs


def _mark_inlined(
    prefix: str, code: str, config: RenderConfig, markers: list[MarkerSpan]
) -> str:
    chars = config.chars
    raw = code.encode("utf-8")
    markers = _by_column(markers)
    line_head = f"{_PAD} {_paint_line(chars.vbar)} {prefix}"

    out = [line_head]
    start = 0
    for begin, end, marker in markers:
        if start < begin.column:
            out.append(_padding(raw, start, begin.column))
            start = begin.column
        if start < end.column:
            spaces = count_width(_slice(raw, start, end.column))
            out.append(_colorize(marker.color, chars.bxline))
            out.append(
                _colorize(marker.color, chars.hbar * max(spaces.width + spaces.tabs - 1, 0))
            )
            start = end.column
    out.append("\n")

    for i in range(len(markers)):
        out.append(line_head)
        start = 0
        visible = markers[: len(markers) - i]
        for j, (begin, end, marker) in enumerate(visible):
            if start < begin.column:
                out.append(_padding(raw, start, begin.column))
                start = begin.column
            if start < end.column:
                if j == len(visible) - 1:
                    out.append(_colorize(marker.color, f"{chars.trline}{marker.text}"))
                else:
                    out.append(_colorize(marker.color, chars.vbar))
                start += 1
        out.append("\n")
    return "".join(out)


def render_severity(severity: Severity) -> str:
    labels = {
        Severity.ERROR: (" ERROR ", "red"),
        Severity.WARNING: (" WARN ", "yellow"),
        Severity.INFO: (" INFO ", "blue"),
    }
    label, bg = labels[severity]
    return f" {paint(label, bg=bg, bold=True)} "


def render_header(severity: Severity, title: str) -> str:
    return f"{render_severity(severity)}{paint(title, bold=True)}\n"


def _render_word(word: Word) -> str:
    if word.style is WordStyle.DIMMED:
        text = paint(word.text, dimmed=True)
    elif word.style is WordStyle.WHITE:
        text = paint(word.text, bold=True)
    elif word.style is WordStyle.PAINTED and word.color is not None:
        text = _colorize(word.color, word.text)
    else:
        text = word.text
    return f"{text} "


def _render_subtitle(subtitle: Subtitle, config: RenderConfig) -> str:
    if subtitle.kind is SubtitleKind.LINE_BREAK:
        return "\n"
    color = subtitle.color if subtitle.color is not None else Color.FST
    bullet = _colorize(color, config.chars.bullet)
    if subtitle.kind is SubtitleKind.BOLD:
        return f"{_PAD} {bullet} {paint(subtitle.text, bold=True)}\n"
    if subtitle.kind is SubtitleKind.PHRASE:
        words = "".join(_render_word(word) for word in subtitle.words)
        return f"{_PAD} {bullet} {words}\n"
    return f"{_PAD} {bullet} {subtitle.text}\n"


def render_subtitles(subtitles: list[Subtitle], config: RenderConfig) -> str:
    head = "\n" if subtitles else ""
    return head + "".join(_render_subtitle(subtitle, config) for subtitle in subtitles)


def render_hints(hints: list[str]) -> str:
    label = paint("Hint:", fg="cyan", bold=True)
    lines = "".join(f"{_PAD} {label} {paint(hint, fg='cyan')}\n" for hint in hints)
    return lines + "\n"


def render_code_block(
    code: str, path: Path, markers: list[Marker], config: RenderConfig
) -> str:
    """Draw the code of one file with its markers."""
    chars = config.chars
    guide = LineGuide.from_code(code)
    point = guide.find(markers[0].position.start)

    bars = chars.hbar * 2
    out = [_paint_line(f"{_PAD} {chars.brline}{bars}[{path}:{point}]") + "\n"]

    if all(marker.no_code for marker in markers):
        return "".join(out)

    out.append(f"{_PAD} {_paint_line(chars.vbar)}\n")

    lines_set, by_line, multi_line = group_marker_lines(guide, markers)
    code_lines = _source_lines(code)
    lines = sorted(line for line in lines_set if line < len(code_lines))
    dbar = _paint_line(chars.dbar)

    for i, line in enumerate(lines):
        prefix = "   "
        row = by_line.get(line, [])
        inline_markers = [marker for marker in row if marker[0].line == marker[1].line]

        current = None
        for marker in multi_line:
            if marker[0].line == line:
                out.append(
                    f"{_PAD} {_paint_line(chars.vbar)}  "
                    f"{_colorize(marker[2].color, chars.brline)} \n"
                )
            if marker[0].line <= line <= marker[1].line:
                prefix = f" {_colorize(marker[2].color, chars.vbar)} "
                current = marker
                break

        out.append(f"{line + 1:>5} {_paint_line(chars.vbar)} {prefix}")

        modify: Callable[[str], str] = (
            partial(_colorize, current[2].color) if current is not None else str
        )

        if inline_markers:
            out.append(_colorize_code(inline_markers, code_lines[line], modify))
            out.append(_mark_inlined(prefix, code_lines[line], config, inline_markers))
            if line + 1 in by_line:
                out.append(f"{_PAD} {dbar} {prefix} \n")
        else:
            out.append(modify(code_lines[line]) + "\n")

        if current is not None and current[1].line == line:
            out.append(f"{_PAD} {dbar} {prefix} \n")
            closing = _colorize(current[2].color, f" {chars.trline} {current[2].text}")
            out.append(f"{_PAD} {dbar} {closing} \n")
            prefix = "   "

        if i < len(lines) - 1 and lines[i + 1] - line > 1:
            out.append(f"{_PAD} {dbar} {prefix} \n")

    return "".join(out)


def _display_path(file: Path, current: Path) -> Path:
    if not file.is_absolute():
        return file
    try:
        return Path(os.path.relpath(file, current))
    except ValueError:
        return file


def render_markers(markers: list[Marker], cache: FileCache, config: RenderConfig) -> str:
    """Draw every file the markers point into."""
    groups = group_markers(markers)
    current = Path(".").resolve()
    out = []
    for ctx, file_markers in groups.items():
        out.append("\n")
        fetched = cache.fetch(ctx)
        if fetched is None:
            raise LookupError(f"no source for syntax context {ctx.value}")
        file, code = fetched
        path = _display_path(Path(file), current)
        out.append(render_code_block(code, path, file_markers, config))
    if groups:
        out.append("\n")
    return "".join(out)


def render_frame(frame: DiagnosticFrame, cache: FileCache, config: RenderConfig) -> str:
    return "".join(
        [
            " ",
            render_header(frame.severity, frame.title),
            render_subtitles(frame.subtitles, config),
            render_markers(frame.positions, cache, config),
            render_hints(frame.hints),
        ]
    )


def render_log(log: Log) -> str:
    match log:
        case Checking(file=file):
            return f"  {paint(' CHECKING ', bg='green', bold=True)} {file}\n"
        case Compiled(duration=duration):
            label = paint(" COMPILED ", bg="green", bold=True)
            secs = duration.total_seconds()
            return f"  {label} All relevant terms compiled. took {secs:.2f}s\n"
        case Checked(duration=duration):
            label = paint(" CHECKED ", bg="green", bold=True)
            return f"   {label} All terms checked. took {duration.total_seconds():.2f}s\n"
        case Failed(duration=duration, total=total, hidden=hidden):
            label = paint(" FAILED ", bg="red", bold=True)
            extra = "" if hidden == 0 else f", {hidden} hidden"
            secs = duration.total_seconds()
            return f"    {label} Took {secs:.1f}s, {total} errors{extra}\n"
        case Rewrites(count=count):
            return f"     {paint(' STATS ', bg='green', bold=True)} Rewrites: {count}\n"
        case Empty():
            return "\n"
    raise TypeError(f"unknown log {log!r}")