"""Render diagnostics and logs in the mode chosen by the configuration."""

from __future__ import annotations

from typing import Union

from kindlang import classic, compact
from kindlang.diagnostics import (
    Checked,
    Checking,
    Compiled,
    Diagnostic,
    DiagnosticFrame,
    Empty,
    Failed,
    FileCache,
    Log,
    Rewrites,
)
from kindlang.render_config import Mode, RenderConfig

_LOG_TYPES = (Checking, Checked, Compiled, Rewrites, Failed, Empty)


def render(
    item: Union[Diagnostic, DiagnosticFrame, Log], cache: FileCache, config: RenderConfig
) -> str:
    """Render a diagnostic, a frame or a log message as text."""
    if isinstance(item, Diagnostic):
        item = item.to_diagnostic_frame(config)
    if isinstance(item, DiagnosticFrame):
        if config.mode is Mode.COMPACT:
            return compact.render_frame(item, cache, config)
        return classic.render_frame(item, cache, config)
    if isinstance(item, _LOG_TYPES):
        if config.mode is Mode.COMPACT:
            return compact.render_log(item)
        return classic.render_log(item)
    raise TypeError(f"cannot render {item!r}")