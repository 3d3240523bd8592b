"""Terminal colouring with ANSI escape sequences that can be switched off."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

_COLORS = {
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
}

_RESET = "\x1b[0m"


@dataclass
class _State:
    enabled: bool = True


_STATE = _State()


def set_colors_enabled(enabled: bool) -> None:
    """Turn colouring on or off for every later call to :func:`paint`."""
    _STATE.enabled = enabled


def colors_enabled() -> bool:
    return _STATE.enabled


def _color_code(name: str) -> int:
    try:
        return _COLORS[name]
    except KeyError:
        raise ValueError(f"unknown colour {name!r}") from None


def paint(
    text: object,
    fg: Optional[str] = None,
    bg: Optional[str] = None,
    bold: bool = False,
    dimmed: bool = False,
) -> str:
    """Wrap ``text`` in the escape sequence for the given style."""
    codes = []
    if bold:
        codes.append("1")
    if dimmed:
        codes.append("2")
    if bg is not None:
        codes.append(f"4{_color_code(bg)}")
    if fg is not None:
        codes.append(f"3{_color_code(fg)}")
    if not _STATE.enabled or not codes:
        return str(text)
    return f"\x1b[{';'.join(codes)}m{text}{_RESET}"