"""Settings that control how diagnostics are drawn."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from enum import Enum

from kindlang.style import set_colors_enabled


@dataclass(frozen=True)
class Chars:
    """The characters used to draw code frames."""

    vbar: str
    hbar: str
    dbar: str
    trline: str
    bxline: str
    brline: str
    ylline: str
    bullet: str

    @staticmethod
    def unicode() -> Chars:
        return _UNICODE

    @staticmethod
    def ascii() -> Chars:
        return _ASCII


_UNICODE = Chars(
    vbar="│", hbar="─", dbar="┆", trline="└", bxline="┬", brline="┌", ylline="├", bullet="•"
)
_ASCII = Chars(
    vbar="|", hbar="-", dbar=":", trline="\\", bxline="v", brline="/", ylline="-", bullet="*"
)


class Mode(Enum):
    """Classic is made for people; compact is terse and easy to parse."""

    CLASSIC = "classic"
    COMPACT = "compact"


@dataclass(frozen=True)
class RenderConfig:
    chars: Chars
    indent: int
    hide_vals: bool
    mode: Mode
    not_align: bool
    only_main: bool
    show_immediate_deps: bool

    @staticmethod
    def unicode(
        indent: int, hide_vals: bool, only_main: bool, show_immediate_deps: bool
    ) -> RenderConfig:
        return RenderConfig(
            Chars.unicode(), indent, hide_vals, Mode.CLASSIC, False, only_main, show_immediate_deps
        )

    @staticmethod
    def ascii(
        indent: int, hide_vals: bool, only_main: bool, show_immediate_deps: bool
    ) -> RenderConfig:
        return RenderConfig(
            Chars.ascii(), indent, hide_vals, Mode.CLASSIC, False, only_main, show_immediate_deps
        )

    @staticmethod
    def compact(indent: int, only_main: bool, show_immediate_deps: bool) -> RenderConfig:
        return RenderConfig(
            Chars.ascii(), indent, True, Mode.COMPACT, True, only_main, show_immediate_deps
        )


def _terminal_lacks_ansi() -> bool:
    """On Windows, escape sequences work only in terminals that announce it."""
    if sys.platform != "win32":
        return False
    return not any(os.environ.get(var) for var in ("WT_SESSION", "ANSICON", "TERM"))


def check_if_colors_are_supported(disable: bool) -> None:
    """Switch colours off when asked to or when the terminal cannot show them."""
    if disable or _terminal_lacks_ansi():
        set_colors_enabled(False)


def check_if_utf8_is_supported(
    disable: bool,
    indent: int,
    hide_vals: bool,
    mode: Mode,
    only_main: bool,
    show_immediate_deps: bool,
) -> RenderConfig:
    """Pick the configuration that suits the mode and the terminal."""
    if mode is Mode.COMPACT:
        return RenderConfig.compact(0, only_main, show_immediate_deps)
    if disable or _terminal_lacks_ansi():
        return RenderConfig.ascii(indent, hide_vals, only_main, show_immediate_deps)
    return RenderConfig.unicode(indent, hide_vals, only_main, show_immediate_deps)