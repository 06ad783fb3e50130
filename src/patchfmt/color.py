"""Terminal color annotation for patch output.

The renderer only ever calls an annotator as ``annotate(style, text)``; the
annotator may wrap `text` in escape codes but never changes it.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from enum import Enum

from colorama import Fore, Style as _AnsiStyle


class Style(Enum):
    ADDED = "added"
    REMOVED = "removed"
    HEADER = "header"
    NONE = "none"


Annotator = Callable[[Style, str], str]

COLOR_MODES = ("auto", "always", "never")

_ANSI_PREFIX = {
    Style.ADDED: Fore.LIGHTGREEN_EX,
    Style.REMOVED: Fore.LIGHTRED_EX,
    Style.HEADER: Fore.LIGHTBLUE_EX,
}


def plain(style: Style, text: str) -> str:
    return text


def ansi(style: Style, text: str) -> str:
    prefix = _ANSI_PREFIX.get(style)
    if prefix is None or not text:
        return text
    return f"{prefix}{text}{_AnsiStyle.RESET_ALL}"


def style_for_line(line: str) -> Style:
    """Pick the style of a hunk line from its leading marker."""
    if line.startswith("+"):
        return Style.ADDED
    if line.startswith("-"):
        return Style.REMOVED
    return Style.NONE


def annotator_for(mode: str, stream: object = None) -> Annotator:
    """Resolve a `--color` mode to an annotator.

    `auto` colors only when `stream` is a terminal and `NO_COLOR` is unset.
    """

    if mode not in COLOR_MODES:
        raise ValueError(f"Unknown color mode: {mode!r}")
    if mode == "always":
        return ansi
    if mode == "never":
        return plain

    if os.environ.get("NO_COLOR"):
        return plain
    isatty = getattr(stream, "isatty", None)
    try:
        return ansi if (callable(isatty) and isatty()) else plain
    except (OSError, ValueError):
        # Closed or detached streams.
        return plain
