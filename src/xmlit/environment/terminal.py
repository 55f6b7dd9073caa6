"""Terminal color utilities for error messages.

ANSI colors with TTY detection and NO_COLOR / FORCE_COLOR support.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
}

ColorName = Literal["reset", "bold", "dim", "red", "green", "yellow", "cyan", "bright_red"]

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    """Check if the terminal supports colors and the user allows them.

    Respects:
        - FORCE_COLOR (wins over everything)
        - NO_COLOR (https://no-color.org/)
        - sys.stdout.isatty()
    """
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLORS = _should_use_colors()


def colorize(text: str, *colors: ColorName) -> str:
    """Apply ANSI color codes to text, or return it unchanged when disabled.

    Example:
        >>> colorize("Error", "red", "bold")
        '\033[31m\033[1mError\033[0m'  # if colors supported
    """
    if not _USE_COLORS or not colors:
        return text
    prefix = "".join(_COLORS.get(color, "") for color in colors)
    if not prefix:
        return text
    return f"{prefix}{text}{_COLORS['reset']}"


def strip_colors(text: str) -> str:
    """Remove ANSI color codes from text."""
    return _ANSI_ESCAPE.sub("", text)


# Role → colors for each part of an error message
STYLES: dict[str, tuple[ColorName, ...]] = {
    "code": ("bright_red", "bold"),
    "location": ("cyan",),
    "lineno": ("yellow",),
    "error": ("bright_red",),
    "hint": ("green",),
    "gutter": ("dim",),
}


def styled(role: str, text: str) -> str:
    """Color ``text`` for its role in an error message, e.g. ``styled("hint", "Hint:")``."""
    return colorize(text, *STYLES[role])


def format_error_header(code: str | None, message: str) -> str:
    """``CODE: message``, or just the message when there is no code."""
    if code:
        return f"{styled('code', code)}: {message}"
    return message


def format_source_line(lineno: int, content: str, is_error: bool = False) -> str:
    """One snippet line; the error line gets a '>' marker."""
    gutter = styled("lineno", f"{'>' if is_error else ' '}{lineno:>3}")
    return f"{gutter} | {styled('error' if is_error else 'gutter', content)}"
