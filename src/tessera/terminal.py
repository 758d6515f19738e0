"""Terminal color utilities for component error diagnostics.

ANSI color codes with automatic TTY detection and NO_COLOR support.
Used by `tessera.exceptions` to highlight error codes, component
locations and hints in ``format_compact()`` output.
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
    "bright_green": "\033[92m",
    "bright_blue": "\033[94m",
}

ColorName = Literal[
    "reset", "bold", "dim",
    "red", "green", "yellow", "cyan",
    "bright_red", "bright_green", "bright_blue",
]

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    """Check if the terminal supports colors and the user allows them.

    Respects:
        - NO_COLOR environment variable (https://no-color.org/)
        - FORCE_COLOR environment variable (overrides NO_COLOR)
        - sys.stdout.isatty() for TTY detection
    """
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    """Return True when colored output is enabled."""
    return _USE_COLORS


def colorize(text: str, *colors: ColorName) -> str:
    """Apply ANSI color codes to text.

    Returns the text unchanged when colors are disabled or no known
    color name is given.

    Example:
        >>> colorize("Error", "red", "bold")
        '\033[31m\033[1mError\033[0m'  # if colors supported
        'Error'  # if colors not supported
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


def error_code(text: str) -> str:
    """Color text as an error code (bright red + bold)."""
    return colorize(text, "bright_red", "bold")


def location(text: str) -> str:
    """Color text as a component or file location (cyan)."""
    return colorize(text, "cyan")


def hint(text: str) -> str:
    """Color text as a hint (green)."""
    return colorize(text, "green")


def dim_text(text: str) -> str:
    """Color text as secondary information (dim)."""
    return colorize(text, "dim")


def docs_url(text: str) -> str:
    """Color text as a documentation URL (bright blue)."""
    return colorize(text, "bright_blue")


def format_error_header(code: str | None, message: str) -> str:
    """Format an error header with an optional code prefix.

    Example:
        >>> format_error_header("T-RND-001", "`helpers` can only be called at render time.")
        '\033[91m\033[1mT-RND-001\033[0m: `helpers` can only be called at render time.'
    """
    if code:
        return f"{error_code(code)}: {message}"
    return message
