"""Diagnostic snippets for reporting where in the source a failure happened."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .exceptions import HtmlPlusPlusError

DEFAULT_CONTEXT_RADIUS = 30


def error_context(source: str, offset: int, radius: int = DEFAULT_CONTEXT_RADIUS) -> str:
    """Extract the text surrounding `offset` for an error message.

    Non-ASCII characters are replaced by ``?`` so the snippet is always safe to
    print to a plain terminal.

    Args:
        source: Full text being processed.
        offset: Zero-based character offset of the failure.
        radius: Number of characters to include on each side of `offset`.

    Returns:
        str: At most ``2 * radius`` characters of `source` around `offset`.

    Examples:
        error_context("<a>x</b>", 4)  # "<a>x</b>"
        error_context("café <", 5, radius=2)  # "? <"
    """
    start = max(0, offset - radius)
    end = min(offset + radius, len(source))
    return "".join(char if ord(char) < 0x80 else "?" for char in source[start:end])


def format_error(error: HtmlPlusPlusError, radius: int = DEFAULT_CONTEXT_RADIUS) -> str:
    """Render an error message followed by its source snippet.

    Args:
        error: Error raised by the parser or highlighter.
        radius: Number of characters to show on each side of the failing offset.

    Returns:
        str: The message, plus a second line quoting the surrounding source when
            the error knows where it happened.
    """
    if error.source is None or error.offset is None:
        return error.message
    snippet = error_context(error.source, error.offset, radius)
    return f"{error.message}\nThe problem occurred somewhere around: '{snippet}'"
