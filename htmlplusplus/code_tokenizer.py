"""Lexical scanner for source code embedded in ``<code>`` tags."""

from __future__ import annotations

import string
from collections.abc import Iterable, Iterator

DIGITS = frozenset(string.digits)
LETTERS = frozenset(string.ascii_letters)
WORD_CHARS = LETTERS | DIGITS | {"_"}

BLOCK_COMMENT_START = "/*"
BLOCK_COMMENT_END = "*/"


class CodeTokenizer:
    """Split a code snippet into raw lexical tokens.

    Tokens are words and numbers, strings, comments, single spaces, single
    newlines, and single punctuation characters. Concatenating every token
    reproduces the input exactly.

    Args:
        code: The snippet to scan.
        string_delimiters: Characters that open and close string literals.
        comment_markers: Recognised comment introducers out of ``#``, ``//``,
            and ``/*``.

    Examples:
        list(CodeTokenizer("x = 'a'", string_delimiters="'"))
        # ["x", " ", "=", " ", "'a'"]
    """

    def __init__(
        self,
        code: str,
        string_delimiters: Iterable[str] = (),
        comment_markers: Iterable[str] = (),
    ):
        self.code = code
        self.index = 0
        self.length = len(code)
        self.string_delimiters = frozenset(string_delimiters)
        self.comment_markers = frozenset(comment_markers)

    def __iter__(self) -> Iterator[str]:
        while True:
            token = self.pop_token()
            if token is None:
                return
            yield token

    def has_more(self) -> bool:
        return self.index < self.length

    def _peek(self, distance: int = 0) -> str:
        position = self.index + distance
        return self.code[position] if position < self.length else ""

    def pop_token(self) -> str | None:
        """Consume and return the next token, or None at the end of the input."""
        if self.index >= self.length:
            return None

        char = self.code[self.index]
        if char in (" ", "\n"):
            self.index += 1
            return char

        next_char = self._peek(1)
        if char == "_" or char in LETTERS:
            return self._pop_word(is_number=False)
        if char in DIGITS or (char == "." and next_char in DIGITS):
            return self._pop_word(is_number=True)

        if char == "#" and "#" in self.comment_markers:
            return self._pop_until("\n", include_terminator=False)
        if char == "/":
            if next_char == "/" and "//" in self.comment_markers:
                return self._pop_until("\n", include_terminator=False)
            if next_char == "*" and BLOCK_COMMENT_START in self.comment_markers:
                # Skip the opener so "/*/" is not read as an already closed comment.
                self.index += 2
                return BLOCK_COMMENT_START + self._pop_until(
                    BLOCK_COMMENT_END, include_terminator=True
                )

        if char in self.string_delimiters:
            return self._pop_string(char)

        self.index += 1
        return char

    def _pop_until(self, terminator: str, include_terminator: bool) -> str:
        start = self.index
        found = self.code.find(terminator, start)
        if found == -1:
            end = self.length
        else:
            end = found + (len(terminator) if include_terminator else 0)
        self.index = end
        return self.code[start:end]

    def _pop_string(self, delimiter: str) -> str:
        start = self.index
        self.index += 1
        while self.index < self.length:
            char = self.code[self.index]
            if char == delimiter:
                self.index += 1
                break
            if char == "\\" and self.index + 1 < self.length:
                self.index += 2
            else:
                self.index += 1
        return self.code[start : self.index]

    def _pop_word(self, is_number: bool) -> str:
        start = self.index
        period_found = False
        while self.index < self.length:
            char = self.code[self.index]
            if char in WORD_CHARS:
                self.index += 1
            elif is_number and char == "." and not period_found:
                period_found = True
                self.index += 1
            else:
                break
        return self.code[start : self.index]


def tokenize_code(
    code: str, string_delimiters: Iterable[str] = (), comment_markers: Iterable[str] = ()
) -> list[str]:
    """Tokenize `code` in one call.

    Examples:
        tokenize_code("# note\\nx", comment_markers=["#"])  # ["# note", "\\n", "x"]
    """
    return list(CodeTokenizer(code, string_delimiters, comment_markers))
