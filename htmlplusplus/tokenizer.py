"""Mode-sensitive scanner that turns HTML++ source into markup tokens."""

from __future__ import annotations

from .constants import CODE_CLOSE_TAG, TAG_NAME_CHARS, TAG_START_CHARS, TAG_WHITESPACE
from .exceptions import (
    ExpectedAttributeNameError,
    ExpectedLiteralError,
    ExpectedTagNameError,
    NewlineInInlineCodeError,
    RawHtmlCommentError,
    UnclosedQuotedAttributeError,
)
from .models import Mode, Tag, Token, TokenKind


class MarkupTokenizer:
    """Produce HTML++ tokens one at a time.

    The caller passes the current `Mode` on every call since tags seen by the
    parser can change how the following text is scanned. Whether bare
    backticks delimit inline code is tracked in `backticks_enabled`, which the
    parser updates as ``<enablebackticks>`` and ``<disablebackticks>`` close.

    Args:
        source: Complete HTML++ text.
        backticks_enabled: Initial state of backtick handling.

    Examples:
        tokenizer = MarkupTokenizer("<b>hi</b>")
        tokenizer.pop_token(Mode.NORMAL).kind  # TokenKind.OPEN_TAG
    """

    def __init__(self, source: str, backticks_enabled: bool = False):
        self.source = source
        self.index = 0
        self.length = len(source)
        self.backticks_enabled = backticks_enabled

    def pop_token(self, mode: Mode = Mode.NORMAL) -> Token | None:
        """Consume and return the next token, or None at the end of the input.

        Raises:
            RawHtmlCommentError: If the source contains ``<!``.
            NewlineInInlineCodeError: If inline code runs into a newline.
            HtmlPlusPlusError: Subclasses for malformed tag syntax.
        """
        if self.index >= self.length:
            return None

        start = self.index
        if mode is Mode.CODE:
            return self._pop_code(start)

        char = self.source[start]
        if char == "`" and self.backticks_enabled:
            self.index += 1
            return Token(TokenKind.BACKTICK, offset=start)

        if mode is Mode.INLINE_CODE:
            return Token(TokenKind.TEXT, self._pop_text(mode), offset=start)

        if char == "|":
            self.index += 1
            return Token(TokenKind.PIPE, offset=start)
        if char == "\n":
            self.index += 1
            return Token(TokenKind.NEWLINE, offset=start)
        if char == "<":
            return self._pop_angle_bracket(start)

        return Token(TokenKind.TEXT, self._pop_text(mode), offset=start)

    def _pop_code(self, start: int) -> Token:
        end = self.source.find(CODE_CLOSE_TAG, start)
        if end == start:
            self.index += len(CODE_CLOSE_TAG)
            return Token(TokenKind.CLOSE_TAG, "code", offset=start)
        if end == -1:
            end = self.length
        self.index = end
        return Token(TokenKind.TEXT, self.source[start:end], offset=start)

    def _pop_angle_bracket(self, start: int) -> Token:
        next_char = self.source[start + 1] if start + 1 < self.length else ""
        if next_char == "!":
            raise RawHtmlCommentError(self.source, start)
        if next_char == "/":
            return Token(TokenKind.CLOSE_TAG, self._pop_close_tag(), offset=start)
        if next_char in TAG_START_CHARS:
            tag, self_closing = self._pop_open_tag()
            kind = TokenKind.SELF_CLOSE_TAG if self_closing else TokenKind.OPEN_TAG
            return Token(kind, tag, offset=start)

        # A loose "<" is literal text.
        self.index += 1
        return Token(TokenKind.TEXT, "&lt;", offset=start)

    def skip_whitespace(self) -> None:
        while self.index < self.length and self.source[self.index] in TAG_WHITESPACE:
            self.index += 1

    def pop_if_present(self, value: str) -> bool:
        if self.source.startswith(value, self.index):
            self.index += len(value)
            return True
        return False

    def pop_expected(self, value: str) -> None:
        if not self.pop_if_present(value):
            raise ExpectedLiteralError(value, self.source, self.index)

    def pop_simple_word(self) -> str | None:
        start = self.index
        while self.index < self.length and self.source[self.index] in TAG_NAME_CHARS:
            self.index += 1
        if self.index == start:
            return None
        return self.source[start : self.index]

    def _pop_open_tag(self) -> tuple[Tag, bool]:
        start = self.index
        self.pop_expected("<")
        name = self.pop_simple_word()
        if name is None:
            raise ExpectedTagNameError(self.source, self.index)

        tag = Tag(name, offset=start)
        while True:
            self.skip_whitespace()
            if self.pop_if_present("/"):
                self.pop_expected(">")
                return tag, True
            if self.pop_if_present(">"):
                return tag, False

            attribute_name = self.pop_simple_word()
            if attribute_name is None:
                raise ExpectedAttributeNameError(self.source, self.index)
            self.skip_whitespace()
            self.pop_expected("=")
            self.skip_whitespace()
            tag.attributes[attribute_name] = self._pop_attribute_value()

    def _pop_attribute_value(self) -> str:
        start = self.index
        if self.pop_if_present('"'):
            end = self.source.find('"', self.index)
            if end == -1:
                raise UnclosedQuotedAttributeError(self.source, start)
            self.index = end + 1
            return self.source[start + 1 : end]

        value = self.pop_simple_word()
        if value is None:
            raise ExpectedLiteralError('"', self.source, self.index)
        return value

    def _pop_close_tag(self) -> str:
        self.pop_expected("<")
        self.pop_expected("/")
        name = self.pop_simple_word()
        if name is None:
            raise ExpectedTagNameError(self.source, self.index)
        self.skip_whitespace()
        self.pop_expected(">")
        return name

    def _pop_text(self, mode: Mode) -> str:
        """Scan a run of text up to the next newline, pipe, tag, or backtick.

        In inline code only a backtick ends the run; a doubled backtick stands
        for one literal backtick.
        """
        start = self.index
        index = start
        while index < self.length:
            char = self.source[index]
            if char in "\n|<":
                if mode is Mode.INLINE_CODE:
                    if char == "\n":
                        raise NewlineInInlineCodeError(self.source, index)
                else:
                    self.index = index
                    return self.source[start:index]
            elif char == "`" and self.backticks_enabled:
                if self.source.startswith("``", index):
                    index += 1
                else:
                    self.index = index
                    return self.source[start:index].replace("``", "`")
            index += 1

        self.index = self.length
        text = self.source[start:]
        return text.replace("``", "`") if self.backticks_enabled else text
