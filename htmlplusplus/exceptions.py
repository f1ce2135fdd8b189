"""Package-specific exception types."""

from __future__ import annotations

from .context import error_context


class HtmlPlusPlusError(ValueError):
    """Base class for errors raised while compiling HTML++ or highlighting code.

    Args:
        message: Human-readable description of the problem.
        source: Text being processed when the error occurred, if known.
        offset: Zero-based character offset of the failure within `source`.
    """

    def __init__(self, message: str, source: str | None = None, offset: int | None = None):
        self.source = source
        self.offset = offset
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""

    @property
    def context(self) -> str:
        """Snippet of the source surrounding the failure, or an empty string."""
        if self.source is None or self.offset is None:
            return ""
        return error_context(self.source, self.offset)


class UnsupportedLanguageError(HtmlPlusPlusError):
    """Raised when the syntax highlighter is asked for an unknown language.

    Args:
        language: The language name as given by the caller.
    """

    def __init__(self, language: str, source: str | None = None, offset: int | None = None):
        self.language = language
        super().__init__(
            f"{language} is not currently supported by the syntax highlighter.", source, offset
        )


class MismatchedCloseTagError(HtmlPlusPlusError):
    """Raised when a close tag does not match the innermost open tag.

    Args:
        expected: Name of the innermost open tag, or an empty string when none is open.
        found: Name found in the close tag.
    """

    def __init__(
        self, expected: str, found: str, source: str | None = None, offset: int | None = None
    ):
        self.expected = expected
        self.found = found
        super().__init__(
            f"</{found}> occurred without a corresponding open tag.", source, offset
        )


class DuplicateTableOfContentsError(HtmlPlusPlusError):
    def __init__(self, source: str | None = None, offset: int | None = None):
        super().__init__("Cannot have <tableofcontents> tag multiple times.", source, offset)


class RawHtmlCommentError(HtmlPlusPlusError):
    def __init__(self, source: str | None = None, offset: int | None = None):
        super().__init__(
            "HTML++ does not support <!-- comments. "
            'Just use <comment>...</comment> or <tag comment="..."> instead.',
            source,
            offset,
        )


class UnexpectedTokenError(HtmlPlusPlusError):
    def __init__(self, kind: object, source: str | None = None, offset: int | None = None):
        self.kind = kind
        super().__init__(f"Unknown token type: '{kind}'", source, offset)


class ExpectedTagNameError(HtmlPlusPlusError):
    def __init__(self, source: str | None = None, offset: int | None = None):
        super().__init__("Expected tag name.", source, offset)


class ExpectedAttributeNameError(HtmlPlusPlusError):
    def __init__(self, source: str | None = None, offset: int | None = None):
        super().__init__("Expected attribute name.", source, offset)


class UnclosedQuotedAttributeError(HtmlPlusPlusError):
    def __init__(self, source: str | None = None, offset: int | None = None):
        super().__init__("Unclosed string in attribute value.", source, offset)


class ExpectedLiteralError(HtmlPlusPlusError):
    """Raised when a fixed piece of tag syntax such as ``>`` or ``=`` is missing.

    Args:
        literal: The text that was expected at the offset.
    """

    def __init__(self, literal: str, source: str | None = None, offset: int | None = None):
        self.literal = literal
        super().__init__(f"Expected: '{literal}'", source, offset)


class NewlineInInlineCodeError(HtmlPlusPlusError):
    def __init__(self, source: str | None = None, offset: int | None = None):
        super().__init__("Cannot have newline in inline code.", source, offset)


class NoOpenTagError(HtmlPlusPlusError):
    """Raised when raw content arrives for a capture mode but no tag is open."""

    def __init__(self, source: str | None = None, offset: int | None = None):
        super().__init__("No open tag to receive content.", source, offset)


class UnclosedTagError(HtmlPlusPlusError):
    """Raised in strict mode when input ends while tags are still open.

    Args:
        name: Name of the innermost tag left open.
    """

    def __init__(self, name: str, source: str | None = None, offset: int | None = None):
        self.name = name
        super().__init__(f"<{name}> was never closed.", source, offset)
