"""Data models for htmlplusplus."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class Mode(Enum):
    """Raw-content interpretation contexts of the markup tokenizer.

    Attributes:
        NORMAL: Tags, text, newlines, and pipes are recognised.
        CODE: Everything up to ``</code>`` is captured verbatim.
        IMAGE: Text is captured as the URL of the enclosing image.
        INLINE_CODE: Text between backticks is rendered as inline code.
    """

    NORMAL = auto()
    CODE = auto()
    IMAGE = auto()
    INLINE_CODE = auto()


class TokenKind(Enum):
    TEXT = auto()
    NEWLINE = auto()
    PIPE = auto()
    OPEN_TAG = auto()
    CLOSE_TAG = auto()
    SELF_CLOSE_TAG = auto()
    BACKTICK = auto()


class TagKind(Enum):
    """Tag vocabulary with dedicated open and close behaviour.

    Any tag name not listed here is an ELEMENT and passes through to the output
    as an ordinary HTML element.
    """

    COMMENT = "comment"
    BOOKMARK = "bookmark"
    TABLE_OF_CONTENTS = "tableofcontents"
    ENABLE_BACKTICKS = "enablebackticks"
    DISABLE_BACKTICKS = "disablebackticks"
    NOTE = "note"
    WARNING = "warning"
    IMAGE = "image"
    CODE = "code"
    ELEMENT = ""

    @classmethod
    def from_name(cls, name: str) -> TagKind:
        if not name:
            return cls.ELEMENT
        try:
            return cls(name)
        except ValueError:
            return cls.ELEMENT


@dataclass
class Tag:
    """A tag as written in the source.

    Attributes:
        name: Tag name, case-sensitive.
        attributes: User attributes in the order they were written.
        offset: Character offset of the ``<`` that starts the tag.
    """

    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    offset: int = 0

    @property
    def kind(self) -> TagKind:
        return TagKind.from_name(self.name)


@dataclass
class Token:
    """A markup token.

    `value` holds the text for TEXT, the tag for OPEN_TAG and SELF_CLOSE_TAG,
    the tag name for CLOSE_TAG, and None otherwise.
    """

    kind: TokenKind
    value: str | Tag | None = None
    offset: int = 0


@dataclass
class OpenElement:
    """Entry on the tag stack.

    Keeps the per-kind state separate from user attributes so an attribute can
    never collide with the parser's own bookkeeping.

    Attributes:
        tag: The tag as opened.
        content: Raw text captured while the tag is open (code or image URL).
        bookmark_id: Correlation key of the bookmark opened by this tag.
    """

    tag: Tag
    content: list[str] = field(default_factory=list)
    bookmark_id: str | None = None

    @property
    def name(self) -> str:
        return self.tag.name

    @property
    def kind(self) -> TagKind:
        return self.tag.kind


@dataclass
class Bookmark:
    """A named anchor collected for the table of contents.

    Attributes:
        display_name: Anchor name, used as the link target.
        unique_id: Internal key tying the bookmark to its text listener.
        label: Text captured between the bookmark tags.
    """

    display_name: str
    unique_id: str
    label: str = ""


class OutputSink:
    """Append-only output buffer with comment suppression and one splice point.

    While `comment_depth` is above zero, emitted fragments are dropped.
    """

    def __init__(self) -> None:
        self._segments: list[str] = []
        self.comment_depth = 0
        self.splice_index: int | None = None

    @property
    def enabled(self) -> bool:
        return self.comment_depth == 0

    def emit(self, fragment: str) -> None:
        if self.enabled:
            self._segments.append(fragment)

    def mark_splice_point(self) -> None:
        self.splice_index = len(self._segments)

    def render(self, spliced: str = "") -> str:
        """Join all fragments, inserting `spliced` at the recorded splice point."""
        if self.splice_index is None or not spliced:
            return "".join(self._segments)
        front = "".join(self._segments[: self.splice_index])
        back = "".join(self._segments[self.splice_index :])
        return f"{front}{spliced}{back}"
