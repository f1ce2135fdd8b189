"""HTML++ compilation: the tag-stack parser that drives the markup tokenizer.

HTML++ is a small tag language for trusted, first-party content such as blog
posts. It is NOT a sanitizer for untrusted input. Ordinary HTML passes through
untouched; the following tags add behaviour:

``<code language="python" classes="MyClass">...</code>``
    Syntax-highlighted code block. Content is captured verbatim.

``<bookmark name="conclusion">Text, even <i>markup</i></bookmark>``
    Anchor at this point in the page, listed by ``<tableofcontents/>``.

``<tableofcontents/>``
    List of links to every bookmark in the document. Allowed once.

``<comment>...</comment>``
    Never rendered, including nested markup. Nests.

``<note>...</note>`` and ``<warning>...</warning>``
    Boxed asides.

``<image alt="alt text" mouseover="Witty remark.">URL</image>``
    Image; the alt text defaults to the file name of the URL.

``<header>...</header>`` or ``<heading>...</heading>``
    Aliases for ``<h2 class="hpp_header">``.

``<enablebackticks/>`` and ``<disablebackticks/>``
    Toggle whether `backticks` mark inline code. A doubled backtick inside
    inline code stands for a literal one.

"""

from __future__ import annotations

import base64
import logging
import secrets
from collections.abc import Callable
from dataclasses import replace
from html import escape as html_escape
from pathlib import Path

from .config import ConfigError, HtmlPlusPlusConfig, validate_config
from .constants import (
    AUTHOR_COMMENT_ATTRIBUTE,
    BOOKMARK_ID_BYTES,
    BOOKMARK_NAME_PREFIX,
    BOX_CLASS_SUFFIX,
    HEADER_ALIASES,
    HEADER_CLASS,
    HEADER_TAG,
    INLINE_CODE_CLASS,
)
from .context import format_error
from .exceptions import (
    DuplicateTableOfContentsError,
    HtmlPlusPlusError,
    MismatchedCloseTagError,
    NoOpenTagError,
    UnclosedTagError,
    UnexpectedTokenError,
    UnsupportedLanguageError,
)
from .filesystem import read_source
from .highlighter import SyntaxHighlighter
from .models import Bookmark, Mode, OpenElement, OutputSink, Tag, TagKind, Token, TokenKind
from .toc import render_table_of_contents
from .tokenizer import MarkupTokenizer

logger = logging.getLogger(__name__)


def generate_unique_id() -> str:
    """Return a random key used to correlate a bookmark with its captured text."""
    return base64.b64encode(secrets.token_bytes(BOOKMARK_ID_BYTES)).decode("ascii")


def render_attributes(attributes: dict[str, str], exclude: tuple[str, ...] = ()) -> str:
    """Render attributes as ``name="value"`` pairs in their original order.

    Values are written as given. The author-only ``comment`` attribute and any
    names in `exclude` are skipped.

    Examples:
        render_attributes({"id": "x", "comment": "todo"})  # ' id="x"'
    """
    return "".join(
        f' {name}="{value}"'
        for name, value in attributes.items()
        if name != AUTHOR_COMMENT_ATTRIBUTE and name not in exclude
    )


class HtmlPlusPlusParser:
    """Compile one HTML++ document to HTML.

    Instances hold all parsing state and are meant for a single document; call
    `parse` once and discard the parser.

    Args:
        source: HTML++ text.
        config: Parsing options. Defaults to a new `HtmlPlusPlusConfig`.
        id_factory: Source of bookmark correlation keys.

    Examples:
        HtmlPlusPlusParser("<note>Careful!</note>").parse()
        # '<div class="note_box">Careful!</div>'
    """

    def __init__(
        self,
        source: str,
        config: HtmlPlusPlusConfig | None = None,
        id_factory: Callable[[], str] = generate_unique_id,
    ):
        self.source = source
        self.config = config or HtmlPlusPlusConfig()
        self.tokenizer = MarkupTokenizer(source, self.config.backticks_enabled)
        self.stack: list[OpenElement] = []
        self.mode_stack: list[Mode] = [Mode.NORMAL]
        self.output = OutputSink()
        self.bookmarks: list[Bookmark] = []
        self.text_listeners: dict[str, list[str]] = {}
        self.bookmark_counter = 1
        self.table_of_contents_requested = False
        self._id_factory = id_factory
        self._result: str | None = None

        self._token_handlers: dict[TokenKind, Callable[[Token], None]] = {
            TokenKind.NEWLINE: self._on_newline,
            TokenKind.TEXT: self._on_text,
            TokenKind.OPEN_TAG: self._on_open_tag,
            TokenKind.CLOSE_TAG: self._on_close_tag,
            TokenKind.SELF_CLOSE_TAG: self._on_self_close_tag,
            TokenKind.BACKTICK: self._on_backtick,
            TokenKind.PIPE: self._on_pipe,
        }
        self._open_handlers: dict[TagKind, Callable[[OpenElement], None]] = {
            TagKind.COMMENT: self._open_comment,
            TagKind.BOOKMARK: self._open_bookmark,
            TagKind.TABLE_OF_CONTENTS: self._open_table_of_contents,
            TagKind.ENABLE_BACKTICKS: _ignore,
            TagKind.DISABLE_BACKTICKS: _ignore,
            TagKind.NOTE: self._open_box,
            TagKind.WARNING: self._open_box,
            TagKind.IMAGE: _ignore,
            TagKind.CODE: _ignore,
            TagKind.ELEMENT: self._open_element,
        }
        self._close_handlers: dict[TagKind, Callable[[OpenElement], None]] = {
            TagKind.COMMENT: self._close_comment,
            TagKind.BOOKMARK: self._close_bookmark,
            TagKind.TABLE_OF_CONTENTS: _ignore,
            TagKind.ENABLE_BACKTICKS: self._close_backticks_toggle,
            TagKind.DISABLE_BACKTICKS: self._close_backticks_toggle,
            TagKind.NOTE: self._close_div,
            TagKind.WARNING: self._close_div,
            TagKind.IMAGE: self._close_image,
            TagKind.CODE: self._close_code,
            TagKind.ELEMENT: self._close_element,
        }

    @property
    def mode(self) -> Mode:
        return self.mode_stack[-1]

    def parse(self) -> str:
        """Compile the document.

        Returns:
            str: The complete HTML fragment, with the table of contents spliced
                in when one was requested and bookmarks exist.

        Raises:
            HtmlPlusPlusError: On any syntax or nesting error. No partial
                output is produced.
        """
        if self._result is not None:
            return self._result

        logger.debug("Parsing %d characters of HTML++", len(self.source))
        while True:
            token = self.tokenizer.pop_token(self.mode)
            if token is None:
                break
            handler = self._token_handlers.get(token.kind)
            if handler is None:
                raise UnexpectedTokenError(token.kind, self.source, token.offset)
            handler(token)

        if self.config.require_closed_tags and self.stack:
            innermost = self.stack[-1]
            raise UnclosedTagError(innermost.name, self.source, innermost.tag.offset)

        table_of_contents = ""
        if self.table_of_contents_requested:
            table_of_contents = render_table_of_contents(self.bookmarks)
        self._result = self.output.render(table_of_contents)
        logger.debug(
            "Produced %d characters with %d bookmark(s)", len(self._result), len(self.bookmarks)
        )
        return self._result

    # Output

    def emit(self, fragment: str) -> None:
        self.output.emit(fragment)

    def emit_text(self, text: str) -> None:
        """Emit literal text and record it in every open bookmark label."""
        self.output.emit(text)
        for captured in self.text_listeners.values():
            captured.append(text)

    # Token handlers

    def _on_newline(self, token: Token) -> None:
        self.emit("\n")

    def _on_pipe(self, token: Token) -> None:
        self.emit("|")

    def _on_text(self, token: Token) -> None:
        text = token.value
        mode = self.mode
        if mode is Mode.CODE or mode is Mode.IMAGE:
            if not self.stack:
                raise NoOpenTagError(self.source, token.offset)
            self.stack[-1].content.append(text)
        elif mode is Mode.INLINE_CODE:
            self.emit(f'<span class="{INLINE_CODE_CLASS}">')
            self.emit_text(html_escape(text))
            self.emit("</span>")
        else:
            self.emit_text(text)

    def _on_open_tag(self, token: Token) -> None:
        element = self.push_tag(token.value)
        if element.kind is TagKind.CODE:
            self.mode_stack.append(Mode.CODE)
        elif element.kind is TagKind.IMAGE:
            self.mode_stack.append(Mode.IMAGE)

    def _on_close_tag(self, token: Token) -> None:
        element = self.pop_tag(token.value, token.offset)
        if element.kind in (TagKind.CODE, TagKind.IMAGE):
            self.mode_stack.pop()

    def _on_self_close_tag(self, token: Token) -> None:
        tag = token.value
        self.push_tag(tag)
        self.pop_tag(tag.name, token.offset)

    def _on_backtick(self, token: Token) -> None:
        if not self.tokenizer.backticks_enabled:
            self.emit("`")
        elif self.mode is Mode.NORMAL:
            self.mode_stack.append(Mode.INLINE_CODE)
        elif self.mode is Mode.INLINE_CODE:
            self.mode_stack.pop()
        else:
            self.emit("`")

    # Tag stack

    def push_tag(self, tag: Tag) -> OpenElement:
        """Open `tag`, emitting its opening markup, and push it on the stack."""
        if tag.name in HEADER_ALIASES:
            attributes = dict(tag.attributes)
            existing = attributes.get("class")
            attributes["class"] = HEADER_CLASS if existing is None else f"{existing} {HEADER_CLASS}"
            tag = replace(tag, name=HEADER_TAG, attributes=attributes)

        element = OpenElement(tag)
        self._open_handlers[element.kind](element)
        self.stack.append(element)
        return element

    def pop_tag(self, name: str, offset: int = 0) -> OpenElement:
        """Close the innermost tag, which must be named `name`.

        Raises:
            MismatchedCloseTagError: If no tag is open or the innermost open tag
                has a different name.
        """
        # Both aliases close as h2, so <header> can be closed by </h2> and vice versa.
        if name in HEADER_ALIASES:
            name = HEADER_TAG

        opener = self.stack.pop() if self.stack else None
        if opener is None or opener.name != name:
            expected = opener.name if opener is not None else ""
            raise MismatchedCloseTagError(expected, name, self.source, offset)

        self._close_handlers[opener.kind](opener)
        return opener

    # Open handlers

    def _open_comment(self, element: OpenElement) -> None:
        self.output.comment_depth += 1

    def _open_bookmark(self, element: OpenElement) -> None:
        name = element.tag.attributes.get("name")
        if name is not None:
            display_name = name.strip()
        else:
            display_name = f"{BOOKMARK_NAME_PREFIX}{self.bookmark_counter}"
            self.bookmark_counter += 1

        unique_id = self._id_factory()
        element.bookmark_id = unique_id
        self.bookmarks.append(Bookmark(display_name, unique_id))
        self.text_listeners[unique_id] = []
        logger.debug("Registered bookmark %r", display_name)
        self.emit(f'<a name="{html_escape(display_name)}"></a>')

    def _open_table_of_contents(self, element: OpenElement) -> None:
        if not self.output.enabled:
            return
        if self.table_of_contents_requested:
            raise DuplicateTableOfContentsError(self.source, element.tag.offset)
        self.table_of_contents_requested = True
        self.output.mark_splice_point()

    def _open_box(self, element: OpenElement) -> None:
        self.emit(f'<div class="{element.name}{BOX_CLASS_SUFFIX}">')

    def _open_element(self, element: OpenElement) -> None:
        self.emit(f"<{element.name}{render_attributes(element.tag.attributes)}>")

    # Close handlers

    def _close_comment(self, element: OpenElement) -> None:
        self.output.comment_depth -= 1

    def _close_backticks_toggle(self, element: OpenElement) -> None:
        self.tokenizer.backticks_enabled = element.kind is TagKind.ENABLE_BACKTICKS

    def _close_bookmark(self, element: OpenElement) -> None:
        label = "".join(self.text_listeners.pop(element.bookmark_id, []))
        for bookmark in reversed(self.bookmarks):
            if bookmark.unique_id == element.bookmark_id:
                bookmark.label = label
                break

    def _close_image(self, element: OpenElement) -> None:
        url = "".join(element.content).strip()
        attributes = dict(element.tag.attributes)
        alt_text = attributes.pop("alt", "").strip()
        if not alt_text:
            alt_text = html_escape(url.split("/")[-1])
        if "mouseover" in attributes:
            attributes["title"] = attributes.pop("mouseover")

        self.emit(f'<img src="{url}" alt="{alt_text}"{render_attributes(attributes)}/>')

    def _close_code(self, element: OpenElement) -> None:
        attributes = element.tag.attributes
        language = attributes.get("language", self.config.default_language)
        classes = [
            name.strip()
            for name in attributes.get("classes", "").replace(" ", ",").split(",")
            if name.strip()
        ]
        try:
            highlighter = SyntaxHighlighter(language, self.config.tab_size)
        except UnsupportedLanguageError as error:
            raise UnsupportedLanguageError(
                error.language, self.source, element.tag.offset
            ) from error

        html = highlighter.highlight("".join(element.content), classes)
        self.emit(f"<div{render_attributes(attributes, exclude=('language', 'classes'))}>")
        self.emit(html)
        self.emit("</div>")

    def _close_div(self, element: OpenElement) -> None:
        self.emit("</div>")

    def _close_element(self, element: OpenElement) -> None:
        self.emit(f"</{element.name}>")


def _ignore(element: OpenElement) -> None:
    pass


def parse_html_plus_plus(source: str, config: HtmlPlusPlusConfig | None = None) -> str:
    """Compile an HTML++ string to HTML.

    Args:
        source: The HTML++ text.
        config: Parsing options. Defaults to a new `HtmlPlusPlusConfig`.

    Returns:
        str: The compiled HTML fragment.

    Raises:
        ConfigError: If the configuration fails validation.
        HtmlPlusPlusError: If the document is malformed.

    Examples:
        parse_html_plus_plus("<heading>Intro</heading>")
        # '<h2 class="hpp_header">Intro</h2>'
    """
    config = config or HtmlPlusPlusConfig()
    validate_config(config)
    return HtmlPlusPlusParser(source, config).parse()


class ParseFileError(Exception):
    """Raised when compiling an HTML++ file fails."""


def parse_file(filepath: Path, config: HtmlPlusPlusConfig | None = None) -> str:
    """Read and compile an HTML++ file.

    Args:
        filepath: Path to the source file.
        config: Parsing options; defaults to a new `HtmlPlusPlusConfig`.

    Returns:
        str: The compiled HTML fragment.

    Raises:
        ParseFileError: If configuration is invalid, the file cannot be read or
            decoded, or the document is malformed. Messages for malformed
            documents quote the source around the failure.

    Examples:
        html = parse_file(Path("posts/intro.hpp"))
    """
    config = config or HtmlPlusPlusConfig()
    try:
        validate_config(config)
    except ConfigError as error:
        raise ParseFileError(str(error)) from error

    try:
        content = read_source(filepath)
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise ParseFileError(error_message) from error
    except IOError as error:
        raise ParseFileError(str(error)) from error

    try:
        return HtmlPlusPlusParser(content, config).parse()
    except HtmlPlusPlusError as error:
        error_message = f"{filepath}: {format_error(error, config.context_radius)}"
        raise ParseFileError(error_message) from error
