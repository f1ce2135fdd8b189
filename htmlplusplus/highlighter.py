"""Syntax highlighting of code snippets into classed HTML spans.

The whole snippet is wrapped in ``<div class="bhsh_code">...</div>``. Within
the block, spans carry one of these classes:

- ``bhsh_keyword``
- ``bhsh_constant``
- ``bhsh_classname`` (built-in class names of the language)
- ``bhsh_class`` (class names supplied by the caller)
- ``bhsh_string``
- ``bhsh_comment``
- ``bhsh_number``
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from html import escape as html_escape

from .code_tokenizer import DIGITS, CodeTokenizer
from .constants import CLASS_PREFIX, CODE_CONTAINER_CLASS, LINE_BREAK, NON_BREAKING_SPACE
from .exceptions import UnsupportedLanguageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LanguageDefinition:
    """Lexical and vocabulary settings for one highlighter language.

    Attributes:
        name: Lowercase language name.
        tab_size: Spaces a tab expands to.
        string_delimiters: Characters that open and close strings.
        comment_markers: Comment introducers (``#``, ``//``, ``/*``).
        keywords: Words rendered as keywords.
        constants: Words rendered as constants.
        class_names: Built-in class names.
        classify: Whether tokens are classified at all.
    """

    name: str
    tab_size: int = 4
    string_delimiters: tuple[str, ...] = ()
    comment_markers: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    constants: tuple[str, ...] = ()
    class_names: tuple[str, ...] = ()
    classify: bool = True


LANGUAGES: dict[str, LanguageDefinition] = {
    "none": LanguageDefinition(name="none", classify=False),
    "python": LanguageDefinition(
        name="python",
        tab_size=2,
        string_delimiters=('"', "'"),
        comment_markers=("#",),
        keywords=tuple(
            "as class def elif else except finally for from if import in lambda print "
            "raise return try while with".split()
        ),
        constants=("False", "None", "self", "super", "True"),
        class_names=("Exception",),
    ),
}

SUPPORTED_LANGUAGES = frozenset(LANGUAGES)


def _build_lookup_table(language: LanguageDefinition) -> dict[str, str]:
    named = {
        "keyword": language.keywords,
        "constant": language.constants,
        "classname": language.class_names,
    }
    return {word: kind for kind, words in named.items() for word in words}


def _span(kind: str, html: str) -> str:
    return f'<span class="{CLASS_PREFIX}{kind}">{html}</span>'


class SyntaxHighlighter:
    """Render code snippets as highlighted HTML for one language.

    Args:
        language: Language name; surrounding whitespace and case are ignored.
        tab_size: Spaces per tab, overriding the language's own width.

    Raises:
        UnsupportedLanguageError: If `language` is not in `SUPPORTED_LANGUAGES`.

    Examples:
        SyntaxHighlighter("Python").highlight("def f(self):\\n\\treturn None")
    """

    def __init__(self, language: str, tab_size: int | None = None):
        name = language.strip().lower()
        definition = LANGUAGES.get(name)
        if definition is None:
            raise UnsupportedLanguageError(language)
        self.language = definition
        self.tab_size = definition.tab_size if tab_size is None else tab_size
        self.token_lookup = _build_lookup_table(definition)
        logger.debug("Highlighter ready for %s (tab size %d)", name, self.tab_size)

    def normalize_whitespace(self, code: str) -> str:
        """Tidy a snippet before tokenization.

        Canonicalizes line endings to ``\\n``, right-trims every line, drops
        blank lines at the start and end, and expands tabs to `tab_size` spaces.
        Applying it twice gives the same result as applying it once.
        """
        code = code.replace("\r\n", "\n").replace("\r", "\n")
        lines = [line.rstrip() for line in code.split("\n")]
        while lines and not lines[0]:
            lines.pop(0)
        while lines and not lines[-1]:
            lines.pop()
        return "\n".join(lines).replace("\t", " " * self.tab_size)

    def highlight(self, code: str, class_names: Iterable[str] | None = None) -> str:
        """Render `code` as an HTML fragment.

        Args:
            code: Raw snippet text.
            class_names: Extra identifiers to render with the ``bhsh_class`` class.

        Returns:
            str: ``<div class="bhsh_code">`` block with one span per classified token.
        """
        extra_classes = {name for name in (class_names or ()) if name}
        code = self.normalize_whitespace(code)
        tokens = CodeTokenizer(
            code, self.language.string_delimiters, self.language.comment_markers
        )

        output = [f'<div class="{CODE_CONTAINER_CLASS}">', "\n"]
        output.extend(self._render_token(token, extra_classes) for token in tokens)
        output.extend(["\n", "</div>", "\n"])
        return "".join(output)

    def _render_token(self, token: str, extra_classes: set[str]) -> str:
        kind = self.token_lookup.get(token)
        if kind is not None:
            return _span(kind, html_escape(token))
        if token in extra_classes:
            return _span("class", html_escape(token))

        if self.language.classify:
            literal_kind = self._literal_kind(token)
            if literal_kind is not None:
                html = html_escape(token).replace(" ", NON_BREAKING_SPACE)
                return _span(literal_kind, html.replace("\n", LINE_BREAK))
            if token[0] in DIGITS or (token[0] == "." and len(token) > 1):
                return _span("number", html_escape(token))

        if token == " ":
            return NON_BREAKING_SPACE
        if token == "\n":
            return LINE_BREAK
        return html_escape(token)

    def _literal_kind(self, token: str) -> str | None:
        if any(token.startswith(marker) for marker in self.language.comment_markers):
            return "comment"
        if token[0] in self.language.string_delimiters:
            return "string"
        return None


def highlight(
    code: str,
    language: str = "none",
    class_names: Iterable[str] | None = None,
    tab_size: int | None = None,
) -> str:
    """Highlight `code` with a throwaway `SyntaxHighlighter`.

    Raises:
        UnsupportedLanguageError: If `language` is not supported.
    """
    return SyntaxHighlighter(language, tab_size).highlight(code, class_names)
