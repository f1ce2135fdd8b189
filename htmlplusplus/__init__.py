"""
htmlplusplus: compiler for HTML++, a small tag language for trusted content.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    htmlplusplus post.hpp -o post.html

Library Usage:
    from htmlplusplus import parse_html_plus_plus, SyntaxHighlighter

    html = parse_html_plus_plus('<bookmark name="intro">Intro</bookmark><tableofcontents/>')
    snippet = SyntaxHighlighter("python").highlight("def f(): return None")
"""

from .code_tokenizer import CodeTokenizer, tokenize_code
from .config import ConfigError, HtmlPlusPlusConfig
from .context import error_context, format_error
from .exceptions import (
    DuplicateTableOfContentsError,
    ExpectedAttributeNameError,
    ExpectedLiteralError,
    ExpectedTagNameError,
    HtmlPlusPlusError,
    MismatchedCloseTagError,
    NewlineInInlineCodeError,
    NoOpenTagError,
    RawHtmlCommentError,
    UnclosedQuotedAttributeError,
    UnclosedTagError,
    UnexpectedTokenError,
    UnsupportedLanguageError,
)
from .highlighter import SUPPORTED_LANGUAGES, SyntaxHighlighter, highlight
from .models import Bookmark, Mode, Tag, TagKind, Token, TokenKind
from .parser import HtmlPlusPlusParser, ParseFileError, parse_file, parse_html_plus_plus
from .tokenizer import MarkupTokenizer

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse_html_plus_plus",
    "parse_file",
    "HtmlPlusPlusParser",
    "MarkupTokenizer",
    "SyntaxHighlighter",
    "CodeTokenizer",
    "highlight",
    "tokenize_code",
    "SUPPORTED_LANGUAGES",
    # Data models
    "Bookmark",
    "Mode",
    "Tag",
    "TagKind",
    "Token",
    "TokenKind",
    # Configuration
    "HtmlPlusPlusConfig",
    "ConfigError",
    # Diagnostics
    "error_context",
    "format_error",
    # Exceptions
    "HtmlPlusPlusError",
    "ParseFileError",
    "UnsupportedLanguageError",
    "MismatchedCloseTagError",
    "DuplicateTableOfContentsError",
    "RawHtmlCommentError",
    "UnexpectedTokenError",
    "ExpectedTagNameError",
    "ExpectedAttributeNameError",
    "UnclosedQuotedAttributeError",
    "ExpectedLiteralError",
    "NewlineInInlineCodeError",
    "NoOpenTagError",
    "UnclosedTagError",
    # Version
    "__version__",
]
