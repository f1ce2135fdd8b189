"""Constants used across the htmlplusplus package."""

from __future__ import annotations

import string

# Tag grammar
TAG_START_CHARS = frozenset(string.ascii_letters)
TAG_NAME_CHARS = frozenset(string.ascii_letters + string.digits + ".-_")
TAG_WHITESPACE = frozenset(" \t\r\n")
CODE_CLOSE_TAG = "</code>"

# Tag vocabulary
HEADER_ALIASES = ("header", "heading")
HEADER_TAG = "h2"
HEADER_CLASS = "hpp_header"
BOX_CLASS_SUFFIX = "_box"
INLINE_CODE_CLASS = "inline_code"
TABLE_OF_CONTENTS_CLASS = "hpp_tableofcontents"
AUTHOR_COMMENT_ATTRIBUTE = "comment"
BOOKMARK_NAME_PREFIX = "h"
BOOKMARK_ID_BYTES = 30

# Highlighter markup
CODE_CONTAINER_CLASS = "bhsh_code"
CLASS_PREFIX = "bhsh_"
LINE_BREAK = "<br/>\n"
NON_BREAKING_SPACE = "&nbsp;"

# Input files
HTMLPLUSPLUS_EXTENSIONS = (".hpp", ".htmlpp", ".html", ".txt")
