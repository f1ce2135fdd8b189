"""Table of contents generation from collected bookmarks."""

from __future__ import annotations

from collections.abc import Sequence
from html import escape as html_escape

from .constants import TABLE_OF_CONTENTS_CLASS
from .models import Bookmark


def generate_toc_entries(bookmarks: Sequence[Bookmark]) -> list[str]:
    """Render one link line per bookmark, in registration order.

    Labels are inserted as captured, since they are already HTML. Each line
    ends with a newline.

    Examples:
        generate_toc_entries([Bookmark("intro", "uid", "Introduction")])
        # ['<div><a href="#intro">Introduction</a></div>\\n']
    """
    return [
        f'<div><a href="#{html_escape(bookmark.display_name)}">{bookmark.label}</a></div>\n'
        for bookmark in bookmarks
    ]


def render_table_of_contents(bookmarks: Sequence[Bookmark]) -> str:
    """Build the block spliced in where ``<tableofcontents>`` appeared.

    Returns:
        str: The wrapped list of links, or an empty string when there are no
            bookmarks.
    """
    if not bookmarks:
        return ""
    lines = ["\n", f'<div class="{TABLE_OF_CONTENTS_CLASS}">', "\n"]
    lines.extend(generate_toc_entries(bookmarks))
    lines.extend(["</div>", "\n"])
    return "".join(lines)
