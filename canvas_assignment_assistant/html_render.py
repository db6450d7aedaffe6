"""Render assignment description HTML as plain text, Markdown or a link list.

Descriptions are free-form instructor HTML, so the Markdown conversion only
understands a handful of tags. Anything else is unwrapped and its text kept.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from .models import Link

# "$1" would otherwise be read as a capture-group reference downstream.
DOLLAR_DIGITS_PATTERN = re.compile(r"\$([0-9]+)")
EXTRA_NEWLINES_PATTERN = re.compile(r"\n{3,}")

PARSER = "html5lib"

HEADING_PREFIXES = {"h1": "#", "h2": "##", "h3": "###"}


def escape_dollars(text: str) -> str:
    return DOLLAR_DIGITS_PATTERN.sub(r"\\$\1", text)


def _soup(html: str) -> BeautifulSoup:
    # html5lib builds the HTML5 tree, so omitted </li> and </p> close implicitly.
    return BeautifulSoup(html, PARSER)


def _parse(html: str) -> Tag:
    soup = _soup(html)
    return soup.body or soup


def to_plain_text(html: Optional[str]) -> str:
    """Text content of ``html`` with markup removed."""
    if not html:
        return ""
    return escape_dollars(_parse(html).get_text())


def _text_of(tag: Tag) -> str:
    return escape_dollars(tag.get_text())


def _render_children(tag: Tag) -> str:
    return "".join(_render(child) for child in tag.children)


def _render_heading(tag: Tag) -> str:
    return f"{HEADING_PREFIXES[tag.name.lower()]} {_text_of(tag)}\n\n"


def _render_bold(tag: Tag) -> str:
    return f"**{_text_of(tag)}**"


def _render_italic(tag: Tag) -> str:
    return f"*{_text_of(tag)}*"


def _render_unordered(tag: Tag) -> str:
    items = [f"- {_render(child)}" for child in tag.find_all(True, recursive=False)]
    return "\n".join(items) + "\n\n"


def _render_ordered(tag: Tag) -> str:
    items = [
        f"{position}. {_render(child)}"
        for position, child in enumerate(tag.find_all(True, recursive=False), start=1)
    ]
    return "\n".join(items) + "\n\n"


def _render_list_item(tag: Tag) -> str:
    return _render_children(tag).strip()


def _render_paragraph(tag: Tag) -> str:
    return _render_children(tag) + "\n\n"


def _render_line_break(tag: Tag) -> str:
    return "\n"


def _render_anchor(tag: Tag) -> str:
    href = tag.get("href")
    text = _text_of(tag)
    return f"[{text}]({href})" if href else text


TAG_RENDERERS: Dict[str, Callable[[Tag], str]] = {
    "h1": _render_heading,
    "h2": _render_heading,
    "h3": _render_heading,
    "strong": _render_bold,
    "b": _render_bold,
    "em": _render_italic,
    "i": _render_italic,
    "ul": _render_unordered,
    "ol": _render_ordered,
    "li": _render_list_item,
    "p": _render_paragraph,
    "br": _render_line_break,
    "a": _render_anchor,
}


def _render(node: PageElement) -> str:
    if isinstance(node, Tag):
        renderer = TAG_RENDERERS.get(node.name.lower(), _render_children)
        return renderer(node)
    # Comments, doctypes, CDATA and processing instructions carry no content.
    if isinstance(node, PreformattedString):
        return ""
    if isinstance(node, NavigableString):
        return escape_dollars(str(node))
    return ""


def to_markdown(html: Optional[str]) -> str:
    """Convert ``html`` into the small Markdown subset used in reports."""
    if not html:
        return ""
    markdown = _render_children(_parse(html)).strip()
    return EXTRA_NEWLINES_PATTERN.sub("\n\n", markdown)


def extract_links(html: Optional[str]) -> List[Link]:
    """Every anchor in document order; a missing href becomes ``""``."""
    if not html:
        return []
    soup = _soup(html)
    return [
        Link(text=escape_dollars(anchor.get_text()), href=anchor.get("href") or "")
        for anchor in soup.find_all("a")
    ]
