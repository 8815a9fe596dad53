"""
Bare-URL linkifier for task notes.

A text node is linkable when any of its newline-separated lines starts with
http:// or https://. Linkable nodes are split into one text node per line
(with explicit "\\n" nodes between them) and every linkable line node is
replaced by <a href="LINE">LINE</a>. Anchor subtrees are never entered, so
running the linkifier twice gives the same tree as running it once.

Detection (has_unlinked_url) walks the same nodes with the same predicate
and must agree with what fix_unlinked_urls would change.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

URL_PREFIXES = ("http://", "https://")

# Full-document parsers wrap fragments in these; the notes API wants <body>…</body>.
DOCUMENT_PREFIX = "<html><head></head>"
DOCUMENT_SUFFIX = "</html>"


def _is_text(node: Optional[PageElement]) -> bool:
    # Comments, CDATA, doctypes and the like are not text.
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def _is_anchor(node: Optional[PageElement]) -> bool:
    return isinstance(node, Tag) and node.name == "a"


def node_has_unlinked_url(node: Optional[PageElement]) -> bool:
    """True if ``node`` is a text node with a line starting with a URL scheme."""
    if not _is_text(node):
        return False
    return any(line.startswith(URL_PREFIXES) for line in str(node).split("\n"))


def _text_nodes(node: Optional[PageElement]) -> Iterator[NavigableString]:
    """Text nodes under ``node`` in document order, outside any anchor."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current is None or _is_anchor(current):
            continue
        if isinstance(current, Tag):
            stack.extend(reversed(current.contents))
        elif _is_text(current):
            yield current


def _is_linkable(node: NavigableString) -> bool:
    # A detached text node has nowhere to splice anchors into.
    return node.parent is not None and node_has_unlinked_url(node)


def has_unlinked_url(node: Optional[PageElement]) -> bool:
    """True if the subtree under ``node`` holds a linkable text node outside any anchor."""
    return any(_is_linkable(text) for text in _text_nodes(node))


def fix_unlinked_urls(node: Optional[PageElement]) -> None:
    """Convert every bare URL line under ``node`` into an anchor, in place."""
    # Snapshot: text nodes are replaced while we walk.
    for text in list(_text_nodes(node)):
        if _is_linkable(text):
            text.replace_with(*_linkify_lines(text))


def _linkify_lines(node: NavigableString) -> List[Union[NavigableString, Tag]]:
    """Split a text node by line and promote each linkable line to an anchor."""
    ret: List[Union[NavigableString, Tag]] = []

    for line_node in split_text_node(str(node)):
        if node_has_unlinked_url(line_node):
            ret.append(_new_anchor(node, str(line_node)))
        else:
            ret.append(line_node)

    return ret


def split_text_node(text: str) -> List[NavigableString]:
    """
    One text node per line, with a "\\n" node between consecutive lines, so
    that concatenating the result reproduces ``text`` exactly.
    """
    ret: List[NavigableString] = []

    for i, line in enumerate(text.split("\n")):
        if i > 0:
            ret.append(NavigableString("\n"))
        ret.append(NavigableString(line))

    return ret


def _new_anchor(context: PageElement, url: str) -> Tag:
    root = context
    while root.parent is not None:
        root = root.parent

    if isinstance(root, BeautifulSoup):
        anchor = root.new_tag("a", attrs={"href": url})
    else:
        anchor = Tag(name="a", attrs={"href": url})

    anchor.append(NavigableString(url))
    return anchor


def render_notes(document: Tag) -> str:
    """Serialize a notes tree back to the <body>…</body> form the API stores."""
    notes = document.decode()
    notes = notes.removeprefix(DOCUMENT_PREFIX)
    notes = notes.removesuffix(DOCUMENT_SUFFIX)
    return notes
