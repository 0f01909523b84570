"""
Render a Google Doc HTML export as ArchieML source text.

The export wraps everything in styled spans and paragraphs. Only the
structure ArchieML cares about survives: one line per paragraph, heading or
list item, with `* ` bullets for list items and links kept inline as
<a href="...">...</a>. Anything else (images, tables, comments) renders as
nothing, and so does an anchor without an href, text included.
Character data comes out HTML-escaped, exactly as it sits in the markup.
"""

import html
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from ..config import get_logger
from ..errors import DocumentParseError
from .links import normalize_href

logger = get_logger(__name__)

Node = Union[PageElement, Tag, NavigableString]


class TagKind(Enum):
    """Every way a DOM node can be rendered."""
    TEXT = "text"
    CONTAINER = "container"
    BLOCK = "block"
    LIST_ITEM = "list_item"
    ANCHOR = "anchor"
    UNHANDLED = "unhandled"


TAG_KINDS: Mapping[str, TagKind] = MappingProxyType({
    'span': TagKind.CONTAINER,
    'ul': TagKind.CONTAINER,
    'ol': TagKind.CONTAINER,
    'p': TagKind.BLOCK,
    'h1': TagKind.BLOCK,
    'h2': TagKind.BLOCK,
    'h3': TagKind.BLOCK,
    'h4': TagKind.BLOCK,
    'h5': TagKind.BLOCK,
    'h6': TagKind.BLOCK,
    'li': TagKind.LIST_ITEM,
    'a': TagKind.ANCHOR,
})


def classify(node: Node) -> TagKind:
    """Map a DOM node to its TagKind."""
    if isinstance(node, Tag):
        return TAG_KINDS.get(node.name, TagKind.UNHANDLED)
    # Comments, doctypes and CDATA are strings too
    if isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
        return TagKind.TEXT
    return TagKind.UNHANDLED


def render_children(node: Tag) -> str:
    """Concatenate the rendering of each child, in document order."""
    return ''.join(render_node(child) for child in node.children)


def _render_text(node: NavigableString) -> str:
    # Re-escape so the single entity decode in normalize restores the doc text
    return html.escape(str(node), quote=False)


def _render_block(node: Tag) -> str:
    return f"{render_children(node)}\n"


def _render_list_item(node: Tag) -> str:
    return f"* {render_children(node)}\n"


def _render_anchor(node: Tag) -> str:
    href = node.attrs.get('href')
    if href is None:
        return ''
    return f'<a href="{html.escape(normalize_href(href))}">{render_children(node)}</a>'


def _render_nothing(node: Node) -> str:
    return ''


RENDERERS: Mapping[TagKind, Callable[[Node], str]] = MappingProxyType({
    TagKind.TEXT: _render_text,
    TagKind.CONTAINER: render_children,
    TagKind.BLOCK: _render_block,
    TagKind.LIST_ITEM: _render_list_item,
    TagKind.ANCHOR: _render_anchor,
    TagKind.UNHANDLED: _render_nothing,
})


def render_node(node: Node) -> str:
    """Render a single DOM node and its subtree."""
    return RENDERERS[classify(node)](node)


def parse_html(html_text: str) -> BeautifulSoup:
    """Parse raw export markup into a DOM tree."""
    return BeautifulSoup(html_text, 'html.parser')


def find_body(soup: BeautifulSoup) -> Tag:
    """
    Locate the document body of a Docs export.

    The export is <html><head>...</head><body>...</body></html>, so the body
    is the second element under the root element.
    """
    root = next((child for child in soup.children if isinstance(child, Tag)), None)
    if root is None:
        raise DocumentParseError("Exported HTML has no root element")
    elements = [child for child in root.children if isinstance(child, Tag)]
    if len(elements) < 2:
        raise DocumentParseError(
            f"Exported HTML root <{root.name}> has {len(elements)} element(s), expected head and body"
        )
    return elements[1]


def render_document(html_text: str) -> str:
    """Render the body of an exported document as ArchieML source text."""
    body = find_body(parse_html(html_text))
    text = render_children(body)
    logger.debug(f"Rendered {len(text)} characters from <{body.name}>")
    return text


def tag_kind_counts(node: Tag) -> Dict[str, int]:
    """Count the elements under a node by TagKind, for run metadata."""
    counts: Dict[str, int] = {}
    for element in node.find_all(True):
        kind = classify(element).value
        counts[kind] = counts.get(kind, 0) + 1
    return counts
