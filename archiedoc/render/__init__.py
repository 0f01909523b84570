"""
Google Doc HTML export to ArchieML text.

This package converts the DOM of an exported document into the line-oriented
text that archieml parses, and normalizes entities and quotes afterwards.
"""

from .tags import TagKind, classify, render_node, render_children, render_document, find_body, parse_html
from .links import normalize_href
from .normalize import decode_entities, straighten_tag_quotes, normalize_text

__all__ = [
    'TagKind',
    'classify',
    'render_node',
    'render_children',
    'render_document',
    'find_body',
    'parse_html',
    'normalize_href',
    'decode_entities',
    'straighten_tag_quotes',
    'normalize_text'
]
