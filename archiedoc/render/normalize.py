"""
Post-processing of rendered document text before ArchieML parsing.
"""

import html
import re

INLINE_TAG_PATTERN = re.compile(r'<[^<>]*>')

DOUBLE_SMART_QUOTES = re.compile(r'[“”]')
SINGLE_SMART_QUOTES = re.compile(r'[‘’]')


def decode_entities(text: str) -> str:
    """Convert html entities into the characters as they exist in the google doc"""
    return html.unescape(text)


def _straighten(match: re.Match) -> str:
    tag = DOUBLE_SMART_QUOTES.sub('"', match.group(0))
    return SINGLE_SMART_QUOTES.sub("'", tag)


def straighten_tag_quotes(text: str) -> str:
    """
    Replace smart quotes with straight ones, but only inside `<...>` spans.

    Docs autocorrects the quotes an author types in an inline tag such as
    <a href=“...”>. Prose outside the brackets keeps its typography.
    """
    return INLINE_TAG_PATTERN.sub(_straighten, text)


def normalize_text(text: str) -> str:
    """Decode entities, then straighten quotes inside inline tags."""
    return straighten_tag_quotes(decode_entities(text))
