#!/usr/bin/env python3
"""
Unit tests for entity decoding and smart-quote straightening.
"""

from ..normalize import decode_entities, normalize_text, straighten_tag_quotes


class TestDecodeEntities:
    """Test HTML entity decoding."""

    def test_named_entity(self):
        """Test &amp; outside any tag decodes to &."""
        assert decode_entities('Tom &amp; Jerry') == 'Tom & Jerry'

    def test_numeric_entities(self):
        """Test decimal and hex entities decode."""
        assert decode_entities('&#8220;quoted&#x201D;') == '“quoted”'

    def test_non_breaking_space(self):
        """Test &nbsp; becomes a non-breaking space."""
        assert decode_entities('a&nbsp;b') == 'a\xa0b'

    def test_plain_text_unchanged(self):
        """Test text without entities is untouched."""
        assert decode_entities('key: value\n') == 'key: value\n'


class TestStraightenTagQuotes:
    """Test smart quotes are straightened only inside angle brackets."""

    def test_only_inside_tags(self):
        """Test prose quotes keep their typography."""
        text = 'He said “hi” <a href=“x”>“link”</a>'
        assert straighten_tag_quotes(text) == 'He said “hi” <a href="x">“link”</a>'

    def test_single_quotes(self):
        """Test single smart quotes inside tags become apostrophes."""
        text = "<a href=‘http://x.com’>it’s</a>"
        assert straighten_tag_quotes(text) == "<a href='http://x.com'>it’s</a>"

    def test_bracketed_prose(self):
        """Test any bracketed span counts as a tag, even in prose."""
        text = 'a < b and “c” > d'
        assert straighten_tag_quotes(text) == 'a < b and "c" > d'

    def test_nested_brackets_match_innermost(self):
        """Test a bracket span cannot contain another <."""
        text = '< “x” <b class=“y”>'
        assert straighten_tag_quotes(text) == '< “x” <b class="y">'

    def test_no_tags(self):
        """Test text without tags is untouched."""
        assert straighten_tag_quotes('“hi” ‘there’') == '“hi” ‘there’'


def test_normalize_text_decodes_before_straightening():
    """Test tags spelled with entities are straightened once decoded."""
    text = '&lt;a href=&#8220;http://x.com&#8221;&gt;link&lt;/a&gt; &amp; “more”'
    assert normalize_text(text) == '<a href="http://x.com">link</a> & “more”'
