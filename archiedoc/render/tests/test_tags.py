#!/usr/bin/env python3
"""
Unit tests for rendering Google Doc HTML exports as ArchieML text.
"""

import pytest
from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString

from ..tags import TagKind, classify, find_body, render_document, render_node, tag_kind_counts, TAG_KINDS
from ...errors import DocumentParseError


def element(markup: str):
    """Parse a fragment and return its first element."""
    soup = BeautifulSoup(markup, 'html.parser')
    return next(soup.children)


def export(body: str) -> str:
    """Wrap body markup the way a Docs export does."""
    return (
        '<html><head><meta content="text/html; charset=UTF-8" http-equiv="content-type">'
        '<style type="text/css">.c0{font-weight:700}</style></head>'
        f'<body class="c3">{body}</body></html>'
    )


class TestClassify:
    """Test mapping DOM nodes to tag kinds."""

    @pytest.mark.parametrize("name,kind", [
        ('span', TagKind.CONTAINER),
        ('ul', TagKind.CONTAINER),
        ('ol', TagKind.CONTAINER),
        ('p', TagKind.BLOCK),
        ('h1', TagKind.BLOCK),
        ('h6', TagKind.BLOCK),
        ('li', TagKind.LIST_ITEM),
        ('a', TagKind.ANCHOR),
        ('table', TagKind.UNHANDLED),
        ('img', TagKind.UNHANDLED),
        ('div', TagKind.UNHANDLED),
    ])
    def test_element_kinds(self, name, kind):
        """Test each tag name maps to its kind."""
        assert classify(element(f'<{name}></{name}>')) == kind

    def test_text_and_comment(self):
        """Test text nodes are TEXT but comments are not."""
        assert classify(NavigableString("hello")) == TagKind.TEXT
        assert classify(Comment("note to editor")) == TagKind.UNHANDLED

    def test_tag_table_is_read_only(self):
        """Test the tag table cannot be mutated at runtime."""
        with pytest.raises(TypeError):
            TAG_KINDS['div'] = TagKind.BLOCK


class TestRenderNode:
    """Test rendering of individual nodes."""

    def test_text_node_is_escaped(self):
        """Test text renders as escaped character data, whitespace and quotes kept."""
        text = NavigableString('  Tom & “Jerry” <3  ')
        assert render_node(text) == '  Tom &amp; “Jerry” &lt;3  '

    def test_span_concatenates_children(self):
        """Test spans add no markup."""
        node = element('<span>one <span>two</span> three</span>')
        assert render_node(node) == 'one two three'

    def test_paragraph_adds_newline(self):
        """Test paragraphs end with a single newline."""
        node = element('<p><span>key: </span><span>value</span></p>')
        assert render_node(node) == 'key: value\n'

    @pytest.mark.parametrize("level", range(1, 7))
    def test_headings_render_like_paragraphs(self, level):
        """Test every heading level ends with a newline."""
        node = element(f'<h{level}><span>[section]</span></h{level}>')
        assert render_node(node) == '[section]\n'

    def test_nested_blocks(self):
        """Test newlines accumulate at every nesting depth."""
        node = element('<h1>outer<span><p>inner</p></span></h1>')
        assert render_node(node) == 'outerinner\n\n'

    def test_list_items(self):
        """Test list items get a bullet prefix and newline."""
        node = element('<ul><li><span>One</span></li><li>Two</li></ul>')
        assert render_node(node) == '* One\n* Two\n'

    def test_ordered_list_uses_bullets_too(self):
        """Test ordered lists render like unordered ones."""
        node = element('<ol><li>First</li></ol>')
        assert render_node(node) == '* First\n'

    def test_anchor_with_plain_href(self):
        """Test anchors keep inline link markup."""
        node = element('<a href="http://example.com"><span>site</span></a>')
        assert render_node(node) == '<a href="http://example.com">site</a>'

    def test_anchor_with_tracking_href(self):
        """Test tracking redirects are unwrapped."""
        node = element('<a href="https://www.google.com/url?q=http%3A%2F%2Fexample.com&amp;sa=D">site</a>')
        assert render_node(node) == '<a href="http://example.com">site</a>'

    def test_anchor_href_is_escaped(self):
        """Test quotes and ampersands in the href stay inside the attribute."""
        node = element('<a href="http://example.com/?a=1&amp;b=&quot;x&quot;">site</a>')
        assert render_node(node) == '<a href="http://example.com/?a=1&amp;b=&quot;x&quot;">site</a>'

    def test_anchor_without_href_drops_text(self):
        """Test anchors with no href render as nothing, text included."""
        node = element('<a id="bookmark"><span>lost text</span></a>')
        assert render_node(node) == ''

    def test_unhandled_tags_drop_content(self):
        """Test unknown tags contribute nothing, children included."""
        assert render_node(element('<table><tr><td><p>cell</p></td></tr></table>')) == ''
        assert render_node(element('<img src="chart.png">')) == ''
        assert render_node(element('<div><p>inside div</p></div>')) == ''

    def test_comment_inside_paragraph(self):
        """Test comments do not leak into the text."""
        node = element('<p>before<!-- hidden -->after</p>')
        assert render_node(node) == 'beforeafter\n'


class TestRenderDocument:
    """Test rendering full exports."""

    def test_end_to_end_paragraph_with_link(self):
        """Test a paragraph with a tracking link renders inline."""
        html = export('<p>Hello <a href="http://google.com/url?q=http://x.com">world</a></p>')
        assert render_document(html) == 'Hello <a href="http://x.com">world</a>\n'

    def test_head_is_not_rendered(self):
        """Test only the body contributes text."""
        html = '<html><head><title><span>Title</span></title></head><body><p>Body</p></body></html>'
        assert render_document(html) == 'Body\n'

    def test_document_order_is_kept(self):
        """Test blocks render in DOM order with no deduplication."""
        html = export('<h1>[+items]</h1><ul><li>a</li><li>a</li></ul><p>[]</p>')
        assert render_document(html) == '[+items]\n* a\n* a\n[]\n'

    def test_whitespace_between_head_and_body(self):
        """Test text between head and body does not shift the body lookup."""
        html = '<html>\n<head></head>\n<body><p>x</p></body>\n</html>'
        assert render_document(html) == 'x\n'

    def test_no_root_element(self):
        """Test text with no elements is a parse error."""
        with pytest.raises(DocumentParseError):
            render_document('just some text')

    def test_missing_body(self):
        """Test a root with a single element is a parse error."""
        with pytest.raises(DocumentParseError):
            render_document('<html><body><p>x</p></body></html>')

    def test_find_body_returns_second_element(self):
        """Test the body is the second element under the root."""
        soup = BeautifulSoup(export('<p>x</p>'), 'html.parser')
        assert find_body(soup).name == 'body'


def test_tag_kind_counts():
    """Test element counting by kind."""
    soup = BeautifulSoup(export('<p><span>a</span><img src="x.png"></p><ul><li>b</li></ul>'), 'html.parser')
    counts = tag_kind_counts(find_body(soup))
    assert counts == {'block': 1, 'container': 2, 'unhandled': 1, 'list_item': 1}
