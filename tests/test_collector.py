"""Tests for visible text leaf collection."""

from conftest import body, paragraph
from searchlight.core.collector import SKIP_TAGS, NodeCollector
from searchlight.core.document import Document, Element, Style, TextNode


def contents(leaves):
    return [leaf.content for leaf in leaves]


def test_collects_visible_text_in_order(sample_document):
    leaves = NodeCollector().collect(sample_document)

    assert contents(leaves) == ["The quick brown fox", "jumps over the lazy dog. Fox!"]
    assert [leaf.position for leaf in leaves] == [0, 1]


def test_nested_text_is_depth_first():
    root = body(
        Element(tag='div', children=[
            TextNode(text="a"),
            Element(tag='span', children=[TextNode(text="b")]),
            TextNode(text="c"),
        ]),
        paragraph("d"),
    )

    assert contents(NodeCollector().collect(root)) == ["a", "b", "c", "d"]


def test_skips_non_rendering_tags():
    root = body(*[
        Element(tag=tag, children=[TextNode(text=f"inside {tag}")])
        for tag in sorted(SKIP_TAGS)
    ])

    assert NodeCollector().collect(root) == []


def test_skips_whitespace_only_text():
    root = body(paragraph("   \n\t "), paragraph(" x "))

    assert contents(NodeCollector().collect(root)) == [" x "]


def test_skips_hidden_styles():
    root = body(
        paragraph("plain"),
        Element(tag='div', style=Style(display='none'), children=[paragraph("display")]),
        Element(tag='div', style=Style(opacity=0.0), children=[paragraph("opacity")]),
        Element(tag='div', style=Style(width=0), children=[paragraph("width")]),
        Element(tag='div', style=Style(height=0), children=[paragraph("height")]),
        Element(tag='div', style=Style(opacity=0.2), children=[paragraph("faint")]),
    )

    assert contents(NodeCollector().collect(root)) == ["plain", "faint"]


def test_visibility_is_inherited_and_can_be_overridden():
    root = body(
        Element(tag='div', style=Style(visibility='hidden'), children=[
            paragraph("hidden"),
            Element(tag='span', style=Style(visibility='visible'), children=[TextNode(text="shown")]),
        ]),
    )

    assert contents(NodeCollector().collect(root)) == ["shown"]


def test_skips_ui_root_subtree():
    root = body(
        Element(tag='div', attributes={'id': 'bar'}, children=[paragraph("find bar")]),
        paragraph("content"),
    )

    assert contents(NodeCollector(ui_root_id='bar').collect(root)) == ["content"]
    assert contents(NodeCollector(ui_root_id=None).collect(root)) == ["find bar", "content"]


def test_document_is_searched_from_body():
    head = Element(tag='head', style=Style(display='none'), children=[
        Element(tag='title', children=[TextNode(text="Title")]),
    ])
    html = Element(tag='html', children=[head, body(paragraph("text"))])

    assert contents(NodeCollector().collect(Document(root=html))) == ["text"]


def test_empty_root():
    assert NodeCollector().collect(None) == []
    assert NodeCollector().collect(body()) == []


def test_leaf_snapshot_refers_to_live_node():
    root = body(paragraph("abc"))
    leaf = NodeCollector().collect(root)[0]

    assert leaf.node is root.children[0].children[0]
