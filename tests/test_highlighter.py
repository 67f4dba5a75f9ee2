"""Tests for applying and removing highlight marks."""

import pytest

from conftest import body, paragraph, leaf_for
from searchlight.core.document import Document, MarkElement, TextNode, is_mark
from searchlight.core.highlighter import Highlighter
from searchlight.core.models import Span, TextLeaf


@pytest.fixture
def highlighter():
    return Highlighter()


def test_apply_splits_leaf_losslessly(highlighter):
    leaf = leaf_for("one two one")
    parent = leaf.node.parent

    marks = highlighter.apply(leaf, [Span(0, 3), Span(8, 3)])

    assert [mark.text_content for mark in marks] == ["one", "one"]
    assert parent.text_content == "one two one"
    assert [type(child) for child in parent.children] == [MarkElement, TextNode, MarkElement]
    assert leaf.node.parent is None


def test_marks_record_position(highlighter):
    leaf = TextLeaf(node=leaf_for("abcabc").node, content="abcabc", position=4)

    marks = highlighter.apply(leaf, [Span(0, 3), Span(3, 3)])

    assert [mark.sort_key for mark in marks] == [(4, 0), (4, 3)]
    assert all(is_mark(mark) for mark in marks)


def test_overlapping_spans_are_clipped(highlighter):
    leaf = leaf_for("abcdef")
    parent = leaf.node.parent

    marks = highlighter.apply(leaf, [Span(0, 4), Span(2, 3)])

    assert [mark.text_content for mark in marks] == ["abcd", "e"]
    assert parent.text_content == "abcdef"


def test_span_inside_previous_span_is_skipped(highlighter):
    leaf = leaf_for("abcdef")
    parent = leaf.node.parent

    marks = highlighter.apply(leaf, [Span(0, 5), Span(1, 2)])

    assert [mark.text_content for mark in marks] == ["abcde"]
    assert parent.text_content == "abcdef"


def test_zero_length_spans_create_empty_marks(highlighter):
    leaf = leaf_for("ab")
    parent = leaf.node.parent

    marks = highlighter.apply(leaf, [Span(0, 0), Span(1, 0)])

    assert len(marks) == 2
    assert all(mark.text_content == "" for mark in marks)
    assert parent.text_content == "ab"


def test_no_spans_leaves_tree_untouched(highlighter):
    leaf = leaf_for("text")
    parent = leaf.node.parent

    assert highlighter.apply(leaf, []) == []
    assert parent.children == [leaf.node]


def test_detached_leaf_is_skipped(highlighter):
    leaf = TextLeaf(node=TextNode(text="orphan"), content="orphan", position=0)

    assert highlighter.apply(leaf, [Span(0, 3)]) == []


def test_remove_all_restores_text(highlighter):
    doc = Document(root=body(paragraph("one two one"), paragraph("two")))
    original = doc.text_content
    first = doc.root.children[0]
    leaf = TextLeaf(node=first.children[0], content="one two one", position=0)

    highlighter.apply(leaf, [Span(0, 3), Span(8, 3)])
    assert len(doc.marks()) == 2

    removed = highlighter.remove_all(doc)

    assert removed == 2
    assert doc.text_content == original
    assert doc.marks() == []
    # Text is merged back into a single node
    assert len(first.children) == 1
    assert isinstance(first.children[0], TextNode)
    assert first.children[0].text == "one two one"


def test_remove_all_is_idempotent(highlighter):
    doc = Document(root=body(paragraph("abc abc")))
    p = doc.root.children[0]
    highlighter.apply(TextLeaf(node=p.children[0], content="abc abc", position=0), [Span(0, 3)])

    assert highlighter.remove_all(doc) == 1
    snapshot = [(type(c), c.text_content) for c in p.children]

    assert highlighter.remove_all(doc) == 0
    assert [(type(c), c.text_content) for c in p.children] == snapshot


def test_remove_all_on_empty_root(highlighter):
    assert highlighter.remove_all(None) == 0
