"""Shared fixtures for the test suite."""

from __future__ import annotations

import pytest

from searchlight.core.document import Document, Element, Style, TextNode
from searchlight.core.models import TextLeaf


def paragraph(text: str, **style) -> Element:
    return Element(tag='p', style=Style(display='block', **style), children=[TextNode(text=text)])


def body(*children) -> Element:
    return Element(tag='body', style=Style(display='block'), children=list(children))


def leaf_for(text: str) -> TextLeaf:
    """Wrap text in a paragraph and return it as a collected leaf."""
    node = TextNode(text=text)
    Element(tag='p', children=[node])
    return TextLeaf(node=node, content=text, position=0)


@pytest.fixture
def sample_document() -> Document:
    """
    A small page:

    - two visible paragraphs
    - a script, a hidden div and a find bar that must never be searched
    """
    root = body(
        paragraph("The quick brown fox"),
        Element(tag='script', children=[TextNode(text="var fox = 1;")]),
        Element(tag='div', style=Style(display='none'), children=[TextNode(text="hidden fox")]),
        Element(
            tag='div',
            attributes={'id': 'searchlight-findbar'},
            children=[TextNode(text="fox")],
        ),
        paragraph("jumps over the lazy dog. Fox!"),
    )
    return Document(root=root, title="Sample")
