"""
Read-only view of a document tree.

Renders the tree (including highlight marks) to HTML for a
QTextBrowser and scrolls to the current mark.
"""

from __future__ import annotations

import html
from typing import Optional

from PyQt6.QtGui import QTextCursor
from PyQt6.QtWidgets import QTextBrowser, QWidget

from searchlight.core.collector import SKIP_TAGS
from searchlight.core.document import Document, Element, MarkElement, Node, TextNode


MARK_ANCHOR_PREFIX = "searchlight-mark-"

MATCH_BACKGROUND = "#fff176"
CURRENT_BACKGROUND = "#ff9632"

_VOID_TAGS = frozenset({'br', 'hr', 'img', 'input', 'wbr'})
_UNWRAPPED_TAGS = frozenset({'html', 'body'})


def mark_anchor(mark: MarkElement) -> str:
    return f"{MARK_ANCHOR_PREFIX}{mark.index}"


def render_html(node: Node) -> str:
    """Serialise a node and its descendants to HTML."""
    parts: list[str] = []
    _render(node, parts, hidden=False)
    return ''.join(parts)


def _render(node: Node, parts: list[str], hidden: bool) -> None:
    """
    Append the HTML for one node.

    ``hidden`` is the inherited "visibility: hidden" state. Hidden text is
    left out but its subtree is still walked, since a descendant may set
    "visibility: visible" again.
    """
    if isinstance(node, TextNode):
        if not hidden:
            parts.append(html.escape(node.text, quote=False))
        return

    if not isinstance(node, Element):
        return

    if isinstance(node, MarkElement):
        background = CURRENT_BACKGROUND if node.current else MATCH_BACKGROUND
        parts.append(f'<a name="{mark_anchor(node)}"></a>')
        parts.append(f'<span style="background-color: {background}; color: #000000;">')
        for child in node.children:
            _render(child, parts, hidden=False)
        parts.append('</span>')
        return

    style = node.style
    if node.tag in SKIP_TAGS or not style.is_displayed:
        return

    if style.visibility in ('hidden', 'collapse'):
        hidden = True
    elif style.visibility == 'visible':
        hidden = False

    if node.tag in _UNWRAPPED_TAGS:
        for child in node.children:
            _render(child, parts, hidden)
        return

    if node.tag in _VOID_TAGS:
        parts.append(f'<{node.tag}>')
        return

    parts.append(f'<{node.tag}>')
    for child in node.children:
        _render(child, parts, hidden)
    parts.append(f'</{node.tag}>')


class DocumentView(QTextBrowser):
    """Displays a document and follows the current search mark."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._document: Optional[Document] = None
        self.setOpenLinks(False)

    @property
    def document_tree(self) -> Optional[Document]:
        return self._document

    def set_document(self, document: Optional[Document]) -> None:
        self._document = document
        self.refresh()

    def refresh(self) -> None:
        """Re-render the tree, keeping the scroll position."""
        scrollbar = self.verticalScrollBar()
        position = scrollbar.value()

        if self._document is None:
            self.clear()
        else:
            self.setHtml(f"<html><body>{render_html(self._document.root)}</body></html>")

        scrollbar.setValue(position)

    def scroll_to_mark(self, mark: MarkElement) -> None:
        self.scrollToAnchor(mark_anchor(mark))

    def selected_text(self) -> str:
        cursor: QTextCursor = self.textCursor()
        # Qt uses U+2029 as the paragraph separator in selections
        return cursor.selectedText().replace('\u2029', '\n')
