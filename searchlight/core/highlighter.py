"""
In-place highlighting of matches.

Applying marks replaces a text leaf with alternating plain-text and mark
segments that together hold exactly the original text. Removing marks
turns each mark back into text and merges it with its neighbours, so
repeated search passes never leave the tree fragmented.
"""

from __future__ import annotations

import logging
from typing import Sequence, Union

from searchlight.core.document import Document, Element, MarkElement, Node, TextNode, is_mark
from searchlight.core.models import Span, TextLeaf


class Highlighter:
    """Applies and removes highlight marks in a document tree."""

    def apply(self, leaf: TextLeaf, spans: Sequence[Span]) -> list[MarkElement]:
        """
        Replace a leaf with text and mark segments.

        Spans are taken in the given order. A span starting before the
        end of the previous one is clipped to the uncovered part, so the
        original text is never duplicated.

        Args:
            leaf: Leaf to highlight
            spans: Ranges into the leaf's content

        Returns:
            Marks created, in the order of ``spans``
        """
        node = leaf.node
        parent = node.parent
        if parent is None:
            logging.warning(f"Highlighter - Leaf {leaf.position} is detached from the tree, skipping")
            return []
        if not spans:
            return []

        text = node.text
        segments: list[Node] = []
        marks: list[MarkElement] = []
        last_end = 0

        for span in spans:
            start = max(span.start, last_end)
            end = min(span.end, len(text))
            if end < start or (end == start and span.length > 0):
                continue

            if start > last_end:
                segments.append(TextNode(text=text[last_end:start]))

            mark = MarkElement.create(text[start:end], leaf.position, start)
            segments.append(mark)
            marks.append(mark)
            last_end = end

        if last_end < len(text):
            segments.append(TextNode(text=text[last_end:]))

        parent.replace_child(node, segments)
        return marks

    def remove_all(self, root: Union[Document, Element, None]) -> int:
        """
        Dissolve every mark under ``root`` back into plain text.

        Calling this when no marks exist does nothing.

        Returns:
            Number of marks removed
        """
        if root is None:
            return 0
        if isinstance(root, Document):
            root = root.root

        marks = [node for node in root.iter_descendants() if is_mark(node)]
        if not marks:
            return 0

        parents: list[Element] = []
        for mark in marks:
            parent = mark.parent
            if parent is None:
                continue
            parent.replace_child(mark, [TextNode(text=mark.text_content)])
            if not any(p is parent for p in parents):
                parents.append(parent)

        for parent in parents:
            parent.normalize()

        logging.debug(f"Highlighter - Removed {len(marks)} marks")
        return len(marks)
