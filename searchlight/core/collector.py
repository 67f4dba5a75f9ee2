"""
Text leaf collection.

Walks a document tree in document order and yields the text nodes a
reader can actually see, skipping:
- The engine's own find bar
- Non-rendering containers (scripts, styles, embedded content)
- Elements that are hidden, fully transparent or have no area
- Whitespace-only text
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from searchlight.core.document import Document, Element, TextNode
from searchlight.core.models import TextLeaf


DEFAULT_UI_ROOT_ID = "searchlight-findbar"

SKIP_TAGS = frozenset({
    'script', 'style', 'noscript', 'iframe',
    'object', 'embed', 'svg', 'template',
})


class NodeCollector:
    """Collects eligible text leaves from a document tree."""

    def __init__(self, ui_root_id: Optional[str] = DEFAULT_UI_ROOT_ID):
        self.ui_root_id = ui_root_id

    def collect(self, root: Union[Document, Element, None]) -> list[TextLeaf]:
        """
        Collect the visible text leaves under a root.

        Args:
            root: Document or element to walk; ``None`` yields nothing

        Returns:
            Leaves in depth-first document order
        """
        if root is None:
            return []
        if isinstance(root, Document):
            root = root.body

        ui_root = root.get_element_by_id(self.ui_root_id) if self.ui_root_id else None

        leaves: list[TextLeaf] = []
        skipped = 0

        # (node, inherited "visibility: hidden")
        stack: list[tuple[object, bool]] = [(root, False)]
        while stack:
            node, hidden = stack.pop()

            if isinstance(node, TextNode):
                if hidden or not node.text.strip():
                    skipped += 1
                    continue
                leaves.append(TextLeaf(node=node, content=node.text, position=len(leaves)))
                continue

            if not isinstance(node, Element) or node is ui_root or not self._is_rendered(node):
                skipped += 1
                continue

            if node.style.visibility in ('hidden', 'collapse'):
                hidden = True
            elif node.style.visibility == 'visible':
                hidden = False

            stack.extend((child, hidden) for child in reversed(node.children))

        logging.debug(f"NodeCollector - Collected {len(leaves)} leaves ({skipped} skipped)")
        return leaves

    def _is_rendered(self, element: Element) -> bool:
        """Check whether an element's subtree can contain visible text."""
        if element.tag in SKIP_TAGS:
            return False

        style = element.style
        if not style.is_displayed or style.is_transparent or style.has_zero_area:
            return False

        return True
