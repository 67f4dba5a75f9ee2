"""
Document tree model searched and highlighted by the engine.

Provides a small DOM-like structure:
- Text nodes holding raw readable text
- Elements with a tag, attributes and a computed style
- Mark elements created by the highlighter around each match
- A document wrapper exposing the searchable body

All nodes are compared by identity, so the same text can appear in
many nodes without them being confused with each other.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional, Sequence


MARK_TAG = "mark"
MARK_CLASS = "searchlight-highlight"
CURRENT_CLASS = "current"

_LENGTH_RE = re.compile(r'^\s*(-?\d+(?:\.\d+)?)\s*(px)?\s*$', re.IGNORECASE)


# =============================================================================
# Style
# =============================================================================

@dataclass
class Style:
    """
    Computed style of an element, limited to what affects visibility.

    ``width`` and ``height`` of ``None`` mean the size is determined by
    layout and is assumed to be non-zero.
    """
    display: str = "inline"
    visibility: str = "inherit"
    opacity: float = 1.0
    width: Optional[float] = None
    height: Optional[float] = None

    @property
    def is_displayed(self) -> bool:
        return self.display != "none"

    @property
    def is_transparent(self) -> bool:
        return self.opacity <= 0

    @property
    def has_zero_area(self) -> bool:
        return self.width == 0 or self.height == 0

    @classmethod
    def from_css(cls, css: Optional[str], base: Optional[Style] = None) -> Style:
        """
        Build a style from an inline ``style`` attribute.

        Args:
            css: Declarations such as ``"display: none; opacity: .5"``
            base: Style to start from (defaults to an inline element)

        Returns:
            New Style with the recognised declarations applied
        """
        style = Style(**vars(base)) if base is not None else cls()
        if not css:
            return style

        for declaration in css.split(';'):
            if ':' not in declaration:
                continue
            name, _, value = declaration.partition(':')
            name = name.strip().lower()
            value = value.replace('!important', '').strip().lower()

            if name == 'display' and value:
                style.display = value
            elif name == 'visibility' and value:
                style.visibility = value
            elif name == 'opacity':
                try:
                    style.opacity = float(value)
                except ValueError:
                    pass
            elif name in ('width', 'height'):
                setattr(style, name, _parse_length(value))

        return style


def _parse_length(value: str) -> Optional[float]:
    """Parse a CSS length; anything but a plain pixel value is ``auto``."""
    match = _LENGTH_RE.match(value)
    if not match:
        return None
    return float(match.group(1))


# =============================================================================
# Nodes
# =============================================================================

@dataclass(eq=False)
class Node:
    """Base class for everything in a document tree."""
    parent: Optional[Element] = field(default=None, init=False, repr=False)

    @property
    def text_content(self) -> str:
        raise NotImplementedError


@dataclass(eq=False)
class TextNode(Node):
    """A run of raw readable text."""
    text: str = ""

    @property
    def text_content(self) -> str:
        return self.text


@dataclass(eq=False)
class Element(Node):
    """An element with a tag, attributes, style and ordered children."""
    tag: str = "div"
    attributes: dict[str, str] = field(default_factory=dict)
    style: Style = field(default_factory=Style)
    children: list[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.tag = self.tag.lower()
        for child in self.children:
            child.parent = self

    @property
    def id(self) -> Optional[str]:
        return self.attributes.get('id')

    @property
    def classes(self) -> list[str]:
        return self.attributes.get('class', '').split()

    def has_class(self, name: str) -> bool:
        return name in self.classes

    @property
    def text_content(self) -> str:
        return ''.join(child.text_content for child in self.children)

    def append(self, child: Node) -> Node:
        """Append a child, detaching it from any previous parent."""
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove(self, child: Node) -> None:
        """Remove a direct child."""
        self.children = [c for c in self.children if c is not child]
        child.parent = None

    def index_of(self, child: Node) -> int:
        for i, c in enumerate(self.children):
            if c is child:
                return i
        raise ValueError("node is not a child of this element")

    def replace_child(self, old: Node, new_nodes: Sequence[Node]) -> None:
        """
        Replace a child with a sequence of nodes.

        The children list is rebuilt rather than edited in place.

        Args:
            old: Existing direct child
            new_nodes: Nodes to put in its position, in order
        """
        index = self.index_of(old)
        for node in new_nodes:
            node.parent = self
        self.children = self.children[:index] + list(new_nodes) + self.children[index + 1:]
        old.parent = None

    def normalize(self) -> None:
        """Merge adjacent text nodes and drop empty ones."""
        merged: list[Node] = []
        for child in self.children:
            if isinstance(child, TextNode):
                if not child.text:
                    child.parent = None
                    continue
                if merged and isinstance(merged[-1], TextNode):
                    merged[-1].text += child.text
                    child.parent = None
                    continue
            merged.append(child)
        self.children = merged

    def iter_descendants(self) -> Iterator[Node]:
        """Iterate all descendants depth-first in document order."""
        stack: list[Node] = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, Element):
                stack.extend(reversed(node.children))

    def find_all(self, predicate: Callable[[Element], bool]) -> list[Element]:
        return [
            node for node in self.iter_descendants()
            if isinstance(node, Element) and predicate(node)
        ]

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        if self.id == element_id:
            return self
        for node in self.iter_descendants():
            if isinstance(node, Element) and node.id == element_id:
                return node
        return None


@dataclass(eq=False)
class MarkElement(Element):
    """
    Highlight segment wrapping one matched occurrence.

    ``leaf_position`` and ``offset`` give its place in document order;
    ``index`` is its position among all marks of the current pass.
    """
    tag: str = MARK_TAG
    leaf_position: int = 0
    offset: int = 0
    index: int = -1
    current: bool = False

    def __post_init__(self) -> None:
        super().__post_init__()
        self.attributes.setdefault('class', MARK_CLASS)

    @classmethod
    def create(cls, text: str, leaf_position: int, offset: int) -> MarkElement:
        return cls(children=[TextNode(text=text)], leaf_position=leaf_position, offset=offset)

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.leaf_position, self.offset)

    def set_current(self, current: bool) -> None:
        self.current = current
        classes = [c for c in self.classes if c != CURRENT_CLASS]
        if current:
            classes.append(CURRENT_CLASS)
        self.attributes['class'] = ' '.join(classes)


def is_mark(node: Node) -> bool:
    return isinstance(node, MarkElement) and node.has_class(MARK_CLASS)


# =============================================================================
# Document
# =============================================================================

@dataclass(eq=False)
class Document:
    """A document tree with an optional title and source path."""
    root: Element
    title: str = ""
    source: str = ""

    @property
    def body(self) -> Element:
        """The ``body`` element if present, otherwise the root."""
        if self.root.tag == 'body':
            return self.root
        for node in self.root.iter_descendants():
            if isinstance(node, Element) and node.tag == 'body':
                return node
        return self.root

    @property
    def text_content(self) -> str:
        return self.root.text_content

    def marks(self) -> list[MarkElement]:
        """All highlight marks currently in the tree, in document order."""
        return [node for node in self.root.iter_descendants() if is_mark(node)]
