"""
Document loading service.

Handles:
- Encoding detection
- HTML parsing into a document tree
- Plain text files (one paragraph per line)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import chardet
from bs4 import BeautifulSoup, Tag
from bs4.element import Comment, Declaration, Doctype, NavigableString, ProcessingInstruction

from searchlight.core.document import Document, Element, Node, Style, TextNode


HTML_SUFFIXES = {'.html', '.htm', '.xhtml'}

BLOCK_TAGS = frozenset({
    'html', 'body', 'div', 'p', 'section', 'article', 'aside', 'header',
    'footer', 'nav', 'main', 'blockquote', 'pre', 'ul', 'ol', 'li', 'dl',
    'dt', 'dd', 'table', 'tr', 'td', 'th', 'thead', 'tbody', 'tfoot',
    'form', 'fieldset', 'figure', 'figcaption', 'hr', 'address',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
})

# Elements a browser never renders
HIDDEN_TAGS = frozenset({'head', 'title', 'meta', 'link', 'base'})

_SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


@dataclass
class LoadResult:
    """Result of a document load operation."""
    success: bool
    document: Optional[Document] = None
    encoding: str = ""
    error: Optional[str] = None


class DocumentLoader:
    """Service for reading files into searchable documents."""

    def __init__(
        self,
        default_encoding: str = 'utf-8',
        fallback_encoding: str = 'latin-1',
        max_size: int = 50 * 1024 * 1024  # 50MB default limit
    ):
        self.default_encoding = default_encoding
        self.fallback_encoding = fallback_encoding
        self.max_size = max_size

    def load(self, path: Path | str, encoding: Optional[str] = None) -> LoadResult:
        """
        Load a file as a document.

        Args:
            path: Path to an HTML or plain text file
            encoding: Force specific encoding (auto-detect if None)

        Returns:
            LoadResult with the document or error information
        """
        path = Path(path)

        if not path.exists():
            return LoadResult(success=False, error=f"File not found: {path}")

        if not path.is_file():
            return LoadResult(success=False, error=f"Not a file: {path}")

        try:
            size = path.stat().st_size
            if size > self.max_size:
                return LoadResult(
                    success=False,
                    error=f"File too large ({size / 1024 / 1024:.2f} MB). "
                          f"Max size is {self.max_size / 1024 / 1024:.2f} MB."
                )

            raw_content = path.read_bytes()

        except PermissionError:
            logging.error(f"DocumentLoader - Permission denied: {path}")
            return LoadResult(success=False, error=f"Permission denied: {path}")
        except OSError as e:
            logging.error(f"DocumentLoader - Failed to read {path}: {e}")
            return LoadResult(success=False, error=f"OS error: {e}")

        text, detected_encoding = self.decode(raw_content, encoding)

        if path.suffix.lower() in HTML_SUFFIXES:
            document = parse_html(text)
        else:
            document = parse_text(text)
        document.source = str(path)
        if not document.title:
            document.title = path.name

        logging.info(f"DocumentLoader - Loaded {path} ({detected_encoding})")
        return LoadResult(success=True, document=document, encoding=detected_encoding)

    def decode(self, raw_content: bytes, encoding: Optional[str] = None) -> tuple[str, str]:
        """
        Decode bytes, honouring a BOM and falling back on errors.

        Returns:
            Tuple of (text, encoding used)
        """
        detected_encoding = encoding or self._detect_encoding(raw_content)

        # Check for BOM
        if raw_content.startswith(b'\xef\xbb\xbf'):
            detected_encoding = 'utf-8-sig'
        elif raw_content.startswith(b'\xff\xfe'):
            detected_encoding = 'utf-16-le'
        elif raw_content.startswith(b'\xfe\xff'):
            detected_encoding = 'utf-16-be'

        try:
            return raw_content.decode(detected_encoding), detected_encoding
        except (UnicodeDecodeError, LookupError):
            logging.debug(f"DocumentLoader - Decoding as {detected_encoding} failed, using {self.fallback_encoding}")
            return raw_content.decode(self.fallback_encoding, errors='replace'), self.fallback_encoding

    def _detect_encoding(self, content: bytes) -> str:
        """Detect encoding of content."""
        if not content:
            return self.default_encoding

        # Use chardet for detection
        result = chardet.detect(content)

        if result['confidence'] > 0.7 and result['encoding']:
            encoding = result['encoding'].lower()
            # Normalize encoding names
            if encoding == 'ascii':
                return 'utf-8'  # ASCII is subset of UTF-8
            return encoding

        return self.default_encoding


# =============================================================================
# Parsing
# =============================================================================

def parse_html(markup: str) -> Document:
    """Parse HTML markup into a document tree."""
    soup = BeautifulSoup(markup, 'html.parser')

    html = soup.find('html')
    if isinstance(html, Tag):
        root = _convert_tag(html)
    else:
        root = Element(tag='body', style=_default_style('body'))
        for child in soup.children:
            node = _convert(child)
            if node is not None:
                root.append(node)

    title_tag = soup.find('title')
    title = title_tag.get_text().strip() if isinstance(title_tag, Tag) else ""

    return Document(root=root, title=title)


def parse_text(text: str) -> Document:
    """Build a document with one paragraph per line of text."""
    body = Element(tag='body', style=_default_style('body'))
    for line in text.splitlines():
        paragraph = Element(tag='p', style=_default_style('p'))
        paragraph.append(TextNode(text=line))
        body.append(paragraph)
    return Document(root=body)


def _convert(node) -> Optional[Node]:
    if isinstance(node, Tag):
        return _convert_tag(node)
    if isinstance(node, _SKIPPED_STRINGS):
        return None
    if isinstance(node, NavigableString):
        return TextNode(text=str(node))
    return None


def _convert_tag(tag: Tag) -> Element:
    attributes = {
        name: ' '.join(value) if isinstance(value, list) else str(value)
        for name, value in tag.attrs.items()
    }

    name = tag.name.lower()
    style = Style.from_css(attributes.get('style'), base=_default_style(name))
    if 'hidden' in attributes:
        style.display = 'none'

    element = Element(tag=name, attributes=attributes, style=style)
    for child in tag.children:
        node = _convert(child)
        if node is not None:
            element.append(node)
    return element


def _default_style(tag: str) -> Style:
    if tag in HIDDEN_TAGS:
        return Style(display='none')
    if tag in BLOCK_TAGS:
        return Style(display='block')
    return Style()
