"""
Search engine core.

Provides:
- A DOM-like document tree
- Visible text leaf collection
- Literal, regex and proximity matching
- Lossless in-place highlighting
- Cyclic navigation over matches
- A controller tying one search pass together
"""

from searchlight.core.collector import (
    NodeCollector,
    SKIP_TAGS,
)
from searchlight.core.controller import (
    SearchController,
)
from searchlight.core.document import (
    Document,
    Element,
    MarkElement,
    Style,
    TextNode,
)
from searchlight.core.highlighter import (
    Highlighter,
)
from searchlight.core.matcher import (
    MatchFinder,
    escape_literal,
)
from searchlight.core.models import (
    InvalidPatternError,
    SearchConfig,
    SearchError,
    SearchMode,
    SearchOutcome,
    SearchResult,
    SearchStatus,
    Span,
    TextLeaf,
)
from searchlight.core.navigation import (
    CursorState,
    NavigationCursor,
)
from searchlight.core.proximity import (
    ProximityMatcher,
    split_terms,
)

__all__ = [
    # Tree
    'Document',
    'Element',
    'MarkElement',
    'Style',
    'TextNode',
    # Components
    'NodeCollector',
    'SKIP_TAGS',
    'MatchFinder',
    'escape_literal',
    'ProximityMatcher',
    'split_terms',
    'Highlighter',
    'NavigationCursor',
    'CursorState',
    'SearchController',
    # Models
    'InvalidPatternError',
    'SearchConfig',
    'SearchError',
    'SearchMode',
    'SearchOutcome',
    'SearchResult',
    'SearchStatus',
    'Span',
    'TextLeaf',
]
