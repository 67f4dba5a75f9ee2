"""
Core data models for the search engine.

This module defines the data structures shared by the search components:
- Search configuration and modes
- Text leaves and spans produced by the matchers
- Search results and outcomes reported to callers
- Search exceptions

Models are UI-agnostic; the Qt front end only consumes them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from searchlight.core.document import MarkElement, TextNode


DEFAULT_PROXIMITY_DISTANCE = 150


# =============================================================================
# Enumerations
# =============================================================================

class SearchMode(Enum):
    """How a query is matched against text."""
    LITERAL = auto()    # Verbatim text
    REGEX = auto()      # Regular expression
    PROXIMITY = auto()  # All terms within a character distance


class SearchStatus:
    """Status strings reported to the find bar."""
    EMPTY = ""
    NO_MATCHES = "No matches"
    INVALID_REGEX = "Invalid regex"

    @staticmethod
    def position(current: int, total: int) -> str:
        """Format a 1-based position, e.g. ``"3 of 12"``."""
        return f"{current} of {total}"


# =============================================================================
# Exceptions
# =============================================================================

class SearchError(Exception):
    """Base class for search errors."""


class InvalidPatternError(SearchError):
    """A regular expression could not be compiled."""

    def __init__(self, pattern: str, message: str):
        super().__init__(f"Invalid regex {pattern!r}: {message}")
        self.pattern = pattern
        self.message = message


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class SearchConfig:
    """
    Options for one search pass.

    Regex and proximity matching are mutually exclusive: use the
    ``set_use_regex`` / ``set_use_proximity`` setters to keep them so.
    """
    case_sensitive: bool = False
    use_regex: bool = False
    use_proximity: bool = False
    proximity_distance: int = DEFAULT_PROXIMITY_DISTANCE

    def __post_init__(self) -> None:
        if self.use_regex and self.use_proximity:
            self.use_proximity = False

    @property
    def mode(self) -> SearchMode:
        if self.use_proximity:
            return SearchMode.PROXIMITY
        if self.use_regex:
            return SearchMode.REGEX
        return SearchMode.LITERAL

    def set_use_regex(self, enabled: bool) -> None:
        self.use_regex = enabled
        if enabled:
            self.use_proximity = False

    def set_use_proximity(self, enabled: bool) -> None:
        self.use_proximity = enabled
        if enabled:
            self.use_regex = False

    def set_proximity_distance(self, distance: int) -> bool:
        """
        Set the proximity distance.

        Returns:
            False if the value was rejected (not a positive integer)
        """
        if isinstance(distance, bool) or not isinstance(distance, int) or distance <= 0:
            return False
        self.proximity_distance = distance
        return True

    def copy(self) -> SearchConfig:
        return replace(self)


# =============================================================================
# Matching Models
# =============================================================================

@dataclass(frozen=True)
class TextLeaf:
    """
    One eligible unit of readable text.

    ``content`` is a snapshot taken when the leaf was collected;
    ``position`` is its index in traversal order.
    """
    node: TextNode
    content: str
    position: int


@dataclass(frozen=True)
class Span:
    """A half-open range ``[start, start + length)`` into a leaf's content."""
    start: int
    length: int
    text: str = ""

    @property
    def end(self) -> int:
        return self.start + self.length

    def overlaps(self, start: int, end: int) -> bool:
        return not (self.end <= start or self.start >= end)


# =============================================================================
# Results
# =============================================================================

@dataclass
class SearchResult:
    """All marks from one search pass and the navigation position."""
    marks: list[MarkElement] = field(default_factory=list)
    current_index: int = -1
    query: str = ""
    status: str = SearchStatus.EMPTY
    is_error: bool = False

    @property
    def count(self) -> int:
        return len(self.marks)

    @property
    def has_matches(self) -> bool:
        return len(self.marks) > 0

    @property
    def current_mark(self) -> Optional[MarkElement]:
        if 0 <= self.current_index < len(self.marks):
            return self.marks[self.current_index]
        return None


@dataclass(frozen=True)
class SearchOutcome:
    """What a search or navigation call reports back to its caller."""
    total_matches: int = 0
    status: str = SearchStatus.EMPTY
    is_error: bool = False
    error: Optional[str] = None

    @classmethod
    def empty(cls) -> SearchOutcome:
        return cls()

    @classmethod
    def no_matches(cls) -> SearchOutcome:
        return cls(status=SearchStatus.NO_MATCHES, is_error=True)

    @classmethod
    def invalid_pattern(cls, error: InvalidPatternError) -> SearchOutcome:
        return cls(status=SearchStatus.INVALID_REGEX, is_error=True, error=error.message)

    @classmethod
    def at(cls, current: int, total: int) -> SearchOutcome:
        return cls(total_matches=total, status=SearchStatus.position(current, total))
