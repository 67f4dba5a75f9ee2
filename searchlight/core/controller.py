"""
Search controller.

Runs one complete search pass over a document tree:
1. Remove the marks of the previous pass and reset navigation
2. Collect the visible text leaves
3. Match each leaf (literal, regex or proximity)
4. Highlight the matches
5. Rebuild navigation and report the status

Every pass fully replaces the effects of the previous one, so calling
``search`` repeatedly (e.g. while the user types) is always safe.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from searchlight.core.collector import DEFAULT_UI_ROOT_ID, NodeCollector
from searchlight.core.document import Document, Element, MarkElement
from searchlight.core.highlighter import Highlighter
from searchlight.core.matcher import MatchFinder
from searchlight.core.models import (
    InvalidPatternError,
    SearchConfig,
    SearchOutcome,
    SearchResult,
    SearchStatus,
    Span,
    TextLeaf,
)
from searchlight.core.navigation import CurrentMarkListener, NavigationCursor
from searchlight.core.proximity import ProximityMatcher, split_terms


SearchRoot = Union[Document, Element]


class SearchController:
    """
    Coordinates collection, matching, highlighting and navigation for
    one document tree.

    All search state (configuration, marks, cursor) lives on the
    instance, so independent controllers can search different trees.
    """

    def __init__(
        self,
        root: Optional[SearchRoot] = None,
        config: Optional[SearchConfig] = None,
        ui_root_id: Optional[str] = DEFAULT_UI_ROOT_ID
    ):
        self._root = root
        self.config = config or SearchConfig()

        self._collector = NodeCollector(ui_root_id)
        self._finder = MatchFinder()
        self._proximity = ProximityMatcher(self._finder)
        self._highlighter = Highlighter()
        self._cursor = NavigationCursor()
        self._result = SearchResult()

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def root(self) -> Optional[SearchRoot]:
        return self._root

    def set_root(self, root: Optional[SearchRoot]) -> None:
        """Switch to another tree, clearing marks from the current one."""
        self.clear()
        self._root = root

    @property
    def cursor(self) -> NavigationCursor:
        return self._cursor

    @property
    def result(self) -> SearchResult:
        """Snapshot of the last pass and the navigation position."""
        return SearchResult(
            marks=self._cursor.marks,
            current_index=self._cursor.index,
            query=self._result.query,
            status=self._result.status,
            is_error=self._result.is_error,
        )

    def add_listener(self, callback: CurrentMarkListener) -> None:
        """Register a "current mark changed" listener."""
        self._cursor.add_listener(callback)

    def remove_listener(self, callback: CurrentMarkListener) -> None:
        self._cursor.remove_listener(callback)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search(self, query: str, config: Optional[SearchConfig] = None) -> SearchOutcome:
        """
        Run a full search pass.

        Args:
            query: Raw query text
            config: Options for this pass (defaults to ``self.config``);
                a copy is used so later changes don't affect the pass

        Returns:
            Total number of matches and the status to display
        """
        config = (config or self.config).copy()

        self.clear()
        self._result.query = query

        if not query:
            return self._finish(SearchOutcome.empty())

        logging.debug(
            f"SearchController - Searching for {query!r} "
            f"(mode={config.mode.name}, case_sensitive={config.case_sensitive})"
        )

        try:
            find_spans = self._make_span_finder(query, config)
        except InvalidPatternError as e:
            logging.warning(f"SearchController - {e}")
            return self._finish(SearchOutcome.invalid_pattern(e))

        marks: list[MarkElement] = []
        for leaf in self._collector.collect(self._root):
            spans = find_spans(leaf)
            if spans:
                marks.extend(self._highlighter.apply(leaf, spans))

        marks.sort(key=lambda mark: mark.sort_key)
        position = self._cursor.rebuild(marks)

        logging.debug(f"SearchController - Found {len(marks)} matches")

        if position is None:
            return self._finish(SearchOutcome.no_matches())
        return self._finish(SearchOutcome.at(*position))

    def _make_span_finder(
        self,
        query: str,
        config: SearchConfig
    ) -> Callable[[TextLeaf], list[Span]]:
        """
        Build the per-leaf matching function for a pass.

        Raises:
            InvalidPatternError: If a regex query does not compile
        """
        if config.use_proximity:
            terms = split_terms(query)
            return lambda leaf: self._proximity.find_proximity(
                leaf.content,
                terms,
                config.proximity_distance,
                config.case_sensitive,
                query=query,
            )

        regex = self._finder.compile(query, config.case_sensitive, config.use_regex)
        return lambda leaf: self._finder.scan(leaf.content, regex)

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def next_match(self) -> SearchOutcome:
        """Move to the next mark, wrapping to the first."""
        return self._navigate(self._cursor.next())

    def previous_match(self) -> SearchOutcome:
        """Move to the previous mark, wrapping to the last."""
        return self._navigate(self._cursor.previous())

    def _navigate(self, position: Optional[tuple[int, int]]) -> SearchOutcome:
        if position is None:
            return SearchOutcome(status=self._result.status, is_error=self._result.is_error)
        return self._finish(SearchOutcome.at(*position))

    def clear(self) -> None:
        """Remove all marks and reset navigation and status."""
        self._highlighter.remove_all(self._root)
        self._cursor.reset()
        self._result = SearchResult()

    def _finish(self, outcome: SearchOutcome) -> SearchOutcome:
        self._result.status = outcome.status
        self._result.is_error = outcome.is_error
        return outcome
