"""
Proximity matching: find places where every query term occurs within a
bounded character distance of the others.

The search is anchored on occurrences of the first term. For each anchor
the closest acceptable occurrence of each following term is chosen
greedily; groups reachable only from a different anchor are not
explored.
"""

from __future__ import annotations

from typing import Optional, Sequence

from searchlight.core.matcher import MatchFinder
from searchlight.core.models import Span


def split_terms(query: str) -> list[str]:
    """Split a query into whitespace-separated terms, dropping empties."""
    return query.split()


def range_distance(a: Span, b: Span) -> int:
    """Gap in characters between two ranges; 0 when they overlap."""
    if a.overlaps(b.start, b.end):
        return 0
    return min(abs(b.start - a.end), abs(a.start - b.end))


class ProximityMatcher:
    """Finds spans containing every query term within a distance."""

    def __init__(self, finder: Optional[MatchFinder] = None):
        self._finder = finder or MatchFinder()

    def find_proximity(
        self,
        content: str,
        terms: Sequence[str],
        distance: int,
        case_sensitive: bool = False,
        query: Optional[str] = None
    ) -> list[Span]:
        """
        Find proximity matches in ``content``.

        Args:
            content: Text to search
            terms: Query terms in query order
            distance: Maximum gap in characters between any two terms
            case_sensitive: Match case exactly
            query: Original query, used verbatim when there are fewer
                than two terms

        Returns:
            Non-overlapping spans sorted by start offset
        """
        terms = [term for term in terms if term]

        if len(terms) < 2:
            fallback = query if query is not None else ' '.join(terms)
            return self._finder.find(content, fallback, case_sensitive, is_regex=False)

        occurrences = [
            self._finder.find(content, term, case_sensitive, is_regex=False)
            for term in terms
        ]

        if any(not positions for positions in occurrences):
            return []

        return self._group(occurrences, distance, content)

    def _group(
        self,
        occurrences: list[list[Span]],
        distance: int,
        content: str
    ) -> list[Span]:
        """Build one candidate span per successful anchor, then dedupe."""
        matches: list[Span] = []

        for anchor in occurrences[0]:
            group = self._match_anchor(anchor, occurrences[1:], distance)
            if group is None:
                continue

            start = min(span.start for span in group)
            end = max(span.end for span in group)

            if any(accepted.overlaps(start, end) for accepted in matches):
                continue

            matches.append(Span(start=start, length=end - start, text=content[start:end]))

        matches.sort(key=lambda span: span.start)
        return matches

    def _match_anchor(
        self,
        anchor: Span,
        remaining: list[list[Span]],
        distance: int
    ) -> Optional[list[Span]]:
        """
        Pick one occurrence of each remaining term for an anchor.

        Returns:
            The accepted group (anchor first), or None if some term has no
            occurrence within ``distance`` of the whole group
        """
        group = [anchor]

        for positions in remaining:
            best: Optional[Span] = None
            best_distance = 0

            for candidate in positions:
                from_anchor = range_distance(candidate, anchor)
                if from_anchor > distance:
                    continue
                if best is not None and from_anchor >= best_distance:
                    continue
                if all(range_distance(candidate, other) <= distance for other in group):
                    best = candidate
                    best_distance = from_anchor

            if best is None:
                return None
            group.append(best)

        return group
