"""
Literal and regular-expression matching within one text leaf.

Literal queries are escaped with a fixed set of metacharacters and
compiled like regular expressions, so both modes share one scanner.
Regex queries use Python's ``re`` dialect.
"""

from __future__ import annotations

import re
from typing import Optional

from searchlight.core.models import InvalidPatternError, Span


# Characters neutralised in literal mode (a fixed class, not re.escape()).
LITERAL_SPECIAL_CHARS = re.compile(r'[.*+?^${}()|[\]\\]')


def escape_literal(text: str) -> str:
    """Escape regex metacharacters so ``text`` matches verbatim."""
    return LITERAL_SPECIAL_CHARS.sub(lambda m: '\\' + m.group(0), text)


class MatchFinder:
    """Finds literal or regex occurrences in a string."""

    def compile(
        self,
        pattern: str,
        case_sensitive: bool = False,
        is_regex: bool = False
    ) -> re.Pattern:
        """
        Compile a query into a pattern.

        Args:
            pattern: Query text
            case_sensitive: Match case exactly
            is_regex: Treat the query as a regular expression

        Returns:
            Compiled pattern

        Raises:
            InvalidPatternError: If a regex query does not compile
        """
        flags = 0 if case_sensitive else re.IGNORECASE

        if not is_regex:
            return re.compile(escape_literal(pattern), flags)

        try:
            return re.compile(pattern, flags | re.MULTILINE)
        except re.error as e:
            raise InvalidPatternError(pattern, str(e)) from e

    def scan(self, content: str, regex: re.Pattern) -> list[Span]:
        """
        Collect every match of a compiled pattern, left to right.

        Zero-length matches advance the scan by one character so the
        loop always terminates.
        """
        spans: list[Span] = []
        pos = 0
        length = len(content)

        while pos <= length:
            match = regex.search(content, pos)
            if match is None:
                break

            start, end = match.span()
            spans.append(Span(start=start, length=end - start, text=match.group(0)))
            pos = end if end > start else end + 1

        return spans

    def find(
        self,
        content: str,
        pattern: str,
        case_sensitive: bool = False,
        is_regex: bool = False,
        regex: Optional[re.Pattern] = None
    ) -> list[Span]:
        """
        Find all occurrences of a query in ``content``.

        Args:
            content: Text to search
            pattern: Query text
            case_sensitive: Match case exactly
            is_regex: Treat the query as a regular expression
            regex: Already compiled pattern to reuse

        Returns:
            Non-overlapping spans in textual order

        Raises:
            InvalidPatternError: If a regex query does not compile
        """
        if regex is None:
            if not pattern:
                return []
            regex = self.compile(pattern, case_sensitive, is_regex)
        return self.scan(content, regex)
