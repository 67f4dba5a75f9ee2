"""Tests for proximity matching."""

import pytest

from searchlight.core.models import Span
from searchlight.core.proximity import ProximityMatcher, range_distance, split_terms


@pytest.fixture
def matcher():
    return ProximityMatcher()


def ranges(spans):
    return [(span.start, span.end) for span in spans]


class TestRangeDistance:

    def test_gap_between_ranges(self):
        assert range_distance(Span(0, 5), Span(11, 4)) == 6
        assert range_distance(Span(11, 4), Span(0, 5)) == 6

    def test_adjacent_ranges(self):
        assert range_distance(Span(0, 3), Span(3, 3)) == 0

    def test_overlapping_ranges(self):
        assert range_distance(Span(0, 3), Span(2, 3)) == 0
        assert range_distance(Span(0, 10), Span(2, 3)) == 0


def test_split_terms_drops_empty():
    assert split_terms("  alpha   beta\tgamma ") == ["alpha", "beta", "gamma"]
    assert split_terms("   ") == []


def test_terms_within_distance(matcher):
    spans = matcher.find_proximity("alpha xxxx beta", ["alpha", "beta"], 6)

    assert ranges(spans) == [(0, 15)]
    assert spans[0].text == "alpha xxxx beta"


def test_terms_too_far_apart(matcher):
    assert matcher.find_proximity("alpha xxxx beta", ["alpha", "beta"], 3) == []
    assert matcher.find_proximity("alpha xxxx beta", ["alpha", "beta"], 5) == []


def test_term_order_does_not_matter_in_text(matcher):
    spans = matcher.find_proximity("beta then alpha", ["alpha", "beta"], 10)

    assert ranges(spans) == [(0, 15)]


def test_missing_term_yields_nothing(matcher):
    assert matcher.find_proximity("alpha beta", ["alpha", "gamma"], 100) == []


def test_every_term_must_be_near_the_whole_group(matcher):
    content = "alpha beta gamma"

    assert ranges(matcher.find_proximity(content, ["alpha", "beta", "gamma"], 6)) == [(0, 16)]
    assert matcher.find_proximity(content, ["alpha", "beta", "gamma"], 5) == []


def test_closest_occurrence_is_chosen(matcher):
    content = "beta " + "x" * 20 + " alpha beta"
    spans = matcher.find_proximity(content, ["alpha", "beta"], 100)

    assert ranges(spans) == [(26, 36)]


def test_overlapping_groups_are_suppressed(matcher):
    spans = matcher.find_proximity("foo bar foo", ["foo", "bar"], 10)

    assert ranges(spans) == [(0, 7)]


def test_separate_groups_are_sorted(matcher):
    content = "alpha beta" + " " * 50 + "beta alpha"
    spans = matcher.find_proximity(content, ["alpha", "beta"], 5)

    assert ranges(spans) == [(0, 10), (60, 70)]


def test_case_sensitivity(matcher):
    assert matcher.find_proximity("Alpha beta", ["alpha", "beta"], 10, case_sensitive=True) == []
    assert len(matcher.find_proximity("Alpha beta", ["alpha", "beta"], 10)) == 1


def test_single_term_falls_back_to_literal(matcher):
    spans = matcher.find_proximity("alpha, alpha", ["alpha"], 10, query="alpha")

    assert ranges(spans) == [(0, 5), (7, 12)]


def test_fallback_uses_the_query_as_typed(matcher):
    spans = matcher.find_proximity("an alpha", ["alpha"], 10, query=" alpha")

    assert ranges(spans) == [(2, 8)]


def test_no_terms(matcher):
    assert matcher.find_proximity("alpha", [], 10, query="") == []
