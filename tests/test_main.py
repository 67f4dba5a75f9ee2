"""Tests for the command line entry point."""

import io

import pytest

pytest.importorskip("PyQt6.QtWidgets")

from main import (
    EXIT_ERROR,
    EXIT_MATCHES,
    EXIT_NO_MATCHES,
    build_config,
    parse_arguments,
    run_headless,
)
from searchlight.core.models import SearchConfig, SearchMode
from searchlight.services.settings import SettingsManager


@pytest.fixture
def settings_manager(tmp_path):
    return SettingsManager(tmp_path / "settings.json")


@pytest.fixture
def page(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(
        "<html><body><p>alpha beta</p><p>Beta gamma</p><script>beta</script></body></html>",
        encoding='utf-8',
    )
    return path


def run(argv, settings_manager):
    out = io.StringIO()
    code = run_headless(parse_arguments(argv), settings_manager, out=out)
    return code, out.getvalue().splitlines()


class TestParseArguments:

    def test_defaults(self):
        args = parse_arguments([])

        assert args.path is None
        assert not args.headless
        assert args.case_sensitive is None
        assert args.log_level == 'WARNING'

    def test_headless_options(self):
        args = parse_arguments(["page.html", "-q", "needle", "--regex", "-s"])

        assert args.headless
        assert args.query == "needle"
        assert args.regex
        assert args.case_sensitive is True

    def test_proximity_without_distance(self):
        assert parse_arguments(["page.html", "-q", "a b", "--proximity"]).proximity == 0

    def test_regex_and_proximity_conflict(self):
        with pytest.raises(SystemExit):
            parse_arguments(["page.html", "-q", "x", "--regex", "--proximity", "5"])

    def test_query_requires_path(self):
        with pytest.raises(SystemExit):
            parse_arguments(["-q", "needle"])

    def test_debug_forces_debug_level(self):
        assert parse_arguments(["--debug"]).log_level == 'DEBUG'


def test_build_config_overlays_stored_options():
    stored = SearchConfig(use_regex=True, proximity_distance=80)

    config = build_config(parse_arguments(["f", "-q", "x", "--proximity"]), stored)

    assert config.mode is SearchMode.PROXIMITY
    assert config.proximity_distance == 80
    assert stored.use_regex

    config = build_config(parse_arguments(["f", "-q", "x", "--proximity", "12"]), stored)
    assert config.proximity_distance == 12


def test_headless_prints_matches(page, settings_manager):
    code, lines = run([str(page), "-q", "beta"], settings_manager)

    assert code == EXIT_MATCHES
    assert lines == ["1 of 2", "1: beta", "2: Beta"]


def test_headless_case_sensitive(page, settings_manager):
    code, lines = run([str(page), "-q", "beta", "-s"], settings_manager)

    assert code == EXIT_MATCHES
    assert lines == ["1 of 1", "1: beta"]


def test_headless_proximity(page, settings_manager):
    code, lines = run([str(page), "-q", "alpha beta", "--proximity", "5"], settings_manager)

    assert code == EXIT_MATCHES
    assert lines == ["1 of 1", "1: alpha beta"]


def test_headless_no_matches(page, settings_manager):
    code, lines = run([str(page), "-q", "delta"], settings_manager)

    assert code == EXIT_NO_MATCHES
    assert lines == ["No matches"]


def test_headless_invalid_regex(page, settings_manager):
    code, lines = run([str(page), "-q", "(beta", "--regex"], settings_manager)

    assert code == EXIT_ERROR
    assert lines == ["Invalid regex"]


def test_headless_missing_file(tmp_path, settings_manager):
    code, lines = run([str(tmp_path / "missing.html"), "-q", "x"], settings_manager)

    assert code == EXIT_ERROR
    assert lines == []
