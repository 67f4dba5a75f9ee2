"""Tests for settings persistence."""

import json

import pytest

from conftest import body, paragraph
from searchlight.core.controller import SearchController
from searchlight.core.document import Document
from searchlight.core.models import DEFAULT_PROXIMITY_DISTANCE, SearchConfig
from searchlight.services.settings import (
    ApplicationSettings,
    SearchSettings,
    SettingsManager,
)


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "config" / "settings.json"


@pytest.fixture
def manager(settings_path):
    return SettingsManager(settings_path)


def test_missing_file_gives_defaults(manager):
    settings = manager.settings

    assert settings.search == SearchSettings()
    assert settings.search.proximity_distance == 150
    assert settings.find_bar.debounce_ms == 150
    assert settings.recent_files == []


def test_save_and_reload(manager, settings_path):
    manager.settings.search.case_sensitive = True
    manager.settings.search.proximity_distance = 42

    assert manager.save()
    assert settings_path.exists()

    reloaded = SettingsManager(settings_path).settings
    assert reloaded.search.case_sensitive is True
    assert reloaded.search.proximity_distance == 42


def test_stored_values_are_used_verbatim(settings_path):
    settings_path.parent.mkdir(parents=True)
    settings_path.write_text(json.dumps({
        'search': {'use_proximity': True, 'proximity_distance': 7},
    }), encoding='utf-8')

    search = SettingsManager(settings_path).settings.search

    assert search.use_proximity is True
    assert search.proximity_distance == 7
    # Absent keys take defaults
    assert search.case_sensitive is False
    assert search.use_regex is False


def test_malformed_json_gives_defaults(settings_path):
    settings_path.parent.mkdir(parents=True)
    settings_path.write_text("{not json", encoding='utf-8')

    assert SettingsManager(settings_path).settings == ApplicationSettings()


def test_non_object_json_gives_defaults(settings_path):
    settings_path.parent.mkdir(parents=True)
    settings_path.write_text("[1, 2, 3]", encoding='utf-8')

    assert SettingsManager(settings_path).settings == ApplicationSettings()


def test_update_search_persists_config(manager, settings_path):
    config = SearchConfig()
    config.set_use_regex(True)

    manager.update_search(config)

    data = json.loads(settings_path.read_text(encoding='utf-8'))
    assert data['search']['use_regex'] is True
    assert data['search']['use_proximity'] is False


def test_to_config_round_trip():
    settings = SearchSettings(case_sensitive=True, use_proximity=True, proximity_distance=30)

    config = settings.to_config()

    assert config.mode.name == 'PROXIMITY'
    assert config.proximity_distance == 30
    assert SearchSettings.from_config(config) == settings


def test_observers_are_notified(manager):
    seen = []
    manager.add_observer(seen.append)

    manager.save(manager.settings)

    assert seen == [manager.settings]

    manager.remove_observer(seen.append)
    manager.save()
    assert len(seen) == 1


def test_recent_files(manager, tmp_path):
    for i in range(12):
        manager.add_recent_file(str(tmp_path / f"doc{i}.html"))
    manager.add_recent_file(str(tmp_path / "doc5.html"))

    recent = manager.settings.recent_files
    assert len(recent) == 10
    assert recent[0] == str(tmp_path / "doc5.html")
    assert recent.count(str(tmp_path / "doc5.html")) == 1
    assert manager.settings.last_directory == str(tmp_path)


def test_reset(manager):
    manager.settings.search.use_regex = True

    settings = manager.reset()

    assert settings.search.use_regex is False


def test_stored_string_distance_still_searches(settings_path):
    settings_path.parent.mkdir(parents=True)
    settings_path.write_text(json.dumps({
        'search': {'use_proximity': True, 'proximity_distance': "150"},
    }), encoding='utf-8')
    manager = SettingsManager(settings_path)

    config = manager.settings.search.to_config()
    outcome = SearchController(Document(root=body(paragraph("alpha beta")))).search("alpha beta", config)

    assert config.proximity_distance == 150
    assert outcome.status == "1 of 1"
    # The stored value itself is left untouched
    assert manager.settings.search.proximity_distance == "150"


@pytest.mark.parametrize("stored", ["far", None, 0, -3, [5]])
def test_unusable_stored_distance_uses_default(stored):
    config = SearchSettings(use_proximity=True, proximity_distance=stored).to_config()

    assert config.proximity_distance == DEFAULT_PROXIMITY_DISTANCE
