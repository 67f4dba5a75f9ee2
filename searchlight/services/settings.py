"""
Application settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Callable, Optional

from searchlight.core.models import DEFAULT_PROXIMITY_DISTANCE, SearchConfig


@dataclass
class SearchSettings:
    """Search options remembered between sessions."""
    case_sensitive: bool = False
    use_regex: bool = False
    use_proximity: bool = False
    proximity_distance: int = DEFAULT_PROXIMITY_DISTANCE

    def to_config(self) -> SearchConfig:
        """Create the configuration used by a search pass."""
        config = SearchConfig(case_sensitive=self.case_sensitive)
        config.use_regex = self.use_regex
        config.use_proximity = self.use_proximity
        config.proximity_distance = _coerce_distance(self.proximity_distance)
        return config

    @classmethod
    def from_config(cls, config: SearchConfig) -> SearchSettings:
        return cls(
            case_sensitive=config.case_sensitive,
            use_regex=config.use_regex,
            use_proximity=config.use_proximity,
            proximity_distance=config.proximity_distance,
        )


def _coerce_distance(value: Any) -> int:
    """Read a stored distance as a positive int, else use the default."""
    try:
        distance = int(value)
    except (TypeError, ValueError):
        return DEFAULT_PROXIMITY_DISTANCE
    return distance if distance > 0 else DEFAULT_PROXIMITY_DISTANCE


@dataclass
class FindBarSettings:
    """Find bar behaviour."""
    debounce_ms: int = 150
    min_distance: int = 1
    max_distance: int = 10000
    prefill_from_selection: bool = True


@dataclass
class ApplicationSettings:
    """Main application settings container."""
    search: SearchSettings = field(default_factory=SearchSettings)
    find_bar: FindBarSettings = field(default_factory=FindBarSettings)

    recent_files: list[str] = field(default_factory=list)
    recent_files_limit: int = 10
    last_directory: str = ""


SettingsObserver = Callable[[ApplicationSettings], None]


class SettingsManager:
    """Manager for loading/saving application settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None
        self._observers: list[SettingsObserver] = []

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            # Windows
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'Searchlight' / 'settings.json'
        else:
            # Linux/Mac
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'searchlight' / 'settings.json'

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk, falling back to defaults."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logging.warning(f"SettingsManager - Could not load settings from {self.settings_path}: {e}")
            return ApplicationSettings()

        if not isinstance(data, dict):
            logging.warning(f"SettingsManager - Ignoring malformed settings in {self.settings_path}")
            return ApplicationSettings()

        return self._from_dict(data)

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(asdict(settings), f, indent=2)

        except (OSError, TypeError) as e:
            logging.error(f"SettingsManager - Could not save settings to {self.settings_path}: {e}")
            return False

        self._settings = settings
        self._notify_observers()
        return True

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def update_search(self, config: SearchConfig) -> bool:
        """Store the options of a search configuration."""
        self.settings.search = SearchSettings.from_config(config)
        return self.save()

    def add_observer(self, callback: SettingsObserver) -> None:
        """Add a callback to be notified of settings changes."""
        self._observers.append(callback)

    def remove_observer(self, callback: SettingsObserver) -> None:
        """Remove a settings change observer."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self) -> None:
        """Notify all observers of settings change."""
        for callback in self._observers:
            try:
                callback(self._settings)
            except Exception:
                logging.exception("SettingsManager - Settings observer failed")

    def add_recent_file(self, path: str) -> None:
        """Add a path to the recent files list."""
        settings = self.settings
        recent = settings.recent_files

        # Remove if already exists
        if path in recent:
            recent.remove(path)

        # Add to front
        recent.insert(0, path)
        settings.recent_files = recent[:settings.recent_files_limit]
        settings.last_directory = str(Path(path).parent)

        self.save()

    def _from_dict(self, data: dict) -> ApplicationSettings:
        """
        Convert a dictionary back to settings objects.

        Stored values are used as-is; only missing keys take defaults.
        """
        def section(name: str) -> dict[str, Any]:
            value = data.get(name, {})
            return value if isinstance(value, dict) else {}

        search_data = section('search')
        defaults = SearchSettings()
        search = SearchSettings(
            case_sensitive=search_data.get('case_sensitive', defaults.case_sensitive),
            use_regex=search_data.get('use_regex', defaults.use_regex),
            use_proximity=search_data.get('use_proximity', defaults.use_proximity),
            proximity_distance=search_data.get('proximity_distance', defaults.proximity_distance),
        )

        bar_data = section('find_bar')
        bar_defaults = FindBarSettings()
        find_bar = FindBarSettings(
            debounce_ms=bar_data.get('debounce_ms', bar_defaults.debounce_ms),
            min_distance=bar_data.get('min_distance', bar_defaults.min_distance),
            max_distance=bar_data.get('max_distance', bar_defaults.max_distance),
            prefill_from_selection=bar_data.get('prefill_from_selection',
                                                bar_defaults.prefill_from_selection),
        )

        return ApplicationSettings(
            search=search,
            find_bar=find_bar,
            recent_files=data.get('recent_files', []),
            recent_files_limit=data.get('recent_files_limit', 10),
            last_directory=data.get('last_directory', ''),
        )
