"""
Application services.

Provides:
- Settings persistence (search options, find bar behaviour, recent files)
- Document loading with encoding detection
"""

from searchlight.services.file_io import (
    DocumentLoader,
    LoadResult,
    parse_html,
    parse_text,
)
from searchlight.services.settings import (
    ApplicationSettings,
    FindBarSettings,
    SearchSettings,
    SettingsManager,
)

__all__ = [
    # Loading
    'DocumentLoader',
    'LoadResult',
    'parse_html',
    'parse_text',
    # Settings
    'ApplicationSettings',
    'FindBarSettings',
    'SearchSettings',
    'SettingsManager',
]
