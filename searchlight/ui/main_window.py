"""
Main application window.

Provides:
- Menu bar with file opening and recent files
- Document view
- Find bar (Ctrl+F to show, Escape to hide)
- Status bar
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence, QShortcut
from PyQt6.QtWidgets import (
    QFileDialog, QMainWindow, QMessageBox, QVBoxLayout, QWidget
)

from searchlight.core.controller import SearchController
from searchlight.core.document import Document, MarkElement
from searchlight.core.models import SearchConfig
from searchlight.services.file_io import DocumentLoader
from searchlight.services.settings import SettingsManager
from searchlight.ui.document_view import DocumentView
from searchlight.ui.find_bar import FindBar


APP_TITLE = "Searchlight"


class MainWindow(QMainWindow):
    """
    Main application window.

    Owns one SearchController for the open document and wires the find
    bar to it.
    """

    def __init__(
        self,
        settings_manager: Optional[SettingsManager] = None,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)

        self._settings_manager = settings_manager or SettingsManager()
        self._settings = self._settings_manager.settings
        self._loader = DocumentLoader()
        self._controller = SearchController()
        self._controller.add_listener(self._on_current_mark_changed)

        self._setup_ui()
        self._setup_menus()
        self._setup_shortcuts()
        self._setup_connections()

    def _setup_ui(self) -> None:
        """Set up the main UI layout."""
        self.setWindowTitle(APP_TITLE)
        self.resize(1000, 750)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self._find_bar = FindBar(self._settings.find_bar)
        self._find_bar.hide()
        layout.addWidget(self._find_bar)

        self._view = DocumentView()
        layout.addWidget(self._view)

        self.setCentralWidget(central)
        self.statusBar().showMessage("Ready")

    def _setup_menus(self) -> None:
        """Set up the menu bar."""
        file_menu = self.menuBar().addMenu("&File")

        open_action = QAction("&Open...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self._on_open)
        file_menu.addAction(open_action)

        self._recent_menu = file_menu.addMenu("Open &Recent")
        self._update_recent_menu()

        file_menu.addSeparator()

        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        edit_menu = self.menuBar().addMenu("&Edit")

        find_action = QAction("&Find...", self)
        find_action.setShortcut(QKeySequence.StandardKey.Find)
        find_action.triggered.connect(self.show_find_bar)
        edit_menu.addAction(find_action)

        next_action = QAction("Find &Next", self)
        next_action.setShortcut(QKeySequence.StandardKey.FindNext)
        next_action.triggered.connect(self.find_next)
        edit_menu.addAction(next_action)

        prev_action = QAction("Find &Previous", self)
        prev_action.setShortcut(QKeySequence.StandardKey.FindPrevious)
        prev_action.triggered.connect(self.find_previous)
        edit_menu.addAction(prev_action)

    def _setup_shortcuts(self) -> None:
        shortcut = QShortcut(QKeySequence("Escape"), self)
        shortcut.setContext(Qt.ShortcutContext.WindowShortcut)
        shortcut.activated.connect(self._find_bar.hide_bar)

    def _setup_connections(self) -> None:
        self._find_bar.search_requested.connect(self._on_search_requested)
        self._find_bar.find_next.connect(self.find_next)
        self._find_bar.find_prev.connect(self.find_previous)
        self._find_bar.options_changed.connect(self._on_options_changed)
        self._find_bar.closed.connect(self._on_find_bar_closed)

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def open_file(self, path: str | Path) -> bool:
        """Load a file into the view."""
        result = self._loader.load(path)
        if not result.success or result.document is None:
            logging.error(f"MainWindow - Failed to open {path}: {result.error}")
            QMessageBox.warning(self, APP_TITLE, f"Could not open file:\n\n{result.error}")
            return False

        self.set_document(result.document)
        self._settings_manager.add_recent_file(str(Path(path).resolve()))
        self._update_recent_menu()
        return True

    def set_document(self, document: Document) -> None:
        self._controller.set_root(document)
        self._view.set_document(document)
        self.setWindowTitle(f"{document.title} - {APP_TITLE}" if document.title else APP_TITLE)
        self.statusBar().showMessage(document.source or "Ready")

        if self._find_bar.isVisible() and self._find_bar.query():
            self._on_search_requested(self._find_bar.query(), self._find_bar.config)

    def _on_open(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self,
            "Open Document",
            self._settings.last_directory,
            "Documents (*.html *.htm *.xhtml *.txt);;All Files (*)"
        )
        if path:
            self.open_file(path)

    def _update_recent_menu(self) -> None:
        self._recent_menu.clear()
        for path in self._settings.recent_files:
            action = QAction(path, self)
            action.triggered.connect(lambda _checked=False, p=path: self.open_file(p))
            self._recent_menu.addAction(action)
        self._recent_menu.setEnabled(bool(self._settings.recent_files))

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def show_find_bar(self) -> None:
        """Open the find bar with stored options and the current selection."""
        self._find_bar.load_config(self._settings.search.to_config())
        self._find_bar.show_bar(self._view.selected_text())

    def find_next(self) -> None:
        outcome = self._controller.next_match()
        self._find_bar.set_status(outcome.status, outcome.is_error)

    def find_previous(self) -> None:
        outcome = self._controller.previous_match()
        self._find_bar.set_status(outcome.status, outcome.is_error)

    def _on_search_requested(self, query: str, config: SearchConfig) -> None:
        outcome = self._controller.search(query, config)
        if not outcome.total_matches:
            self._view.refresh()
        self._find_bar.set_status(outcome.status, outcome.is_error)

    def _on_options_changed(self, config: SearchConfig) -> None:
        self._settings_manager.update_search(config)

    def _on_find_bar_closed(self) -> None:
        self._controller.clear()
        self._view.refresh()
        self._view.setFocus()

    def _on_current_mark_changed(self, mark: MarkElement, position: int, count: int) -> None:
        self._view.refresh()
        self._view.scroll_to_mark(mark)
