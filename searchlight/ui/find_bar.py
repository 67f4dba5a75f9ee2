"""
Find bar widget.

Provides:
- Query input with debounced search-as-you-type
- Next/Previous navigation (Enter / Shift+Enter)
- Match counter and error status
- Match Case, Regex and Proximity options with a distance spin box
- Close button (Escape)
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QColor, QKeyEvent, QPalette
from PyQt6.QtWidgets import (
    QCheckBox, QFrame, QHBoxLayout, QLabel, QLineEdit,
    QSpinBox, QToolButton, QWidget
)

from searchlight.core.collector import DEFAULT_UI_ROOT_ID
from searchlight.core.models import SearchConfig
from searchlight.services.settings import FindBarSettings


class FindLineEdit(QLineEdit):
    """
    Query input.

    Emits ``search_requested`` once typing pauses for the debounce
    interval; each keystroke restarts the timer.
    """

    search_requested = pyqtSignal(str)
    next_requested = pyqtSignal()
    prev_requested = pyqtSignal()
    escape_pressed = pyqtSignal()

    def __init__(self, debounce_ms: int = 150, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._debounce = QTimer(self)
        self._debounce.setSingleShot(True)
        self._debounce.setInterval(debounce_ms)
        self._debounce.timeout.connect(self._emit_search)

        self.setPlaceholderText("Find in page")
        self.setClearButtonEnabled(True)
        self.setMinimumWidth(250)
        self.textEdited.connect(self._on_text_edited)

    def _on_text_edited(self, _text: str) -> None:
        self._debounce.start()

    def _emit_search(self) -> None:
        self.search_requested.emit(self.text())

    def keyPressEvent(self, event: QKeyEvent) -> None:
        """Handle key events."""
        key = event.key()
        modifiers = event.modifiers()

        if key == Qt.Key.Key_F and modifiers & Qt.KeyboardModifier.ControlModifier:
            self.selectAll()
            return

        if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            if modifiers & Qt.KeyboardModifier.ShiftModifier:
                self.prev_requested.emit()
            else:
                self.next_requested.emit()
            return

        if key == Qt.Key.Key_Escape:
            self.escape_pressed.emit()
            return

        super().keyPressEvent(event)


class FindBar(QFrame):
    """
    Compact find bar.

    The bar never searches on its own: it emits ``search_requested``
    with the query and a copy of its options, and displays whatever
    status the owner passes back to ``set_status``.
    """

    # (query, SearchConfig)
    search_requested = pyqtSignal(str, object)
    find_next = pyqtSignal()
    find_prev = pyqtSignal()
    # SearchConfig, emitted whenever an option is toggled
    options_changed = pyqtSignal(object)
    closed = pyqtSignal()

    def __init__(
        self,
        settings: Optional[FindBarSettings] = None,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)

        self._settings = settings or FindBarSettings()
        self._config = SearchConfig()

        self.setObjectName(DEFAULT_UI_ROOT_ID)
        self._setup_ui()
        self._connect_signals()

    def _setup_ui(self) -> None:
        """Setup the widget UI."""
        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.setAutoFillBackground(True)

        palette = self.palette()
        palette.setColor(QPalette.ColorRole.Window, QColor(250, 250, 250))
        self.setPalette(palette)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 4, 8, 4)
        layout.setSpacing(6)

        self.input = FindLineEdit(self._settings.debounce_ms)
        layout.addWidget(self.input)

        self.status_label = QLabel()
        self.status_label.setMinimumWidth(90)
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.status_label)

        self.prev_btn = QToolButton()
        self.prev_btn.setText("▲")
        self.prev_btn.setToolTip("Previous (Shift+Enter)")
        self.prev_btn.setAutoRaise(True)
        layout.addWidget(self.prev_btn)

        self.next_btn = QToolButton()
        self.next_btn.setText("▼")
        self.next_btn.setToolTip("Next (Enter)")
        self.next_btn.setAutoRaise(True)
        layout.addWidget(self.next_btn)

        separator = QFrame()
        separator.setFrameShape(QFrame.Shape.VLine)
        layout.addWidget(separator)

        self.case_check = QCheckBox("Match Case")
        layout.addWidget(self.case_check)

        self.regex_check = QCheckBox("Regex")
        self.regex_check.setToolTip("Regular Expression")
        layout.addWidget(self.regex_check)

        self.proximity_check = QCheckBox("Proximity")
        self.proximity_check.setToolTip("Proximity Search - find words within N characters of each other")
        layout.addWidget(self.proximity_check)

        self.distance_spin = QSpinBox()
        self.distance_spin.setRange(self._settings.min_distance, self._settings.max_distance)
        self.distance_spin.setValue(self._config.proximity_distance)
        self.distance_spin.setToolTip("Maximum character distance between words")
        self.distance_spin.setEnabled(False)
        layout.addWidget(self.distance_spin)

        layout.addStretch()

        self.close_btn = QToolButton()
        self.close_btn.setText("✕")
        self.close_btn.setToolTip("Close (Esc)")
        self.close_btn.setAutoRaise(True)
        layout.addWidget(self.close_btn)

    def _connect_signals(self) -> None:
        """Connect widget signals."""
        self.input.search_requested.connect(self._request_search)
        self.input.next_requested.connect(self.find_next.emit)
        self.input.prev_requested.connect(self.find_prev.emit)
        self.input.escape_pressed.connect(self.hide_bar)

        self.next_btn.clicked.connect(self.find_next.emit)
        self.prev_btn.clicked.connect(self.find_prev.emit)
        self.close_btn.clicked.connect(self.hide_bar)

        self.case_check.toggled.connect(self._on_case_toggled)
        self.regex_check.toggled.connect(self._on_regex_toggled)
        self.proximity_check.toggled.connect(self._on_proximity_toggled)
        self.distance_spin.valueChanged.connect(self._on_distance_changed)

    # -------------------------------------------------------------------------
    # Options
    # -------------------------------------------------------------------------

    @property
    def config(self) -> SearchConfig:
        return self._config.copy()

    def load_config(self, config: SearchConfig) -> None:
        """Show stored options without triggering a search."""
        self._config = config.copy()

        widgets = (self.case_check, self.regex_check, self.proximity_check, self.distance_spin)
        for widget in widgets:
            widget.blockSignals(True)
        try:
            self.case_check.setChecked(self._config.case_sensitive)
            self.regex_check.setChecked(self._config.use_regex)
            self.proximity_check.setChecked(self._config.use_proximity)
            self.distance_spin.setValue(self._config.proximity_distance)
            self.distance_spin.setEnabled(self._config.use_proximity)
        finally:
            for widget in widgets:
                widget.blockSignals(False)

    def _on_case_toggled(self, checked: bool) -> None:
        self._config.case_sensitive = checked
        self._options_updated()

    def _on_regex_toggled(self, checked: bool) -> None:
        self._config.set_use_regex(checked)
        self._sync_exclusive_options()
        self._options_updated()

    def _on_proximity_toggled(self, checked: bool) -> None:
        self._config.set_use_proximity(checked)
        self._sync_exclusive_options()
        self._options_updated()

    def _on_distance_changed(self, value: int) -> None:
        if self._config.set_proximity_distance(value):
            self._options_updated()

    def _sync_exclusive_options(self) -> None:
        """Reflect regex/proximity exclusivity in the checkboxes."""
        for check, value in ((self.regex_check, self._config.use_regex),
                             (self.proximity_check, self._config.use_proximity)):
            check.blockSignals(True)
            check.setChecked(value)
            check.blockSignals(False)
        self.distance_spin.setEnabled(self._config.use_proximity)

    def _options_updated(self) -> None:
        self.options_changed.emit(self.config)
        self._request_search(self.input.text())

    def _request_search(self, text: str) -> None:
        self.search_requested.emit(text, self.config)

    # -------------------------------------------------------------------------
    # Status and visibility
    # -------------------------------------------------------------------------

    def set_status(self, text: str, is_error: bool = False) -> None:
        """Display a status such as ``"3 of 12"`` or ``"No matches"``."""
        self.status_label.setText(text)
        self.status_label.setStyleSheet("color: #cc0000;" if is_error else "")

        if is_error and self.input.text():
            self.input.setStyleSheet("QLineEdit { background-color: #ffe0e0; }")
        else:
            self.input.setStyleSheet("")

    def query(self) -> str:
        return self.input.text()

    def show_bar(self, initial_text: str = "") -> None:
        """
        Show and focus the bar.

        A non-empty ``initial_text`` (typically the current selection)
        replaces the query; the search runs immediately if there is one.
        """
        if initial_text.strip() and self._settings.prefill_from_selection:
            self.input.setText(initial_text.strip())

        self.show()
        self.input.setFocus()
        self.input.selectAll()

        if self.input.text():
            self._request_search(self.input.text())

    def hide_bar(self) -> None:
        """Hide the bar; the owner clears highlights on ``closed``."""
        if not self.isVisible():
            return
        self.hide()
        self.set_status("")
        self.closed.emit()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        """Handle key events."""
        if event.key() == Qt.Key.Key_Escape:
            self.hide_bar()
            return

        super().keyPressEvent(event)
