"""
PyQt6 user interface.

Provides the main window, the document view and the find bar.
"""

from searchlight.ui.document_view import DocumentView, render_html
from searchlight.ui.find_bar import FindBar, FindLineEdit
from searchlight.ui.main_window import MainWindow

__all__ = [
    'DocumentView',
    'render_html',
    'FindBar',
    'FindLineEdit',
    'MainWindow',
]
