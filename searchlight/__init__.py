"""
Searchlight: find-in-document search and highlighting.

Packages:
- core: document tree, matchers, highlighter, navigation, controller
- services: settings persistence and document loading
- ui: PyQt6 find bar and document viewer
"""

__version__ = "1.0.0"
