"""
Main entry point for the Searchlight application.

This module handles:
- Command line argument parsing
- Logging configuration
- Exception handling
- Headless search (``--query``)
- Main window creation
"""

from __future__ import annotations

import argparse
import faulthandler
import logging
import os
import signal
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, List, TextIO

from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import QApplication, QMessageBox

from searchlight import __version__
from searchlight.core.controller import SearchController
from searchlight.core.models import SearchConfig
from searchlight.services.file_io import DocumentLoader
from searchlight.services.settings import SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "Searchlight"
APP_VERSION = __version__
APP_ORGANIZATION = "Searchlight"

# Paths
if getattr(sys, 'frozen', False):
    # Running as compiled executable
    APP_DIR = Path(sys.executable).parent
else:
    # Running as script
    APP_DIR = Path(__file__).parent

LOGS_DIR = APP_DIR / "logs"

EXIT_MATCHES = 0
EXIT_NO_MATCHES = 1
EXIT_ERROR = 2


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    path: Optional[str] = None
    query: Optional[str] = None
    case_sensitive: Optional[bool] = None
    regex: bool = False
    proximity: Optional[int] = None
    settings_file: Optional[str] = None
    log_level: str = "WARNING"
    debug: bool = False

    @property
    def headless(self) -> bool:
        return self.query is not None


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""

    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure application logging.

    Console output goes to stderr so headless results on stdout stay
    clean.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True))
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    # Reduce noise from third-party libraries
    logging.getLogger('chardet').setLevel(logging.WARNING)

    return root_logger


# =============================================================================
# Exception Handling
# =============================================================================

class ExceptionHandler:
    """
    Global exception handler for unhandled exceptions.

    Logs the exception and shows an error dialog when a GUI is running.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._app: Optional[QApplication] = None

    def set_application(self, app: QApplication) -> None:
        """Set the application instance for error dialogs."""
        self._app = app

    def handle_exception(
        self,
        exc_type: type,
        exc_value: BaseException,
        exc_tb
    ) -> None:
        """Handle an unhandled exception."""
        # Don't handle keyboard interrupt
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return

        self.logger.critical(
            "Unhandled exception",
            exc_info=(exc_type, exc_value, exc_tb)
        )

        if self._app and QApplication.instance():
            tb_text = ''.join(traceback.format_exception(exc_type, exc_value, exc_tb))
            dialog = QMessageBox()
            dialog.setIcon(QMessageBox.Icon.Critical)
            dialog.setWindowTitle("Application Error")
            dialog.setText(f"An unexpected error occurred:\n\n{exc_type.__name__}: {exc_value}")
            dialog.setDetailedText(tb_text)
            dialog.exec()


# =============================================================================
# Command Line Parsing
# =============================================================================

def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME.lower(),
        description="Find and highlight text in HTML and text documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s page.html                         Open the viewer
  %(prog)s page.html -q "needle"             Print matches and exit
  %(prog)s notes.txt -q "err(or)?s?" --regex
  %(prog)s page.html -q "alpha beta" --proximity 40
        """
    )

    parser.add_argument(
        'path',
        nargs='?',
        help='HTML or text file to open'
    )
    parser.add_argument(
        '-q', '--query',
        help='Search without opening a window and print the matches'
    )

    # Search options (default to the stored settings)
    parser.add_argument(
        '-s', '--case-sensitive',
        action='store_true',
        default=None,
        help='Match case'
    )
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        '-r', '--regex',
        action='store_true',
        help='Treat the query as a regular expression'
    )
    mode_group.add_argument(
        '-p', '--proximity',
        type=int,
        nargs='?',
        const=0,
        metavar='N',
        help='Find all query words within N characters of each other'
    )

    # Configuration
    parser.add_argument(
        '-c', '--settings',
        help='Settings file path'
    )

    # Logging
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging to a file'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='WARNING',
        help='Log level'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {APP_VERSION}'
    )

    parsed = parser.parse_args(args)

    if parsed.proximity is not None and parsed.proximity < 0:
        parser.error("--proximity distance must be positive")

    result = CommandLineArgs()
    result.path = parsed.path
    result.query = parsed.query
    result.case_sensitive = parsed.case_sensitive
    result.regex = parsed.regex
    result.proximity = parsed.proximity
    result.settings_file = parsed.settings
    result.debug = parsed.debug
    result.log_level = 'DEBUG' if parsed.debug else parsed.log_level

    if result.headless and not result.path:
        parser.error("a file path is required with --query")

    return result


def build_config(args: CommandLineArgs, stored: SearchConfig) -> SearchConfig:
    """Overlay command line options on the stored search options."""
    config = stored.copy()

    if args.case_sensitive is not None:
        config.case_sensitive = args.case_sensitive
    if args.regex:
        config.set_use_regex(True)
    if args.proximity is not None:
        config.set_use_proximity(True)
        # 0 means "use the stored distance"
        config.set_proximity_distance(args.proximity)

    return config


# =============================================================================
# Headless Search
# =============================================================================

def run_headless(
    args: CommandLineArgs,
    settings_manager: SettingsManager,
    out: TextIO = sys.stdout
) -> int:
    """
    Search a file and print the status and each match.

    Returns:
        Exit code: 0 with matches, 1 without, 2 on errors
    """
    result = DocumentLoader().load(args.path)
    if not result.success:
        logging.error(f"Headless search - {result.error}")
        print(result.error, file=sys.stderr)
        return EXIT_ERROR

    config = build_config(args, settings_manager.settings.search.to_config())
    controller = SearchController(result.document)
    outcome = controller.search(args.query, config)

    print(outcome.status, file=out)
    if outcome.error:
        print(outcome.error, file=sys.stderr)
        return EXIT_ERROR

    for mark in controller.result.marks:
        print(f"{mark.index + 1}: {mark.text_content}", file=out)

    return EXIT_MATCHES if outcome.total_matches else EXIT_NO_MATCHES


# =============================================================================
# Application Setup
# =============================================================================

def setup_application() -> QApplication:
    """Create and configure the QApplication."""
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)
    app.setOrganizationName(APP_ORGANIZATION)
    app.setQuitOnLastWindowClosed(True)
    return app


def setup_signal_handlers() -> Optional[QTimer]:
    """Set up Unix signal handlers."""
    if sys.platform == 'win32':
        return None

    # Handle SIGINT (Ctrl+C) gracefully
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    # Allow Python to see signals while Qt's event loop runs
    timer = QTimer()
    timer.timeout.connect(lambda: None)
    timer.start(500)
    return timer


def _signal_handler(signum, frame) -> None:
    """Handle Unix signals."""
    logging.info(f"Received signal {signum}, shutting down...")
    QApplication.quit()


# =============================================================================
# Main Function
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Application main entry point.

    Returns:
        Exit code (0 for success)
    """
    # Redirect stdout/stderr if None (common in frozen apps)
    if sys.stdout is None:
        sys.stdout = open(os.devnull, 'w')
    if sys.stderr is None:
        sys.stderr = open(os.devnull, 'w')

    faulthandler.enable()

    args = parse_arguments(argv)

    log_file = LOGS_DIR / f"{APP_NAME}_{datetime.now():%Y%m%d}.log" if args.debug else None
    logger = setup_logging(args.log_level, log_file)
    logger.info(f"Starting {APP_NAME} v{APP_VERSION}")

    exception_handler = ExceptionHandler(logger)
    sys.excepthook = exception_handler.handle_exception

    settings_manager = SettingsManager(Path(args.settings_file) if args.settings_file else None)

    if args.headless:
        return run_headless(args, settings_manager)

    try:
        from searchlight.ui.main_window import MainWindow

        app = setup_application()
        exception_handler.set_application(app)
        signal_timer = setup_signal_handlers()

        window = MainWindow(settings_manager)
        if args.path:
            window.open_file(args.path)
        window.show()

        logger.info("Application started successfully")
        exit_code = app.exec()

        if signal_timer is not None:
            signal_timer.stop()

        logger.info(f"Application exiting with code {exit_code}")
        return exit_code

    except Exception as e:
        logger.critical(f"Fatal error during startup: {e}", exc_info=True)

        if QApplication.instance():
            QMessageBox.critical(
                None,
                "Fatal Error",
                f"The application failed to start:\n\n{e}\n\n"
                "Please check the logs for more information."
            )
        return 1


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == '__main__':
    sys.exit(main())
