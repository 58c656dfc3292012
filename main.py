#!/usr/bin/env python3
"""
Halo Timer - A single-screen study/break countdown timer.

A minimal timer with:
- Study duration adjustable by hour, minute and second arrows
- Typed study minutes
- Break countdown that resumes the study session when it ends
- Animated halo showing the remaining time

Usage:
    pip install -e .
    python main.py

Set HALO_TIMER_LOG_LEVEL=DEBUG to trace every state transition.
"""

import logging
import sys
import signal
from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from core.config import log_level_from_env

logger = logging.getLogger("halo_timer")


def setup_logging():
    """Configure root logging from the environment."""
    logging.basicConfig(
        level=log_level_from_env(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def setup_exception_handling():
    """Log unhandled exceptions before the default hook prints them."""
    def exception_hook(exctype, value, traceback):
        logger.error("Unhandled exception: %s: %s", exctype.__name__, value)
        sys.__excepthook__(exctype, value, traceback)

    sys.excepthook = exception_hook


def setup_signal_handlers(app: QApplication):
    """Set up signal handlers for graceful shutdown."""
    def signal_handler(signum, frame):
        logger.info("Received signal %s, shutting down...", signum)
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)


def main():
    """Main entry point for the Halo Timer application."""
    setup_logging()
    setup_exception_handling()

    # Enable high DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    # Create application
    app = QApplication(sys.argv)
    app.setApplicationName("Halo Timer")
    app.setApplicationDisplayName("Halo Timer")
    app.setOrganizationName("HaloTimer")
    app.setOrganizationDomain("halotimer.local")

    # Set application style
    app.setStyle("Fusion")

    # Dark theme for window chrome and dialogs
    app.setStyleSheet("""
        QMainWindow, QWidget {
            background-color: #1e1e1e;
            color: #e0e0e0;
        }
        QMessageBox {
            background-color: #1e1e1e;
            color: #e0e0e0;
        }
        QMessageBox QLabel {
            color: #e0e0e0;
        }
        QPushButton {
            padding: 10px 18px;
            border-radius: 5px;
            background-color: #404040;
            color: #ffffff;
            font-size: 13px;
            font-weight: bold;
            border: none;
        }
        QPushButton:hover {
            background-color: #505050;
        }
    """)

    setup_signal_handlers(app)

    # Import and create main window
    from ui.main_window import MainWindow
    window = MainWindow()
    window.show()
    logger.info("Halo Timer started")

    # Run the application
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
