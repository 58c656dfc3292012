"""
Main window for the Halo Timer application.
Hosts the halo timer widget and reflects the session mode in the title.
"""

import logging
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QMessageBox
from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QIcon, QCloseEvent, QPixmap, QPainter, QColor, QPen

from core.models import Mode
from core.session import SessionMachine

from .halo_widget import HaloTimerWidget

logger = logging.getLogger(__name__)

APP_TITLE = "Halo Timer"

MODE_TITLES = {
    Mode.SETUP: "Setup",
    Mode.TIMER: "Study",
    Mode.BREAK: "Break",
    Mode.CONFIRM_RESET: "Study",
    Mode.CONFIRM_BACK: "Study",
}


def create_app_icon() -> QIcon:
    """Create a simple halo icon programmatically."""
    sizes = [16, 32, 48, 64]
    icon = QIcon()

    for size in sizes:
        pixmap = QPixmap(size, size)
        pixmap.fill(Qt.GlobalColor.transparent)

        painter = QPainter(pixmap)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        margin = size // 8
        pen_width = max(2, size // 8)

        # Track ring
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.setPen(QPen(QColor("#404040"), pen_width))
        painter.drawEllipse(margin, margin, size - 2 * margin, size - 2 * margin)

        # Three quarters of remaining time
        painter.setPen(QPen(QColor("#66BB6A"), pen_width))
        painter.drawArc(
            margin, margin, size - 2 * margin, size - 2 * margin,
            90 * 16, -270 * 16
        )

        painter.end()
        icon.addPixmap(pixmap)

    return icon


class MainWindow(QMainWindow):
    """
    Main application window with a single fixed-size timer screen.
    """

    def __init__(self, machine: Optional[SessionMachine] = None):
        super().__init__()

        self.machine = machine or SessionMachine()

        self.setWindowTitle(f"{APP_TITLE} - {MODE_TITLES[self.machine.mode]}")
        self.app_icon = create_app_icon()
        self.setWindowIcon(self.app_icon)

        self.halo_widget = HaloTimerWidget(self.machine)
        self.setCentralWidget(self.halo_widget)
        self.setFixedSize(self.halo_widget.size())
        self.halo_widget.setFocus()

        self._connect_signals()

    def _connect_signals(self):
        """Connect signals from the session machine."""
        self.machine.mode_changed.connect(self._on_mode_changed)
        self.machine.session_finished.connect(self._on_session_finished)

    @Slot(Mode, Mode)
    def _on_mode_changed(self, old_mode: Mode, new_mode: Mode):
        """Reflect the active screen in the window title."""
        self.setWindowTitle(f"{APP_TITLE} - {MODE_TITLES[new_mode]}")

    @Slot()
    def _on_session_finished(self):
        """Bring the window forward when the study countdown ends."""
        self.raise_()
        self.activateWindow()

    def closeEvent(self, event: QCloseEvent):
        """Handle window close event."""
        snapshot = self.machine.snapshot()
        counting = snapshot.mode == Mode.BREAK or (
            snapshot.mode == Mode.TIMER and snapshot.running
        )
        if counting:
            reply = QMessageBox.question(
                self,
                "Confirm Exit",
                "A timer is currently running. Are you sure you want to exit?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
                QMessageBox.StandardButton.No
            )
            if reply == QMessageBox.StandardButton.No:
                event.ignore()
                return

        logger.info("Closing %s", APP_TITLE)
        self.halo_widget.stop()
        event.accept()
