"""
Halo timer widget for the Halo Timer application.
Forwards mouse and keyboard input to the session machine, drives its frame
step from a QTimer and paints the draw list it describes.
"""

from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt, QTimer, Slot
from PySide6.QtGui import (
    QColor, QFont, QKeyEvent, QMouseEvent, QPainter, QPaintEvent, QPen, QPolygonF
)
from PySide6.QtWidgets import QWidget

from core.layout import Rect
from core.render import (
    ButtonItem,
    HaloItem,
    INPUT_ACTIVE_COLOR,
    INPUT_IDLE_COLOR,
    InputBoxItem,
    MUTED_TEXT,
    PopupItem,
    RenderFrame,
    TEXT_COLOR,
    TextItem,
    TriangleItem,
)
from core.session import KEY_BACKSPACE, KEY_ENTER, SessionMachine

HALO_PEN_WIDTH = 12
POPUP_BOX_COLOR = "#2a2a2a"

_KEY_CODES = {int(getattr(Qt.Key, f"Key_{digit}")): str(digit) for digit in range(10)}
_KEY_CODES[int(Qt.Key.Key_Backspace)] = KEY_BACKSPACE
_KEY_CODES[int(Qt.Key.Key_Return)] = KEY_ENTER
_KEY_CODES[int(Qt.Key.Key_Enter)] = KEY_ENTER


def key_code_for(key) -> Optional[str]:
    """Map a Qt key to the machine's key code, or None if unsupported."""
    return _KEY_CODES.get(int(key))


def _rectf(rect: Rect) -> QRectF:
    return QRectF(rect.x, rect.y, rect.width, rect.height)


class FramePainter:
    """Paints a RenderFrame with a QPainter."""

    def __init__(self, painter: QPainter):
        self.painter = painter

    def paint(self, frame: RenderFrame, width: int, height: int):
        self.painter.fillRect(QRectF(0, 0, width, height), QColor(frame.background))
        for item in frame.items:
            if isinstance(item, HaloItem):
                self._halo(item)
            elif isinstance(item, TextItem):
                self._text(item)
            elif isinstance(item, ButtonItem):
                self._button(item)
            elif isinstance(item, TriangleItem):
                self._triangle(item)
            elif isinstance(item, InputBoxItem):
                self._input_box(item)
            elif isinstance(item, PopupItem):
                self._popup(item)

    def _halo(self, item: HaloItem):
        p = self.painter
        radius = item.diameter / 2
        cx, cy = item.center
        bounds = QRectF(cx - radius, cy - radius, item.diameter, item.diameter)

        p.setBrush(Qt.BrushStyle.NoBrush)
        p.setPen(QPen(QColor(item.track_color), HALO_PEN_WIDTH))
        p.drawEllipse(bounds)

        # Remaining arc runs clockwise from 12 o'clock
        span = int(round(item.remaining_fraction * 360 * 16))
        if span > 0:
            pen = QPen(QColor(item.color), HALO_PEN_WIDTH)
            pen.setCapStyle(Qt.PenCapStyle.RoundCap)
            p.setPen(pen)
            p.drawArc(bounds, 90 * 16, -span)

    def _text(self, item: TextItem):
        p = self.painter
        font = QFont()
        font.setPixelSize(item.size)
        font.setBold(item.bold)
        p.setFont(font)
        p.setPen(QColor(item.color))
        x, y = item.position
        box = QRectF(x - 150, y - item.size, 300, item.size * 2)
        p.drawText(box, Qt.AlignmentFlag.AlignCenter, item.text)

    def _button(self, item: ButtonItem):
        p = self.painter
        bounds = _rectf(item.region)
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(QColor(item.fill))
        p.drawRoundedRect(bounds, 5, 5)

        font = QFont()
        font.setPixelSize(14)
        font.setBold(True)
        p.setFont(font)
        p.setPen(QColor("#ffffff"))
        p.drawText(bounds, Qt.AlignmentFlag.AlignCenter, item.label)

    def _triangle(self, item: TriangleItem):
        p = self.painter
        r = item.region
        if item.pointing_up:
            points = [
                QPointF(r.x + r.width / 2, r.y),
                QPointF(r.x, r.y + r.height),
                QPointF(r.x + r.width, r.y + r.height),
            ]
        else:
            points = [
                QPointF(r.x, r.y),
                QPointF(r.x + r.width, r.y),
                QPointF(r.x + r.width / 2, r.y + r.height),
            ]
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(QColor(item.color))
        p.drawPolygon(QPolygonF(points))

    def _input_box(self, item: InputBoxItem):
        p = self.painter
        bounds = _rectf(item.region)
        border = INPUT_ACTIVE_COLOR if item.active else "#404040"
        p.setPen(QPen(QColor(border), 2))
        p.setBrush(QColor(INPUT_IDLE_COLOR))
        p.drawRoundedRect(bounds, 5, 5)

        font = QFont()
        font.setPixelSize(18)
        p.setFont(font)
        if item.active:
            p.setPen(QColor(TEXT_COLOR))
            p.drawText(bounds, Qt.AlignmentFlag.AlignCenter, item.text + "|")
        else:
            p.setPen(QColor(MUTED_TEXT))
            p.drawText(bounds, Qt.AlignmentFlag.AlignCenter, "min")

    def _popup(self, item: PopupItem):
        p = self.painter
        dim = QColor(item.dim_color)
        dim.setAlpha(item.dim_alpha)
        p.fillRect(_rectf(item.screen), dim)

        p.setPen(QPen(QColor("#404040"), 1))
        p.setBrush(QColor(POPUP_BOX_COLOR))
        p.drawRoundedRect(_rectf(item.box), 8, 8)

        box = item.box
        self._text(TextItem((box.x + box.width / 2, box.y + 50), item.message, 16, bold=True))
        self._button(item.yes)
        self._button(item.no)


class HaloTimerWidget(QWidget):
    """
    Fixed-size canvas hosting the session machine.
    """

    def __init__(self, machine: SessionMachine, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.machine = machine
        layout_config = machine.layout.config
        self.setFixedSize(layout_config.width, layout_config.height)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        # Animation-rate timer for ticks and display smoothing
        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(machine.config.frame_interval_ms)
        self._frame_timer.timeout.connect(self._on_frame)
        self._frame_timer.start()

    @Slot()
    def _on_frame(self):
        """Advance the machine one frame and schedule a repaint."""
        self.machine.frame_tick()
        self.update()

    def mousePressEvent(self, event: QMouseEvent):
        """Resolve left clicks through the region table."""
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        self.machine.pointer_click(pos.x(), pos.y())
        self.update()

    def keyPressEvent(self, event: QKeyEvent):
        """Feed digits, backspace and enter to the typed-minutes field."""
        code = key_code_for(event.key())
        if code is not None and self.machine.key_press(code):
            self.update()
            return
        super().keyPressEvent(event)

    def paintEvent(self, event: QPaintEvent):
        """Paint the machine's current draw list."""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        FramePainter(painter).paint(self.machine.render(), self.width(), self.height())
        painter.end()

    def stop(self):
        """Stop the frame timer. Call before application exit."""
        self._frame_timer.stop()
