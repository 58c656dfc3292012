# UI module for Halo Timer application
from .main_window import MainWindow
from .halo_widget import HaloTimerWidget, FramePainter, key_code_for

__all__ = ['MainWindow', 'HaloTimerWidget', 'FramePainter', 'key_code_for']
