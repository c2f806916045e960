"""
calgrid GUI Module

PySide6-based graphical interface for the calendar grid.
"""

from .main_window import MainWindow

__all__ = ['MainWindow']
