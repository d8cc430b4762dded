"""
Screen controllers for Timely application.
"""

from .timeclock_screen import TimeClockScreen
from .clients_screen import ClientsScreen
from .export_screen import ExportScreen
from .theme_screen import ThemeScreen

__all__ = [
    'TimeClockScreen',
    'ClientsScreen',
    'ExportScreen',
    'ThemeScreen',
]
