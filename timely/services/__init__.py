"""
Service layer for Timely application business logic.

Kivy-backed services (popup_service) are imported as needed.
"""

from .clock_service import ClockService
from .export_service import ExportService, ExportRequest
from .settings_service import SettingsService, ThemeSettings

__all__ = ['ClockService', 'ExportService', 'ExportRequest', 'SettingsService', 'ThemeSettings']
