"""
Theme settings service.
Holds the light/dark preference and per-theme accent colours, persisted as JSON.
The settings object is passed explicitly to whatever needs it (screens, PDF renderer).
"""
import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ..utils.errors import ValidationError

logger = logging.getLogger(__name__)

SETTINGS_FILE_ENV = "TIMELY_SETTINGS_FILE"
DEFAULT_SETTINGS_FILE = "timely_settings.json"

THEMES = ('light', 'dark')
DEFAULT_ACCENT_COLORS = {
    'light': '#1E3A8A',  # blue
    'dark': '#2cff05',   # green
}
AVAILABLE_COLORS = ['#FF5C00', '#341539', '#4c3228', '#00F0FF', '#E42278']

_HEX_COLOR = re.compile(r'^#[0-9A-Fa-f]{6}$')


def hex_to_rgb(color: str) -> Tuple[float, float, float]:
    """'#1E3A8A' -> (0.118, 0.227, 0.541), channels in 0..1"""
    if not _HEX_COLOR.match(color or ''):
        raise ValidationError(f"Invalid colour: {color!r}. Expected #RRGGBB")
    return tuple(int(color[i:i + 2], 16) / 255.0 for i in (1, 3, 5))


@dataclass
class ThemeSettings:
    theme: str = 'light'
    accent_colors: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ACCENT_COLORS))

    @property
    def accent_color(self) -> str:
        return self.accent_colors.get(self.theme, DEFAULT_ACCENT_COLORS[self.theme])

    def accent_rgb(self) -> Tuple[float, float, float]:
        return hex_to_rgb(self.accent_color)

    @property
    def available_colors(self):
        """Palette offered for the current theme, its default colour included"""
        return AVAILABLE_COLORS + [DEFAULT_ACCENT_COLORS[self.theme]]

    def toggle_theme(self) -> str:
        self.theme = 'dark' if self.theme == 'light' else 'light'
        return self.theme

    def set_accent_color(self, color: str):
        """Set the accent colour for the current theme only"""
        hex_to_rgb(color)
        self.accent_colors = {**self.accent_colors, self.theme: color}

    def to_dict(self) -> Dict:
        return {'theme': self.theme, 'accent_colors': dict(self.accent_colors)}

    @classmethod
    def from_dict(cls, data: Dict) -> "ThemeSettings":
        theme = data.get('theme', 'light')
        if theme not in THEMES:
            raise ValidationError(f"Unknown theme: {theme!r}")
        colors = dict(DEFAULT_ACCENT_COLORS)
        for name, color in (data.get('accent_colors') or {}).items():
            if name in THEMES:
                hex_to_rgb(color)
                colors[name] = color
        return cls(theme=theme, accent_colors=colors)


class SettingsService:
    """Loads and saves ThemeSettings"""

    def __init__(self, path: Optional[str] = None):
        self.path = path or os.getenv(SETTINGS_FILE_ENV, DEFAULT_SETTINGS_FILE)

    def load(self) -> ThemeSettings:
        """Return saved settings, or defaults when nothing usable is on disk."""
        if not os.path.exists(self.path):
            return ThemeSettings()
        try:
            with open(self.path, encoding='utf-8') as f:
                return ThemeSettings.from_dict(json.load(f))
        except (OSError, ValueError, AttributeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable settings file {self.path}: {e}")
            return ThemeSettings()

    def save(self, settings: ThemeSettings) -> str:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(settings.to_dict(), f, indent=2)
        logger.debug(f"Settings saved to {self.path}")
        return self.path
