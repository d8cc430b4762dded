import json

import pytest

from timely.services.settings_service import (
    AVAILABLE_COLORS, DEFAULT_ACCENT_COLORS, SettingsService, ThemeSettings, hex_to_rgb,
)
from timely.utils.errors import ValidationError


def test_defaults():
    settings = ThemeSettings()
    assert settings.theme == 'light'
    assert settings.accent_color == DEFAULT_ACCENT_COLORS['light']
    assert settings.available_colors == AVAILABLE_COLORS + ['#1E3A8A']


def test_toggle_theme_switches_accent():
    settings = ThemeSettings()
    assert settings.toggle_theme() == 'dark'
    assert settings.accent_color == '#2cff05'
    assert settings.toggle_theme() == 'light'


def test_accent_change_applies_to_current_theme_only():
    settings = ThemeSettings()
    settings.set_accent_color('#FF5C00')
    assert settings.accent_colors == {'light': '#FF5C00', 'dark': '#2cff05'}
    settings.toggle_theme()
    assert settings.accent_color == '#2cff05'


@pytest.mark.parametrize("color", ["", "FF5C00", "#FF5C0", "#GG5C00", None])
def test_invalid_colour_is_rejected(color):
    with pytest.raises(ValidationError):
        ThemeSettings().set_accent_color(color)


def test_hex_to_rgb():
    assert hex_to_rgb('#FF0000') == (1.0, 0.0, 0.0)
    assert hex_to_rgb('#000000') == (0.0, 0.0, 0.0)


def test_missing_file_gives_defaults(tmp_path):
    assert SettingsService(str(tmp_path / "missing.json")).load() == ThemeSettings()


def test_save_and_load(tmp_path):
    service = SettingsService(str(tmp_path / "conf" / "settings.json"))
    settings = ThemeSettings(theme='dark')
    settings.set_accent_color('#00F0FF')
    service.save(settings)

    loaded = service.load()
    assert loaded.theme == 'dark'
    assert loaded.accent_color == '#00F0FF'
    assert loaded.accent_colors['light'] == DEFAULT_ACCENT_COLORS['light']


@pytest.mark.parametrize("content", [
    "not json",
    json.dumps({"theme": "sepia"}),
    json.dumps({"theme": "dark", "accent_colors": {"dark": "green"}}),
    json.dumps(["light"]),
])
def test_unusable_file_gives_defaults(tmp_path, content):
    path = tmp_path / "settings.json"
    path.write_text(content, encoding="utf-8")
    assert SettingsService(str(path)).load() == ThemeSettings()


def test_settings_path_from_environment(tmp_path, monkeypatch):
    path = str(tmp_path / "env.json")
    monkeypatch.setenv("TIMELY_SETTINGS_FILE", path)
    assert SettingsService().path == path
