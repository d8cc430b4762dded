"""
Theme mode and accent colour screen.
"""
from kivy.uix.screenmanager import Screen
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.gridlayout import GridLayout
from kivy.uix.label import Label
from kivy.app import App

from ..widgets import DebouncedButton
from ...services.settings_service import hex_to_rgb


class ThemeScreen(Screen):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        layout = BoxLayout(orientation='vertical', spacing=15, padding=20)
        layout.add_widget(Label(text="Themes", font_size='28sp', bold=True, size_hint_y=None, height='60dp'))

        self.toggle_button = DebouncedButton(font_size='22sp', size_hint_y=None, height='70dp')
        self.toggle_button.bind(on_release=lambda *_: self.toggle_theme())
        layout.add_widget(self.toggle_button)

        self.palette_label = Label(size_hint_y=None, height='40dp')
        layout.add_widget(self.palette_label)
        self.palette = GridLayout(cols=3, spacing=10)
        layout.add_widget(self.palette)

        self.current_label = Label(size_hint_y=None, height='40dp')
        layout.add_widget(self.current_label)

        self.add_widget(layout)

    def on_enter(self):
        self.refresh()

    def refresh(self):
        settings = App.get_running_app().settings
        other = "Dark" if settings.theme == 'light' else "Light"
        self.toggle_button.text = f"Switch to {other} Mode"
        self.toggle_button.background_color = App.get_running_app().accent_rgba()
        self.palette_label.text = f"Accent Color ({settings.theme.capitalize()} Mode)"
        self.current_label.text = f"Current: {settings.accent_color}"

        self.palette.clear_widgets()
        for color in settings.available_colors:
            selected = color.lower() == settings.accent_color.lower()
            btn = DebouncedButton(
                text="*" if selected else "",
                background_normal='',
                background_color=(*hex_to_rgb(color), 1)
            )
            btn.bind(on_release=lambda instance, c=color: self.set_accent_color(c))
            self.palette.add_widget(btn)

    def toggle_theme(self):
        app = App.get_running_app()
        app.settings.toggle_theme()
        app.save_settings()
        self.refresh()

    def set_accent_color(self, color):
        app = App.get_running_app()
        app.settings.set_accent_color(color)
        app.save_settings()
        self.refresh()
