"""
Timely Application - Main Entry Point

Kivy front end over the service layer: clock in/out, clients, timesheet export, themes.
Requires the ui extra (pip install "timely[ui]"); the rest of the package is Kivy-free.
"""
import logging

from kivy.app import App
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.screenmanager import ScreenManager, NoTransition

from .data.database import initialize_db, close_db
from .presentation.screens import ClientsScreen, ExportScreen, ThemeScreen, TimeClockScreen
from .presentation.widgets import DebouncedButton
from .services.clock_service import ClockService
from .services.export_service import ExportService
from .services.popup_service import PopupService
from .services.settings_service import SettingsService

# Setup logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

TABS = (
    ('timeclock', "Clock", TimeClockScreen),
    ('clients', "Clients", ClientsScreen),
    ('export', "Export", ExportScreen),
    ('themes', "Themes", ThemeScreen),
)


class WindowManager(ScreenManager):
    pass


class TimelyApp(App):
    """Main application - screens delegate to services"""

    title = "TIMELY"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.settings_service = SettingsService()
        self.settings = self.settings_service.load()
        self.popup_service = PopupService()
        self.clock_service = ClockService()
        self.export_service = ExportService(theme=self.settings)
        self.manager = None

    def build(self):
        initialize_db()

        root = BoxLayout(orientation='vertical')
        self.manager = WindowManager(transition=NoTransition())
        for name, _, screen_cls in TABS:
            self.manager.add_widget(screen_cls(name=name))
        root.add_widget(self.manager)

        nav = BoxLayout(orientation='horizontal', size_hint_y=None, height='70dp')
        for name, label, _ in TABS:
            btn = DebouncedButton(text=label, font_size='20sp')
            btn.bind(on_release=lambda instance, n=name: setattr(self.manager, 'current', n))
            nav.add_widget(btn)
        root.add_widget(nav)
        return root

    def accent_rgba(self):
        return (*self.settings.accent_rgb(), 1)

    def save_settings(self):
        try:
            self.settings_service.save(self.settings)
        except OSError as e:
            logger.error(f"Failed to save settings: {e}")
            self.show_popup("Error", f"Failed to save settings: {e}")

    def show_popup(self, title, content):
        if title.lower().startswith("error") or "failed" in title.lower():
            self.popup_service.show_error(title, content)
        else:
            self.popup_service.show_info(title, content)

    def on_stop(self):
        close_db()


def main():
    TimelyApp().run()


if __name__ == '__main__':
    main()
