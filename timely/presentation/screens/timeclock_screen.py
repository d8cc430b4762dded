"""
Clock in/out screen.
"""
import logging
from kivy.uix.screenmanager import Screen
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.label import Label
from kivy.uix.spinner import Spinner
from kivy.properties import StringProperty
from kivy.clock import Clock
from kivy.app import App

from ..widgets import DebouncedButton
from ..client_choices import NO_CLIENT, client_choices, client_label
from ...data.database import get_all_clients
from ...services.clock_service import ClockService

logger = logging.getLogger(__name__)


class TimeClockScreen(Screen):
    status_message = StringProperty("Ready")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._clients = {}
        self._timer_event = None

        layout = BoxLayout(orientation='vertical', spacing=15, padding=20)
        self.title_label = Label(text="Time Tracker", font_size='28sp', bold=True, size_hint_y=None, height='60dp')
        layout.add_widget(self.title_label)

        self.client_spinner = Spinner(text=NO_CLIENT, size_hint_y=None, height='60dp', font_size='20sp')
        layout.add_widget(self.client_spinner)

        self.timer_label = Label(text="00:00:00", font_size='48sp')
        layout.add_widget(self.timer_label)

        self.session_label = Label(text="", font_size='18sp', size_hint_y=None, height='40dp')
        layout.add_widget(self.session_label)

        self.clock_button = DebouncedButton(text="Clock In", font_size='26sp', size_hint_y=None, height='90dp')
        self.clock_button.bind(on_release=lambda *_: self.toggle_clock())
        layout.add_widget(self.clock_button)

        self.status_label = Label(text=self.status_message, size_hint_y=None, height='40dp')
        self.bind(status_message=lambda inst, value: setattr(self.status_label, 'text', value))
        layout.add_widget(self.status_label)

        self.add_widget(layout)

    @property
    def clock_service(self) -> ClockService:
        return App.get_running_app().clock_service

    def on_enter(self):
        self.load_clients()
        self._refresh_session()
        self._timer_event = Clock.schedule_interval(lambda dt: self._refresh_timer(), 1)

    def on_leave(self):
        if self._timer_event:
            self._timer_event.cancel()
            self._timer_event = None

    def load_clients(self):
        try:
            self._clients = client_choices(get_all_clients())
        except Exception as e:
            logger.error(f"Error loading clients: {e}")
            self._clients = {}
        self.client_spinner.values = list(self._clients)

    def _refresh_session(self):
        accent = App.get_running_app().accent_rgba()
        entry = self.clock_service.current_entry()
        if entry is None:
            self.clock_button.text = "Clock In"
            self.clock_button.background_color = accent
            self.session_label.text = ""
            self.client_spinner.disabled = False
            self.timer_label.text = "00:00:00"
        else:
            self.clock_button.text = "Clock Out"
            self.clock_button.background_color = (0.8, 0.2, 0.2, 1)
            self.session_label.text = f"Working for {entry.client.name} since {entry.clock_in:%H:%M}"
            self.client_spinner.text = client_label(entry.client)
            self.client_spinner.disabled = True
            self._refresh_timer(entry)

    def _refresh_timer(self, entry=None):
        entry = entry or self.clock_service.current_entry()
        if entry is not None:
            self.timer_label.text = ClockService.format_elapsed(ClockService.elapsed(entry))

    def toggle_clock(self):
        client = self._clients.get(self.client_spinner.text)
        if client is None and self.clock_service.current_entry() is None:
            App.get_running_app().show_popup("Error", "Please select a client first.")
            return

        client_id = client.id if client else self.clock_service.current_entry().client_id
        result = self.clock_service.toggle(client_id)
        App.get_running_app().popup_service.show_clock_result(result)
        if result.success:
            if result.action == 'in':
                self.update_status(f"Clocked in for {result.client.name}")
            else:
                self.update_status(f"Clocked out of {result.client.name}")
        self._refresh_session()

    def update_status(self, message):
        self.status_message = message
        # Clear message after 3 seconds
        Clock.schedule_once(lambda dt: self.set_default_status(), 3)

    def set_default_status(self):
        self.status_message = "Ready"
