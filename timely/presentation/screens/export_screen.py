"""
Timesheet export screen.
"""
import datetime
import logging
import threading
from kivy.uix.screenmanager import Screen
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.label import Label
from kivy.uix.spinner import Spinner
from kivy.clock import Clock
from kivy.app import App

from ..widgets import DebouncedButton
from ..popups import DatePickerPopup
from ..client_choices import NO_CLIENT, client_choices
from ...data.database import close_db, get_all_clients
from ...services.export_service import ExportRequest, default_export_range
from ...utils.errors import TimelyError

logger = logging.getLogger(__name__)


class ExportScreen(Screen):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._clients = {}
        self.start_date, self.end_date = default_export_range()

        layout = BoxLayout(orientation='vertical', spacing=15, padding=20)
        layout.add_widget(Label(text="Export Timesheet", font_size='28sp', bold=True, size_hint_y=None, height='60dp'))

        self.client_spinner = Spinner(text=NO_CLIENT, size_hint_y=None, height='60dp', font_size='20sp')
        layout.add_widget(self.client_spinner)

        dates_row = BoxLayout(orientation='horizontal', spacing=15, size_hint_y=None, height='80dp')
        self.start_date_button = DebouncedButton(font_size='20sp')
        self.start_date_button.bind(on_release=lambda *_: self.open_start_date_picker())
        self.end_date_button = DebouncedButton(font_size='20sp')
        self.end_date_button.bind(on_release=lambda *_: self.open_end_date_picker())
        dates_row.add_widget(self.start_date_button)
        dates_row.add_widget(self.end_date_button)
        layout.add_widget(dates_row)

        self.export_button = DebouncedButton(text="Download PDF", font_size='24sp', size_hint_y=None, height='80dp')
        self.export_button.bind(on_release=lambda *_: self.export_report())
        layout.add_widget(self.export_button)

        preview_button = DebouncedButton(text="Preview", font_size='20sp', size_hint_y=None, height='60dp',
                                         background_color=(0.3, 0.6, 0.9, 1))
        preview_button.bind(on_release=lambda *_: self.preview_report())
        layout.add_widget(preview_button)

        self.last_download_label = Label(text="", color=(0.2, 0.8, 0.2, 1))
        layout.add_widget(self.last_download_label)

        self.add_widget(layout)
        self._update_date_display()

    def on_enter(self):
        self.export_button.background_color = App.get_running_app().accent_rgba()
        try:
            self._clients = client_choices(get_all_clients())
        except Exception as e:
            logger.error(f"Error loading clients: {e}")
            self._clients = {}
        self.client_spinner.values = list(self._clients)
        self._update_date_display()

    def _update_date_display(self):
        self.start_date_button.text = f"From:\n{self.start_date:%Y-%m-%d}"
        self.end_date_button.text = f"To:\n{self.end_date:%Y-%m-%d}"

    def open_start_date_picker(self):
        DatePickerPopup(current_date=self.start_date, on_select=self._set_start_date,
                        accent=App.get_running_app().accent_rgba()).open()

    def open_end_date_picker(self):
        DatePickerPopup(current_date=self.end_date, on_select=self._set_end_date,
                        accent=App.get_running_app().accent_rgba()).open()

    def _set_start_date(self, date):
        self.start_date = date
        self._update_date_display()

    def _set_end_date(self, date):
        self.end_date = date
        self._update_date_display()

    def _selected_request(self):
        client = self._clients.get(self.client_spinner.text)
        return ExportRequest(client.id if client else None, self.start_date, self.end_date)

    def preview_report(self):
        """Show the aggregated rows as text"""
        app = App.get_running_app()
        try:
            report = app.export_service.preview(self._selected_request())
        except TimelyError as e:
            app.show_popup("Error", str(e))
            return
        app.popup_service.show_report(f"Timesheet - {report.client.name}", report.to_text())

    def export_report(self):
        """Validate on the UI thread, then fetch and render in the background"""
        app = App.get_running_app()
        request = self._selected_request()
        try:
            request.validate()
        except TimelyError as e:
            app.show_popup("Error", str(e))
            return

        self.export_button.disabled = True
        self.export_button.text = "Generating PDF..."
        threading.Thread(target=self._run_export, args=(request,), daemon=True).start()

    def _run_export(self, request):
        try:
            path = App.get_running_app().export_service.export_to_directory(request)
            Clock.schedule_once(lambda dt: self._export_finished(path, None))
        except Exception as e:
            logger.error(f"Error exporting timesheet: {e}")
            message = str(e)
            Clock.schedule_once(lambda dt: self._export_finished(None, message))
        finally:
            close_db()  # connection opened by this worker thread

    def _export_finished(self, path, error):
        self.export_button.disabled = False
        self.export_button.text = "Download PDF"
        app = App.get_running_app()
        if error:
            app.show_popup("Export Failed", f"Failed to generate PDF:\n{error}")
            return
        self.last_download_label.text = f"Last download: {path} - {datetime.datetime.now():%H:%M:%S}"
        app.popup_service.show_success("Export Successful", f"Timesheet saved to:\n{path}")
