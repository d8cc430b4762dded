"""
Popup for adding or editing a client.
"""
import logging
from kivy.uix.popup import Popup
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.label import Label
from kivy.uix.textinput import TextInput
from kivy.app import App

from ..widgets import DebouncedButton
from ...data.database import create_client, update_client
from ...utils.errors import DatabaseError, TimelyError

logger = logging.getLogger(__name__)


class ClientFormPopup(Popup):
    def __init__(self, client=None, on_saved=None, **kwargs):
        super().__init__(
            title="Edit Client" if client else "Add New Client",
            size_hint=(0.9, 0.6),
            auto_dismiss=False,
            **kwargs
        )
        self.client = client
        self.on_saved_callback = on_saved

        layout = BoxLayout(orientation='vertical', spacing=15, padding=20)

        layout.add_widget(Label(text="Client Name", size_hint_y=None, height='30dp'))
        self.name_input = TextInput(
            text=client.name if client else "",
            hint_text="Enter client name",
            multiline=False,
            size_hint_y=None,
            height='50dp'
        )
        layout.add_widget(self.name_input)

        layout.add_widget(Label(text="Hourly Rate ($)", size_hint_y=None, height='30dp'))
        self.rate_input = TextInput(
            text=f"{client.hourly_rate:.2f}" if client else "",
            hint_text="0.00",
            input_filter='float',
            multiline=False,
            size_hint_y=None,
            height='50dp'
        )
        layout.add_widget(self.rate_input)

        self.error_label = Label(text="", color=(1, 0.3, 0.3, 1), size_hint_y=None, height='30dp')
        layout.add_widget(self.error_label)

        btn_row = BoxLayout(orientation='horizontal', spacing=15, size_hint_y=None, height='60dp')
        save_btn = DebouncedButton(text="Save", background_color=(0, 0.7, 0, 1))
        cancel_btn = DebouncedButton(text="Cancel", background_color=(0.7, 0.2, 0.2, 1))
        save_btn.bind(on_release=lambda *_: self._save())
        cancel_btn.bind(on_release=self.dismiss)
        btn_row.add_widget(save_btn)
        btn_row.add_widget(cancel_btn)
        layout.add_widget(btn_row)

        self.content = layout

    def _save(self):
        name = self.name_input.text
        rate = self.rate_input.text or "0"
        try:
            if self.client:
                client = update_client(self.client.id, name, rate)
            else:
                client = create_client(name, rate)
        except DatabaseError as e:
            logger.error(f"[CLIENT_FORM] Failed to save client: {e}")
            App.get_running_app().show_popup("Error", f"Failed to save client: {e}")
            return
        except TimelyError as e:
            self.error_label.text = str(e)
            return

        if self.on_saved_callback:
            self.on_saved_callback(client)
        self.dismiss()
