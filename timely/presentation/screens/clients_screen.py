"""
Client management screen.
"""
import logging
from kivy.uix.screenmanager import Screen
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.gridlayout import GridLayout
from kivy.uix.label import Label
from kivy.uix.scrollview import ScrollView
from kivy.app import App

from ..widgets import DebouncedButton
from ..popups import ClientFormPopup, ConfirmPopup
from ...data.database import delete_client, get_all_clients
from ...services.report_service import format_money
from ...utils.errors import TimelyError

logger = logging.getLogger(__name__)


class ClientsScreen(Screen):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        layout = BoxLayout(orientation='vertical', spacing=10, padding=20)
        layout.add_widget(Label(text="Clients", font_size='28sp', bold=True, size_hint_y=None, height='60dp'))

        scroll = ScrollView(do_scroll_x=False, bar_width=10)
        self.container = GridLayout(cols=1, spacing=8, size_hint_y=None)
        self.container.bind(minimum_height=self.container.setter('height'))
        scroll.add_widget(self.container)
        layout.add_widget(scroll)

        self.add_button = DebouncedButton(text="Add Client", font_size='22sp', size_hint_y=None, height='70dp')
        self.add_button.bind(on_release=lambda *_: ClientFormPopup(on_saved=lambda c: self.load_clients()).open())
        layout.add_widget(self.add_button)

        self.add_widget(layout)

    def on_enter(self):
        """Load clients when screen is entered"""
        self.add_button.background_color = App.get_running_app().accent_rgba()
        self.load_clients()

    def load_clients(self):
        """Rebuild the client rows"""
        self.container.clear_widgets()
        try:
            clients = list(get_all_clients())
        except Exception as e:
            logger.error(f"Error loading clients: {e}")
            App.get_running_app().show_popup("Error", f"Failed to load clients: {e}")
            return

        if not clients:
            self.container.add_widget(
                Label(text="No clients yet. Add one to start tracking.", size_hint_y=None, height='60dp')
            )
            return

        for client in clients:
            row = BoxLayout(orientation='horizontal', spacing=8, size_hint_y=None, height='60dp')
            row.add_widget(Label(text=f"{client.name}\n{format_money(client.hourly_rate)}/hour", halign='left', size_hint_x=0.6))
            edit_btn = DebouncedButton(text="Edit", size_hint_x=0.2, background_color=(0.2, 0.6, 0.9, 1))
            edit_btn.bind(on_release=lambda instance, c=client: self.edit_client(c))
            delete_btn = DebouncedButton(text="Delete", size_hint_x=0.2, background_color=(0.8, 0.2, 0.2, 1))
            delete_btn.bind(on_release=lambda instance, c=client: self.confirm_delete(c))
            row.add_widget(edit_btn)
            row.add_widget(delete_btn)
            self.container.add_widget(row)

    def edit_client(self, client):
        ClientFormPopup(client=client, on_saved=lambda c: self.load_clients()).open()

    def confirm_delete(self, client):
        ConfirmPopup(
            title="Delete Client",
            message=f"Delete {client.name}?\nAll time entries for this client will be removed.",
            on_confirm=lambda: self.delete_client(client),
        ).open()

    def delete_client(self, client):
        try:
            removed = delete_client(client.id)
            App.get_running_app().show_popup("Client Deleted", f"{client.name} and {removed} time entries removed.")
        except TimelyError as e:
            logger.error(f"Error deleting client: {e}")
            App.get_running_app().show_popup("Error", f"Failed to delete client: {e}")
        self.load_clients()
