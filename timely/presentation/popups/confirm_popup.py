"""
Yes/no confirmation popup.
"""
from kivy.uix.popup import Popup
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.label import Label

from ..widgets import DebouncedButton


class ConfirmPopup(Popup):
    def __init__(self, title, message, on_confirm, confirm_text="Delete", **kwargs):
        super().__init__(title=title, size_hint=(0.8, 0.5), auto_dismiss=False, **kwargs)
        self.on_confirm_callback = on_confirm

        layout = BoxLayout(orientation='vertical', spacing=15, padding=20)
        layout.add_widget(Label(text=message, halign='center'))

        btn_row = BoxLayout(orientation='horizontal', spacing=15, size_hint_y=None, height='60dp')
        confirm_btn = DebouncedButton(text=confirm_text, background_color=(0.8, 0.2, 0.2, 1))
        cancel_btn = DebouncedButton(text="Cancel", background_color=(0.4, 0.4, 0.4, 1))
        confirm_btn.bind(on_release=lambda *_: self._confirm())
        cancel_btn.bind(on_release=self.dismiss)
        btn_row.add_widget(confirm_btn)
        btn_row.add_widget(cancel_btn)
        layout.add_widget(btn_row)

        self.content = layout

    def _confirm(self):
        self.dismiss()
        self.on_confirm_callback()
