"""
Popup service: short-lived notices, clock confirmations and the text timesheet viewer.
"""
import logging
from kivy.uix.popup import Popup
from kivy.uix.label import Label
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.scrollview import ScrollView
from kivy.clock import Clock

from .report_service import format_hours, format_money

logger = logging.getLogger(__name__)

INFO_COLOR = (1, 1, 1, 1)
ERROR_COLOR = (1, 0.3, 0.3, 1)
SUCCESS_COLOR = (0.2, 0.9, 0.2, 1)


class PopupService:
    """Centralized popup management"""

    def _notice(self, title: str, message: str, color, duration: float):
        popup = Popup(
            title=title,
            content=Label(text=message, color=color, halign='center'),
            size_hint=(None, None),
            size=(460, 220)
        )
        popup.open()
        Clock.schedule_once(lambda dt: popup.dismiss(), duration)
        return popup

    def show_info(self, title: str, message: str, duration: float = 3.0):
        """
        Show a notice that dismisses itself.

        Args:
            title: Popup title
            message: Body text
            duration: Seconds before it closes
        """
        return self._notice(title, message, INFO_COLOR, duration)

    def show_error(self, title: str, message: str, duration: float = 5.0):
        logger.debug(f"Error popup: {title}: {message}")
        return self._notice(title, message, ERROR_COLOR, duration)

    def show_success(self, title: str, message: str, duration: float = 3.0):
        return self._notice(title, message, SUCCESS_COLOR, duration)

    def show_clock_result(self, result, duration: float = 2.5):
        """Confirm a clock in/out: client and start time, or the session's hours and earnings"""
        if not result.success:
            return self.show_error("Error", result.error or "Clock action failed")

        entry = result.entry
        if result.action == 'in':
            message = f"{result.client.name}\nClocked in at {entry.clock_in:%H:%M}"
            return self.show_success("Clocked In", message, duration)

        message = (
            f"{result.client.name}\n"
            f"{format_hours(entry.hours_worked)} h  |  {format_money(entry.earnings)}"
        )
        return self.show_success("Clocked Out", message, duration)

    def show_report(self, title: str, report_text: str, size_hint=(0.95, 0.95)):
        """Scrollable monospace view of TimesheetReport.to_text(); columns stay aligned"""
        from ..presentation.widgets import DebouncedButton

        content = BoxLayout(orientation='vertical', spacing=10, padding=10)
        scroll = ScrollView(size_hint=(1, 1), do_scroll_x=True, bar_width=10)

        label = Label(
            text=report_text,
            font_name='RobotoMono-Regular',
            font_size='14sp',
            halign='left',
            valign='top',
            size_hint=(None, None),
        )
        # Wide timesheets scroll both ways
        label.bind(texture_size=lambda inst, size: setattr(inst, 'size', size))

        scroll.add_widget(label)
        content.add_widget(scroll)

        close_btn = DebouncedButton(text="Close", size_hint_y=None, height='50dp')
        content.add_widget(close_btn)

        popup = Popup(title=title, content=content, size_hint=size_hint, auto_dismiss=True)
        close_btn.bind(on_release=popup.dismiss)
        popup.open()
        return popup
