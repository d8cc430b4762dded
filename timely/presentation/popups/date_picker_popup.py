"""
Month-grid date picker popup used by the export screen.
"""
import calendar
import datetime
import logging
from kivy.uix.popup import Popup
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.gridlayout import GridLayout
from kivy.uix.label import Label
from kivy.uix.widget import Widget

from ..widgets import DebouncedButton

logger = logging.getLogger(__name__)

DAY_NAMES = ['Mo', 'Tu', 'We', 'Th', 'Fr', 'Sa', 'Su']
IDLE_COLOR = (0.4, 0.4, 0.4, 1)
TODAY_COLOR = (0.3, 0.7, 0.3, 1)


class DatePickerPopup(Popup):
    """Pick a single calendar date; on_select receives a datetime.date"""

    def __init__(self, current_date=None, on_select=None, accent=(0.12, 0.23, 0.54, 1), **kwargs):
        super().__init__(
            title="Select Date",
            size_hint=(0.95, 0.95),
            auto_dismiss=False,
            **kwargs
        )
        self.on_select_callback = on_select
        self.accent = accent
        current_date = current_date or datetime.date.today()
        self.display_date = current_date.replace(day=1)
        self.selected_date = current_date

        layout = BoxLayout(orientation='vertical', spacing=5, padding=5)

        header = BoxLayout(orientation='horizontal', size_hint_y=None, height='60dp', spacing=10)
        prev_btn = DebouncedButton(text="<", font_size='30sp', size_hint_x=0.2)
        prev_btn.bind(on_release=lambda *_: self._change_month(-1))
        self.month_year_label = Label(font_size='24sp', size_hint_x=0.6, bold=True)
        next_btn = DebouncedButton(text=">", font_size='30sp', size_hint_x=0.2)
        next_btn.bind(on_release=lambda *_: self._change_month(1))
        header.add_widget(prev_btn)
        header.add_widget(self.month_year_label)
        header.add_widget(next_btn)
        layout.add_widget(header)

        day_header = GridLayout(cols=7, size_hint_y=None, height='40dp', spacing=2)
        for day_name in DAY_NAMES:
            day_header.add_widget(Label(text=day_name, bold=True, color=(0.7, 0.7, 0.7, 1)))
        layout.add_widget(day_header)

        self.days_grid = GridLayout(cols=7, spacing=3)
        layout.add_widget(self.days_grid)

        btn_row = BoxLayout(orientation='horizontal', spacing=10, size_hint_y=None, height='60dp')
        today_btn = DebouncedButton(text="Today", background_color=(0.2, 0.6, 0.8, 1))
        today_btn.bind(on_release=lambda *_: self._select(datetime.date.today()))
        ok_btn = DebouncedButton(text="OK", background_color=(0, 0.7, 0, 1))
        ok_btn.bind(on_release=lambda *_: self._confirm_date())
        cancel_btn = DebouncedButton(text="Cancel", background_color=(0.7, 0.2, 0.2, 1))
        cancel_btn.bind(on_release=self.dismiss)
        for btn in (today_btn, ok_btn, cancel_btn):
            btn_row.add_widget(btn)
        layout.add_widget(btn_row)

        self.content = layout
        self._update_calendar()

    def _change_month(self, delta):
        month_index = self.display_date.month - 1 + delta
        year = self.display_date.year + month_index // 12
        self.display_date = datetime.date(year, month_index % 12 + 1, 1)
        self._update_calendar()

    def _select(self, date):
        self.selected_date = date
        self.display_date = date.replace(day=1)
        self._update_calendar()

    def _update_calendar(self):
        year, month = self.display_date.year, self.display_date.month
        self.month_year_label.text = f"{calendar.month_name[month]} {year}"
        self.days_grid.clear_widgets()

        today = datetime.date.today()
        for week in calendar.Calendar(firstweekday=0).monthdatescalendar(year, month):
            for date in week:
                if date.month != month:
                    self.days_grid.add_widget(Widget())
                    continue
                if date == self.selected_date:
                    color = self.accent
                elif date == today:
                    color = TODAY_COLOR
                else:
                    color = IDLE_COLOR
                btn = DebouncedButton(text=str(date.day), font_size='18sp', background_color=color)
                btn.bind(on_release=lambda instance, d=date: self._select(d))
                self.days_grid.add_widget(btn)

    def _confirm_date(self):
        if self.on_select_callback:
            self.on_select_callback(self.selected_date)
        self.dismiss()
