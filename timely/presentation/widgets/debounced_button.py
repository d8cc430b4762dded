"""
Debounced button widget to prevent double-taps.
"""
import time
from kivy.uix.button import Button


class DebouncedButton(Button):
    """Button that ignores a second touch arriving within `debounce_seconds`"""

    debounce_seconds = 0.3

    def on_touch_down(self, touch):
        if not self.collide_point(*touch.pos):
            return super().on_touch_down(touch)

        now = time.monotonic()
        last = getattr(self, '_last_touch_time', None)
        if last is not None and now - last < self.debounce_seconds:
            return True  # swallow
        self._last_touch_time = now

        return super().on_touch_down(touch)
