"""
Popup dialogs for Timely application.
"""

from .client_form_popup import ClientFormPopup
from .confirm_popup import ConfirmPopup
from .date_picker_popup import DatePickerPopup

__all__ = [
    'ClientFormPopup',
    'ConfirmPopup',
    'DatePickerPopup',
]
