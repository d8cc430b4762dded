"""
Custom widgets for Timely application.
"""

from .debounced_button import DebouncedButton

__all__ = ['DebouncedButton']
