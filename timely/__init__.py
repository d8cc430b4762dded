"""
Timely - client time tracking with PDF timesheet export.
"""

__version__ = "1.0.0"
