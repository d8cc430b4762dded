"""
Data layer for Timely application.

Contains database models, queries, and the record store used by exports.
"""

# Database models and functions are imported as needed
# from .database import Client, TimeEntry, etc.

__all__ = []
