"""
Error handling utilities for the Timely application.
"""


class TimelyError(Exception):
    """Base exception for Timely application"""
    pass


class ValidationError(TimelyError):
    """Raised when user input fails validation (missing client, bad date range, ...)"""
    pass


class FetchError(TimelyError):
    """Raised when the record store is unreachable or returns an error"""
    pass


class NotFoundError(TimelyError):
    """Raised when a client or time entry does not exist"""
    pass


class ConflictError(TimelyError):
    """Raised when clocking in while another session is still open"""
    pass


class InvalidActionError(TimelyError):
    """Raised when an invalid clock or export action is attempted"""
    pass


class DatabaseError(TimelyError):
    """Raised when a database operation fails"""
    pass


class ExportError(TimelyError):
    """Raised when an export operation fails"""
    pass
