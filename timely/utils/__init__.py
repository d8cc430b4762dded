"""
Utilities for Timely application.
"""

from .errors import (
    TimelyError,
    ValidationError,
    FetchError,
    NotFoundError,
    ConflictError,
    InvalidActionError,
    DatabaseError,
    ExportError,
)
from .export_utils import (
    ExportEncryptionError,
    get_export_directory,
    write_file,
    write_encrypted_file,
    find_usb_mounts,
)

__all__ = [
    'TimelyError',
    'ValidationError',
    'FetchError',
    'NotFoundError',
    'ConflictError',
    'InvalidActionError',
    'DatabaseError',
    'ExportError',
    'ExportEncryptionError',
    'get_export_directory',
    'write_file',
    'write_encrypted_file',
    'find_usb_mounts',
]
