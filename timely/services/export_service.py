"""
Timesheet export service.
Validates an export request, fetches the data, aggregates it and renders the PDF.
"""
import datetime
import logging
import os
import re
import threading
from dataclasses import dataclass
from typing import Optional, Tuple

from ..data.store import DatabaseStore, RecordStore
from ..utils.errors import InvalidActionError, NotFoundError, ValidationError
from ..utils.export_utils import get_export_directory, write_encrypted_file, write_file
from .pdf_renderer import APP_NAME, render_timesheet_pdf
from .report_service import TimesheetReport, generate_timesheet_report
from .settings_service import ThemeSettings

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[^A-Za-z0-9]')


def _parse_date(value, label: str) -> Optional[datetime.date]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(f"{label} must be a date in YYYY-MM-DD format, got {value!r}")


@dataclass
class ExportRequest:
    """A client and an inclusive date range; dates may be given as strings"""
    client_id: object
    start_date: object
    end_date: object

    def validate(self) -> Tuple[object, datetime.date, datetime.date]:
        """
        Check the request before anything is fetched.

        Returns:
            (client_id, start_date, end_date) with parsed dates

        Raises:
            ValidationError: missing client, missing or malformed dates, start after end
        """
        if self.client_id is None or self.client_id == '':
            raise ValidationError("Please select a client")
        start = _parse_date(self.start_date, "Start date")
        end = _parse_date(self.end_date, "End date")
        if start is None or end is None:
            raise ValidationError("Please select a start and end date")
        if start > end:
            raise ValidationError("Start date must be before end date")
        return self.client_id, start, end


@dataclass
class ExportResult:
    filename: str
    data: bytes
    report: TimesheetReport


def build_export_filename(client_name: str, start_date: datetime.date, end_date: datetime.date,
                          extension: str = "pdf") -> str:
    """TIMELY_<client>_<start>_to_<end>.pdf with every non-alphanumeric client character replaced by '_'"""
    safe_name = _UNSAFE_FILENAME_CHARS.sub('_', client_name)
    return f"{APP_NAME}_{safe_name}_{start_date.isoformat()}_to_{end_date.isoformat()}.{extension}"


def default_export_range(today: Optional[datetime.date] = None) -> Tuple[datetime.date, datetime.date]:
    """Monday to Friday of the week containing today"""
    today = today or datetime.date.today()
    monday = today - datetime.timedelta(days=today.weekday())
    return monday, monday + datetime.timedelta(days=4)


class ExportService:
    """Runs timesheet exports, one at a time"""

    def __init__(self, store: Optional[RecordStore] = None, theme: Optional[ThemeSettings] = None,
                 date_format: str = "%Y-%m-%d"):
        self.store = store or DatabaseStore()
        self.theme = theme or ThemeSettings()
        self.date_format = date_format
        self._lock = threading.Lock()

    @property
    def is_generating(self) -> bool:
        return self._lock.locked()

    def export(self, request: ExportRequest) -> ExportResult:
        """
        Produce the timesheet PDF for a request.

        Raises:
            ValidationError: request rejected before any fetch
            FetchError: the record store failed
            NotFoundError: client missing from the fetched client list
            InvalidActionError: another export is still running
        """
        client_id, start, end = request.validate()

        if not self._lock.acquire(blocking=False):
            raise InvalidActionError("An export is already in progress")
        try:
            return self._export(client_id, start, end)
        finally:
            self._lock.release()

    def preview(self, request: ExportRequest) -> TimesheetReport:
        """Fetch and aggregate without rendering; same errors as export()"""
        client_id, start, end = request.validate()
        return self._build_report(client_id, start, end)

    def _build_report(self, client_id, start, end) -> TimesheetReport:
        clients = self.store.list_clients()
        entries = self.store.list_time_entries(client_id, start, end)

        client = next((c for c in clients if str(c.id) == str(client_id)), None)
        if client is None:
            raise NotFoundError("Selected client not found")

        return generate_timesheet_report(client, start, end, entries)

    def _export(self, client_id, start, end) -> ExportResult:
        report = self._build_report(client_id, start, end)
        client = report.client
        data = render_timesheet_pdf(report, theme=self.theme, date_format=self.date_format)
        filename = build_export_filename(client.name, start, end)
        logger.info(f"Timesheet export ready: {filename} ({len(report.rows)} days, {len(data)} bytes)")
        return ExportResult(filename=filename, data=data, report=report)

    def export_to_directory(self, request: ExportRequest, directory: Optional[str] = None,
                            encrypt: bool = False, passphrase: Optional[str] = None) -> str:
        """
        Export and write the PDF to disk.

        Args:
            request: Export request
            directory: Target directory (defaults to get_export_directory())
            encrypt: Write an encrypted file (adds an '.enc' suffix)
            passphrase: Optional encryption passphrase override

        Returns:
            Path of the written file
        """
        result = self.export(request)
        directory = directory or get_export_directory()
        target = os.path.join(directory, result.filename)
        if encrypt:
            path = write_encrypted_file(result.data, target + ".enc", passphrase)
        else:
            path = write_file(result.data, target)
        logger.info(f"Timesheet written to {path}")
        return path
