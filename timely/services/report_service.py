"""
Timesheet Report Generator
Aggregates a client's time entries into one summary row per calendar day.
"""
import datetime
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from ..data.records import Client, TimeEntry

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
PLACEHOLDER_TIME = "--:--"


def _local(ts: datetime.datetime) -> datetime.datetime:
    """Aware timestamps are shifted to local time, naive ones are already local."""
    if ts.tzinfo is not None:
        return ts.astimezone()
    return ts


def format_money(amount: Decimal, currency: str = "$") -> str:
    return f"{currency}{amount:,.2f}"


def format_hours(hours: Decimal) -> str:
    return f"{hours:.2f}"


@dataclass(frozen=True)
class DaySummary:
    """Aggregated view of one calendar day"""
    date: datetime.date
    clock_in: Optional[datetime.datetime] = None
    clock_out: Optional[datetime.datetime] = None
    hours: Decimal = ZERO
    earnings: Decimal = ZERO
    entry_count: int = 0

    @property
    def has_activity(self) -> bool:
        return self.entry_count > 0

    def clock_in_text(self, time_format: str = "%H:%M") -> str:
        return self.clock_in.strftime(time_format) if self.clock_in else PLACEHOLDER_TIME

    def clock_out_text(self, time_format: str = "%H:%M") -> str:
        return self.clock_out.strftime(time_format) if self.clock_out else PLACEHOLDER_TIME


def enumerate_dates(start_date: datetime.date, end_date: datetime.date) -> List[datetime.date]:
    """Every calendar date from start_date to end_date inclusive."""
    days = (end_date - start_date).days
    return [start_date + datetime.timedelta(days=offset) for offset in range(days + 1)]


def group_entries_by_date(entries: Iterable[TimeEntry]) -> Dict[datetime.date, List[TimeEntry]]:
    """Bucket entries by the local calendar date of their clock-in."""
    entries_by_date: Dict[datetime.date, List[TimeEntry]] = {}
    for entry in entries:
        entries_by_date.setdefault(_local(entry.clock_in).date(), []).append(entry)
    return entries_by_date


def summarize_day(day: datetime.date, entries: Iterable[TimeEntry]) -> DaySummary:
    """
    Collapse a day's entries into a single row.

    Only completed entries count. The displayed span runs from the earliest
    clock-in to the latest clock-out, while hours and earnings are the sums of
    each entry's stored values, so a break between two sessions is not billed.
    """
    completed = [entry for entry in entries if entry.is_completed]
    if not completed:
        return DaySummary(date=day)

    return DaySummary(
        date=day,
        clock_in=min(_local(entry.clock_in) for entry in completed),
        clock_out=max(_local(entry.clock_out) for entry in completed),
        hours=sum((entry.hours_worked for entry in completed), ZERO),
        earnings=sum((entry.earnings for entry in completed), ZERO),
        entry_count=len(completed),
    )


class TimesheetReport:
    """Generates per-day timesheet rows for one client over a date range"""

    def __init__(self, client: Client, start_date: datetime.date, end_date: datetime.date,
                 entries: Iterable[TimeEntry]):
        """
        Args:
            client: Client the timesheet is for
            start_date: First day of the period (inclusive)
            end_date: Last day of the period (inclusive)
            entries: The client's time entries within the period
        """
        self.client = client
        self.start_date = start_date
        self.end_date = end_date
        self.entries = list(entries)
        self.rows: List[DaySummary] = []
        self.total_hours = ZERO
        self.total_earnings = ZERO

    def generate(self) -> List[DaySummary]:
        """Build one row per day in the range and the period totals."""
        # Reset state to prevent duplicate accumulation on repeated calls
        self.rows = []

        entries_by_date = group_entries_by_date(self.entries)
        for day in enumerate_dates(self.start_date, self.end_date):
            self.rows.append(summarize_day(day, entries_by_date.get(day, [])))

        open_count = sum(1 for entry in self.entries if entry.is_open)
        if open_count:
            logger.info(f"{open_count} open session(s) for {self.client.name} left out of the totals")

        self.total_hours = sum((row.hours for row in self.rows), ZERO)
        self.total_earnings = sum((row.earnings for row in self.rows), ZERO)
        return self.rows

    @property
    def days_worked(self) -> int:
        return sum(1 for row in self.rows if row.has_activity)

    def to_text(self, date_format: str = "%Y-%m-%d") -> str:
        """
        Generate a human-readable text report.

        Returns:
            Formatted text report
        """
        if not self.rows:
            self.generate()

        width = 58
        lines = [
            "=" * width,
            "TIMESHEET REPORT",
            "=" * width,
            f"Client: {self.client.name}",
            f"Period: {self.start_date.strftime(date_format)} to {self.end_date.strftime(date_format)}",
            f"Hourly Rate: {format_money(self.client.hourly_rate)}",
            "-" * width,
            f"{'Date':<12} {'Clock In':<10} {'Clock Out':<10} {'Hours':>8} {'Earnings':>14}",
            "-" * width,
        ]
        for row in self.rows:
            lines.append(
                f"{row.date.strftime(date_format):<12} "
                f"{row.clock_in_text():<10} "
                f"{row.clock_out_text():<10} "
                f"{format_hours(row.hours):>8} "
                f"{format_money(row.earnings):>14}"
            )
        lines.append("-" * width)
        lines.append(f"TOTALS: {format_hours(self.total_hours)} hours, {format_money(self.total_earnings)}")
        lines.append(f"Days Worked: {self.days_worked}")
        lines.append("=" * width)
        return "\n".join(lines)


def generate_timesheet_report(client: Client, start_date: datetime.date, end_date: datetime.date,
                              entries: Iterable[TimeEntry]) -> TimesheetReport:
    """
    Convenience function to create and generate a timesheet report.

    Returns:
        TimesheetReport object with generated rows
    """
    report = TimesheetReport(client, start_date, end_date, entries)
    report.generate()
    return report
