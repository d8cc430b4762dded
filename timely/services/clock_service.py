"""
Clock service for handling clock in/out business logic.
"""
import datetime
import logging
from typing import Optional
from dataclasses import dataclass

from ..data.database import (
    TimeEntry, close_time_entry, create_time_entry, get_client, get_open_time_entry
)
from ..utils.errors import InvalidActionError, NotFoundError, TimelyError

logger = logging.getLogger(__name__)


@dataclass
class ClockResult:
    """Result of a clock action"""
    success: bool
    action: str
    client: object = None
    entry: Optional[object] = None
    error: Optional[str] = None


class ClockService:
    """Handles clock in/out business logic"""

    def current_entry(self) -> Optional[TimeEntry]:
        """The open session, if any"""
        return get_open_time_entry()

    def clock_in(self, client_id, at: Optional[datetime.datetime] = None) -> TimeEntry:
        """
        Start a session for a client.

        Raises:
            NotFoundError: unknown client
            ConflictError: a session is already open
        """
        client = get_client(client_id)
        if client is None:
            raise NotFoundError(f"Client {client_id} not found")
        entry = create_time_entry(client, clock_in=at)
        logger.info(f"Clocked IN - {client.name}")
        return entry

    def clock_out(self, at: Optional[datetime.datetime] = None) -> TimeEntry:
        """
        Close the open session at the client's hourly rate.

        Raises:
            InvalidActionError: nothing to clock out of
        """
        entry = get_open_time_entry()
        if entry is None:
            raise InvalidActionError("Not clocked in")
        entry = close_time_entry(entry.id, clock_out=at)
        logger.info(f"Clocked OUT - {entry.client.name} ({entry.hours_worked} h)")
        return entry

    def toggle(self, client_id) -> ClockResult:
        """
        Clock in when idle, clock out when a session is open.

        Returns:
            ClockResult with action details; failures are reported, not raised
        """
        try:
            if get_open_time_entry() is None:
                entry = self.clock_in(client_id)
                action = 'in'
            else:
                entry = self.clock_out()
                action = 'out'
            return ClockResult(success=True, action=action, client=entry.client, entry=entry)
        except TimelyError as e:
            logger.error(f"Error performing clock action: {e}")
            return ClockResult(success=False, action='', client=get_client(client_id), error=str(e))

    @staticmethod
    def elapsed(entry: TimeEntry, now: Optional[datetime.datetime] = None) -> datetime.timedelta:
        """Running duration of a session"""
        end = entry.clock_out or now or datetime.datetime.now()
        return end - entry.clock_in

    @staticmethod
    def format_elapsed(delta: datetime.timedelta) -> str:
        """Format a duration as HH:MM:SS"""
        total_seconds = max(int(delta.total_seconds()), 0)
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
