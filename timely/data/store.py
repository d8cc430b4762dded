"""
Record store interface used by the export pipeline.

The export only ever reads two things: the client list and a client's time
entries over a date range. Anything able to answer those two queries can
back an export; DatabaseStore answers them from the local peewee database.
"""
import datetime
import logging
from typing import List

from peewee import PeeweeException

from . import database
from .records import Client, TimeEntry
from ..utils.errors import FetchError

logger = logging.getLogger(__name__)


class RecordStore:
    """Read operations the timesheet export depends on"""

    def list_clients(self) -> List[Client]:
        raise NotImplementedError

    def list_time_entries(self, client_id, start_date: datetime.date,
                          end_date: datetime.date) -> List[TimeEntry]:
        """Entries whose clock-in falls within the inclusive range, ascending by clock-in."""
        raise NotImplementedError


class DatabaseStore(RecordStore):
    """RecordStore backed by the application database"""

    def list_clients(self) -> List[Client]:
        try:
            clients = [Client.from_model(row) for row in database.get_all_clients()]
        except PeeweeException as e:
            logger.error(f"Failed to fetch clients: {e}")
            raise FetchError(f"Failed to fetch clients: {e}") from e
        logger.debug(f"Fetched {len(clients)} clients")
        return clients

    def list_time_entries(self, client_id, start_date, end_date) -> List[TimeEntry]:
        try:
            rows = database.get_time_entries(client_id, start_date, end_date)
        except PeeweeException as e:
            logger.error(f"Failed to fetch time entries for client {client_id}: {e}")
            raise FetchError(f"Failed to fetch time entries: {e}") from e
        entries = [TimeEntry.from_model(row) for row in rows]
        logger.debug(f"Fetched {len(entries)} time entries for client {client_id} ({start_date} - {end_date})")
        return entries
