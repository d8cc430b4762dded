import datetime
import os
from decimal import Decimal

# Must be set before timely.data.database creates its connection
os.environ["TIMELY_DB_FILE"] = ":memory:"
os.environ.pop("TIMELY_ENV_KEY", None)

import pytest

from timely.data import database
from timely.data.records import Client, TimeEntry


@pytest.fixture
def db():
    database.db.connect(reuse_if_open=True)
    database.db.create_tables(database.MODELS)
    yield database.db
    database.db.drop_tables(database.MODELS)
    database.db.close()


@pytest.fixture
def acme(db):
    return database.create_client("Acme & Co.", "50")


def at(day, hhmm):
    """datetime for a date and 'HH:MM'"""
    hours, minutes = (int(part) for part in hhmm.split(":"))
    return datetime.datetime.combine(day, datetime.time(hours, minutes))


def make_entry(entry_id, day, start, end=None, rate=Decimal("50"), client_id=1):
    """Completed (or open, when end is None) TimeEntry record with stored hours/earnings"""
    clock_in = at(day, start)
    if end is None:
        return TimeEntry(id=entry_id, client_id=client_id, clock_in=clock_in)
    clock_out = at(day, end)
    hours, earnings = database.compute_hours_and_earnings(clock_in, clock_out, rate)
    return TimeEntry(
        id=entry_id,
        client_id=client_id,
        clock_in=clock_in,
        clock_out=clock_out,
        hours_worked=hours,
        earnings=earnings,
    )


@pytest.fixture
def client_record():
    return Client(id=1, name="Acme & Co.", hourly_rate=Decimal("50.00"))
