import datetime
from decimal import Decimal

import peewee
import pytest

from timely.data import database
from timely.data.store import DatabaseStore
from timely.utils.errors import (
    ConflictError, DatabaseError, FetchError, InvalidActionError, NotFoundError, ValidationError,
)

from .conftest import at

DAY = datetime.date(2024, 3, 4)


@pytest.mark.parametrize("name, rate", [
    ("", "50"),
    ("   ", "50"),
    ("Acme", "abc"),
    ("Acme", "0"),
    ("Acme", "-5"),
])
def test_create_client_rejects_bad_input(db, name, rate):
    with pytest.raises(ValidationError):
        database.create_client(name, rate)
    assert database.Client.select().count() == 0


def test_create_client_rounds_rate(db):
    client = database.create_client("  Acme  ", "42.505")
    stored = database.get_client(client.id)
    assert stored.name == "Acme"
    assert stored.hourly_rate == Decimal("42.51")


def test_get_all_clients_newest_first(db):
    first = database.create_client("First", "10")
    second = database.create_client("Second", "20")
    assert [c.id for c in database.get_all_clients()] == [second.id, first.id]


def test_update_client(acme):
    database.update_client(acme.id, "Acme Ltd", "65")
    stored = database.get_client(acme.id)
    assert stored.name == "Acme Ltd"
    assert stored.hourly_rate == Decimal("65.00")


def test_update_missing_client(db):
    with pytest.raises(NotFoundError):
        database.update_client(404, "Nobody", "10")


def test_delete_client_removes_its_entries(acme):
    other = database.create_client("Other", "10")
    entry = database.create_time_entry(acme, clock_in=at(DAY, "09:00"))
    database.close_time_entry(entry.id, clock_out=at(DAY, "10:00"))
    database.create_time_entry(acme, clock_in=at(DAY, "11:00"))

    assert database.delete_client(acme.id) == 2
    assert database.get_client(acme.id) is None
    assert database.TimeEntry.select().count() == 0
    assert database.get_client(other.id) is not None


def test_delete_missing_client(db):
    with pytest.raises(NotFoundError):
        database.delete_client(404)


def test_compute_hours_and_earnings_rounds_to_cents():
    hours, earnings = database.compute_hours_and_earnings(at(DAY, "09:00"), at(DAY, "10:20"), Decimal("30"))
    assert hours == Decimal("1.33")
    assert earnings == Decimal("40.00")


def test_clock_in_and_out_stores_hours_and_earnings(acme):
    entry = database.create_time_entry(acme, clock_in=at(DAY, "09:00"))
    assert entry.is_open
    assert database.get_open_time_entry().id == entry.id

    closed = database.close_time_entry(entry.id, clock_out=at(DAY, "11:30"))
    stored = database.TimeEntry.get_by_id(closed.id)
    assert stored.clock_out == at(DAY, "11:30")
    assert stored.hours_worked == Decimal("2.50")
    assert stored.earnings == Decimal("125.00")
    assert database.get_open_time_entry() is None


def test_second_open_session_is_rejected(acme):
    other = database.create_client("Other", "10")
    database.create_time_entry(acme, clock_in=at(DAY, "09:00"))
    with pytest.raises(ConflictError):
        database.create_time_entry(other, clock_in=at(DAY, "09:30"))
    assert database.TimeEntry.select().count() == 1


def test_closing_twice_is_rejected(acme):
    entry = database.create_time_entry(acme, clock_in=at(DAY, "09:00"))
    database.close_time_entry(entry.id, clock_out=at(DAY, "10:00"))
    with pytest.raises(InvalidActionError):
        database.close_time_entry(entry.id, clock_out=at(DAY, "11:00"))


def test_clock_out_before_clock_in_is_rejected(acme):
    entry = database.create_time_entry(acme, clock_in=at(DAY, "09:00"))
    with pytest.raises(InvalidActionError):
        database.close_time_entry(entry.id, clock_out=at(DAY, "08:00"))
    assert database.TimeEntry.get_by_id(entry.id).is_open


def test_close_missing_entry(db):
    with pytest.raises(NotFoundError):
        database.close_time_entry(404)


def _add_session(client, day, start, end):
    entry = database.create_time_entry(client, clock_in=at(day, start))
    return database.close_time_entry(entry.id, clock_out=at(day, end))


def test_range_query_is_inclusive_and_ordered(acme):
    before = DAY - datetime.timedelta(days=1)
    last = DAY + datetime.timedelta(days=2)
    after = DAY + datetime.timedelta(days=3)
    _add_session(acme, after, "09:00", "10:00")
    _add_session(acme, last, "23:00", "23:30")
    _add_session(acme, DAY, "00:00", "01:00")
    _add_session(acme, before, "22:00", "23:00")

    entries = database.get_time_entries(acme.id, DAY, last)
    assert [e.clock_in for e in entries] == [at(DAY, "00:00"), at(last, "23:00")]


def test_range_query_is_per_client(acme):
    other = database.create_client("Other", "10")
    _add_session(acme, DAY, "09:00", "10:00")
    _add_session(other, DAY, "11:00", "12:00")
    assert len(database.get_time_entries(other, DAY, DAY)) == 1


def test_store_returns_snapshots(acme):
    _add_session(acme, DAY, "09:00", "12:00")
    database.create_time_entry(acme, clock_in=at(DAY, "13:00"))

    store = DatabaseStore()
    clients = store.list_clients()
    assert [(c.id, c.name, c.hourly_rate) for c in clients] == [(acme.id, "Acme & Co.", Decimal("50.00"))]

    entries = store.list_time_entries(acme.id, DAY, DAY)
    assert [e.is_completed for e in entries] == [True, False]
    assert entries[0].hours_worked == Decimal("3.00")
    assert entries[0].earnings == Decimal("150.00")
    assert entries[0].client_id == acme.id


def test_store_wraps_database_errors(acme):
    database.db.drop_tables([database.TimeEntry])
    with pytest.raises(FetchError):
        DatabaseStore().list_time_entries(acme.id, DAY, DAY)


def test_delete_client_wraps_database_failure(acme):
    database.db.drop_tables([database.TimeEntry])
    with pytest.raises(DatabaseError):
        database.delete_client(acme.id)
    assert database.get_client(acme.id) is not None


def test_update_client_wraps_database_failure(acme, monkeypatch):
    def broken_save(self, *args, **kwargs):
        raise peewee.OperationalError("disk I/O error")

    monkeypatch.setattr(database.Client, "save", broken_save)
    with pytest.raises(DatabaseError):
        database.update_client(acme.id, "Acme Ltd", "65")


def test_initialize_db_wraps_database_failure(db, monkeypatch):
    def broken_create_tables(*args, **kwargs):
        raise peewee.OperationalError("database is locked")

    monkeypatch.setattr(database.db, "create_tables", broken_create_tables)
    with pytest.raises(DatabaseError):
        database.initialize_db()
