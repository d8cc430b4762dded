import datetime
from decimal import Decimal

import pytest

from timely.data import database
from timely.services.clock_service import ClockService
from timely.utils.errors import ConflictError, InvalidActionError, NotFoundError

from .conftest import at

DAY = datetime.date(2024, 3, 4)


@pytest.fixture
def service():
    return ClockService()


def test_clock_in_then_out(acme, service):
    entry = service.clock_in(acme.id, at=at(DAY, "08:00"))
    assert service.current_entry().id == entry.id

    closed = service.clock_out(at=at(DAY, "12:15"))
    assert closed.id == entry.id
    assert closed.hours_worked == Decimal("4.25")
    assert closed.earnings == Decimal("212.50")
    assert service.current_entry() is None


def test_clock_in_unknown_client(db, service):
    with pytest.raises(NotFoundError):
        service.clock_in(404)


def test_clock_in_while_open(acme, service):
    service.clock_in(acme.id, at=at(DAY, "08:00"))
    with pytest.raises(ConflictError):
        service.clock_in(acme.id, at=at(DAY, "09:00"))


def test_clock_out_without_session(db, service):
    with pytest.raises(InvalidActionError, match="Not clocked in"):
        service.clock_out()


def test_toggle_alternates(acme, service):
    first = service.toggle(acme.id)
    assert first.success
    assert first.action == 'in'
    assert first.client.name == "Acme & Co."

    second = service.toggle(acme.id)
    assert second.success
    assert second.action == 'out'
    assert second.entry.clock_out is not None
    assert database.get_open_time_entry() is None


def test_toggle_reports_failure(db, service):
    result = service.toggle(404)
    assert not result.success
    assert result.client is None
    assert "not found" in result.error


def test_elapsed_uses_now_for_open_session(acme, service):
    entry = service.clock_in(acme.id, at=at(DAY, "08:00"))
    delta = ClockService.elapsed(entry, now=at(DAY, "09:30"))
    assert delta == datetime.timedelta(hours=1, minutes=30)


@pytest.mark.parametrize("delta, text", [
    (datetime.timedelta(0), "00:00:00"),
    (datetime.timedelta(hours=1, minutes=2, seconds=3), "01:02:03"),
    (datetime.timedelta(hours=27, seconds=59), "27:00:59"),
    (datetime.timedelta(seconds=-5), "00:00:00"),
])
def test_format_elapsed(delta, text):
    assert ClockService.format_elapsed(delta) == text
