import datetime
from decimal import Decimal

import pytest

from timely.data.records import TimeEntry
from timely.services.report_service import (
    PLACEHOLDER_TIME, TimesheetReport, enumerate_dates, generate_timesheet_report,
    group_entries_by_date, summarize_day,
)

from .conftest import make_entry

MONDAY = datetime.date(2024, 3, 4)


def test_enumerate_dates_is_inclusive():
    days = enumerate_dates(datetime.date(2024, 2, 27), datetime.date(2024, 3, 2))
    assert days == [
        datetime.date(2024, 2, 27),
        datetime.date(2024, 2, 28),
        datetime.date(2024, 2, 29),
        datetime.date(2024, 3, 1),
        datetime.date(2024, 3, 2),
    ]


def test_enumerate_single_day():
    assert enumerate_dates(MONDAY, MONDAY) == [MONDAY]


def test_group_entries_by_clock_in_date():
    tuesday = MONDAY + datetime.timedelta(days=1)
    entries = [
        make_entry(1, MONDAY, "09:00", "12:00"),
        make_entry(2, MONDAY, "13:00", "17:00"),
        make_entry(3, tuesday, "08:00", "10:00"),
    ]
    grouped = group_entries_by_date(entries)
    assert [e.id for e in grouped[MONDAY]] == [1, 2]
    assert [e.id for e in grouped[tuesday]] == [3]


def test_group_converts_aware_timestamps_to_local_date():
    aware = datetime.datetime(2024, 3, 4, 12, 0, tzinfo=datetime.timezone.utc)
    entry = TimeEntry(id=1, client_id=1, clock_in=aware)
    grouped = group_entries_by_date([entry])
    assert list(grouped) == [aware.astimezone().date()]


def test_two_sessions_sum_hours_not_span():
    day = summarize_day(MONDAY, [
        make_entry(1, MONDAY, "09:00", "12:00"),
        make_entry(2, MONDAY, "13:00", "17:00"),
    ])
    assert day.clock_in_text() == "09:00"
    assert day.clock_out_text() == "17:00"
    assert day.hours == Decimal("7.00")
    assert day.earnings == Decimal("350.00")
    assert day.entry_count == 2


def test_span_uses_earliest_in_and_latest_out_regardless_of_order():
    day = summarize_day(MONDAY, [
        make_entry(2, MONDAY, "13:00", "15:00"),
        make_entry(1, MONDAY, "08:30", "11:00"),
    ])
    assert day.clock_in_text() == "08:30"
    assert day.clock_out_text() == "15:00"


def test_day_without_entries_is_placeholder_row():
    day = summarize_day(MONDAY, [])
    assert not day.has_activity
    assert day.clock_in_text() == PLACEHOLDER_TIME
    assert day.clock_out_text() == PLACEHOLDER_TIME
    assert day.hours == Decimal("0.00")
    assert day.earnings == Decimal("0.00")


def test_open_session_is_left_out_of_the_day():
    day = summarize_day(MONDAY, [
        make_entry(1, MONDAY, "09:00", "11:00"),
        make_entry(2, MONDAY, "14:00"),
    ])
    assert day.hours == Decimal("2.00")
    assert day.clock_out_text() == "11:00"
    assert day.entry_count == 1


def test_day_with_only_open_session_has_no_activity():
    day = summarize_day(MONDAY, [make_entry(1, MONDAY, "09:00")])
    assert not day.has_activity
    assert day.hours == Decimal("0.00")


def test_zero_length_completed_session_still_counts():
    day = summarize_day(MONDAY, [make_entry(1, MONDAY, "09:00", "09:00")])
    assert day.has_activity
    assert day.clock_in_text() == "09:00"
    assert day.hours == Decimal("0.00")


@pytest.mark.parametrize("days", [1, 7, 31, 90])
def test_one_row_per_calendar_day(client_record, days):
    end = MONDAY + datetime.timedelta(days=days - 1)
    entries = [make_entry(1, MONDAY, "09:00", "10:00")]
    report = generate_timesheet_report(client_record, MONDAY, end, entries)
    assert len(report.rows) == days
    assert [row.date for row in report.rows] == enumerate_dates(MONDAY, end)


def test_totals_equal_sum_of_rows(client_record):
    entries = [
        make_entry(1, MONDAY, "09:00", "12:00"),
        make_entry(2, MONDAY, "13:00", "17:20"),
        make_entry(3, MONDAY + datetime.timedelta(days=2), "10:10", "11:55"),
        make_entry(4, MONDAY + datetime.timedelta(days=4), "07:45", "16:05"),
    ]
    report = generate_timesheet_report(client_record, MONDAY, MONDAY + datetime.timedelta(days=6), entries)
    assert report.total_hours == sum(row.hours for row in report.rows)
    assert report.total_earnings == sum(row.earnings for row in report.rows)
    assert report.days_worked == 3


def test_generate_twice_does_not_accumulate(client_record):
    report = TimesheetReport(client_record, MONDAY, MONDAY, [make_entry(1, MONDAY, "09:00", "10:00")])
    report.generate()
    report.generate()
    assert len(report.rows) == 1
    assert report.total_hours == Decimal("1.00")


def test_to_text_lists_every_day_and_totals(client_record):
    entries = [make_entry(1, MONDAY, "09:00", "12:00"), make_entry(2, MONDAY, "13:00", "17:00")]
    report = generate_timesheet_report(client_record, MONDAY, MONDAY + datetime.timedelta(days=2), entries)
    text = report.to_text()
    assert "Client: Acme & Co." in text
    assert "2024-03-04" in text and "2024-03-06" in text
    assert "TOTALS: 7.00 hours, $350.00" in text
    assert "Days Worked: 1" in text
