from datetime import date, datetime, time, timedelta, timezone

import pytest

from app.shared.validators import parse_time_of_day, validate_time_range
from app.utils.dates import DAY_NAMES, day_of_week, format_time_label, start_of_week, time_slot_labels

from conftest import MONDAY


def test_day_of_week_for_known_dates():
    assert day_of_week(MONDAY) == "Monday"
    assert day_of_week(date(2025, 1, 12)) == "Sunday"
    assert day_of_week(date(2024, 2, 29)) == "Thursday"


def test_day_of_week_covers_a_whole_week():
    names = [day_of_week(MONDAY + timedelta(days=i)) for i in range(7)]
    assert names == list(DAY_NAMES)


def test_day_of_week_is_stable():
    assert day_of_week(MONDAY) == day_of_week(MONDAY) == "Monday"


@pytest.mark.parametrize("offset", range(7))
def test_start_of_week_is_monday(offset):
    assert start_of_week(MONDAY + timedelta(days=offset)) == MONDAY


def test_start_of_week_accepts_datetimes():
    assert start_of_week(datetime(2025, 1, 8, 15, 30)) == MONDAY


def test_time_slot_labels():
    labels = time_slot_labels()
    assert len(labels) == 48
    assert labels[:3] == ["12:00 AM", "12:30 AM", "1:00 AM"]
    assert labels[24] == "12:00 PM"
    assert labels[-1] == "11:30 PM"


def test_format_time_label_strips_leading_zero():
    assert format_time_label(time(9, 0)) == "9:00 AM"
    assert format_time_label(time(21, 30)) == "9:30 PM"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("09:00", time(9, 0)),
        ("17:30:00", time(17, 30)),
        ("9:00 AM", time(9, 0)),
        ("12:00 AM", time(0, 0)),
        ("12:30 PM", time(12, 30)),
        ("4:45 pm", time(16, 45)),
        (time(8, 15), time(8, 15)),
        (None, None),
    ],
)
def test_parse_time_of_day(value, expected):
    assert parse_time_of_day(value) == expected


def test_every_slot_label_parses_back():
    parsed = [parse_time_of_day(label) for label in time_slot_labels()]
    assert parsed[0] == time(0, 0)
    assert parsed == sorted(parsed)
    assert len(set(parsed)) == 48


@pytest.mark.parametrize("value", ["", "noon", "13:00 PM", "0:30 AM", "9:75 AM", "25:00", 900])
def test_parse_time_of_day_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_time_of_day(value)


def test_validate_time_range():
    validate_time_range(time(9, 0), time(9, 30))
    with pytest.raises(ValueError, match="End time must be after start time."):
        validate_time_range(time(9, 0), time(9, 0))
    with pytest.raises(ValueError):
        validate_time_range(time(17, 0), time(9, 0))


@pytest.mark.parametrize("value", ["09:00+00:00", "17:00Z", "23:00+05:00", time(9, 0, tzinfo=timezone.utc)])
def test_times_with_utc_offset_are_rejected(value):
    with pytest.raises(ValueError):
        parse_time_of_day(value)


def test_utc_offset_error_message():
    with pytest.raises(ValueError, match="Time must not include a UTC offset"):
        parse_time_of_day("09:00+00:00")


@pytest.mark.parametrize(
    "value, label",
    [
        (time(0, 0), "12:00 AM"),
        (time(0, 30), "12:30 AM"),
        (time(11, 30), "11:30 AM"),
        (time(12, 0), "12:00 PM"),
        (time(23, 30), "11:30 PM"),
    ],
)
def test_slot_labels_use_fixed_meridiem(value, label):
    assert format_time_label(value) == label
    assert parse_time_of_day(label) == value
