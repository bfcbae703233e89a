"""Tests for the date/time helpers behind slot generation."""

from datetime import date, datetime

import pytest

from app.core.errors import ValidationError
from app.utils.timeutils import (
    combine_utc,
    format_instant,
    hhmm_to_minutes,
    minutes_to_hhmm,
    parse_date,
    parse_instant,
    parse_time_of_day,
    slot_minutes,
)


def test_parse_date():
    assert parse_date("2026-03-01") == date(2026, 3, 1)


@pytest.mark.parametrize("value", ["2026-3-1", "01.03.2026", "", "2026-02-30"])
def test_parse_date_rejects_bad_input(value):
    with pytest.raises(ValidationError):
        parse_date(value)


def test_parse_date_range_ends_before_last_calendar_day():
    assert parse_date("9999-12-30") == date(9999, 12, 30)
    with pytest.raises(ValidationError):
        parse_date("9999-12-31")


def test_hhmm_round_trip_pads():
    assert hhmm_to_minutes("9:30") == 570
    assert minutes_to_hhmm(570) == "09:30"


def test_end_of_day_only_when_allowed():
    assert hhmm_to_minutes("24:00", allow_end_of_day=True) == 24 * 60
    with pytest.raises(ValidationError):
        hhmm_to_minutes("24:00")
    with pytest.raises(ValidationError):
        hhmm_to_minutes("24:30", allow_end_of_day=True)


@pytest.mark.parametrize("value", ["9", "09:60", "ab:cd", "9h30"])
def test_hhmm_rejects_garbage(value):
    with pytest.raises(ValidationError):
        hhmm_to_minutes(value)


def test_parse_time_of_day_accepts_instants():
    assert parse_time_of_day("13:00") == "13:00"
    assert parse_time_of_day("2026-03-01T13:00:00Z") == "13:00"


def test_parse_instant_normalizes_to_naive_utc():
    expected = datetime(2026, 3, 1, 9, 0)
    assert parse_instant("2026-03-01T09:00:00Z") == expected
    assert parse_instant("2026-03-01T12:00:00+03:00") == expected
    assert parse_instant("2026-03-01T09:00:00.250") == expected


def test_parse_instant_rejects_garbage():
    with pytest.raises(ValidationError):
        parse_instant("tomorrow at nine")
    with pytest.raises(ValidationError):
        parse_instant("")


@pytest.mark.parametrize("value", ["9999-12-31T09:00:00Z", "9999-12-31T23:00:00-05:00", "0001-01-01T00:00:00+05:00"])
def test_parse_instant_rejects_out_of_range(value):
    with pytest.raises(ValidationError):
        parse_instant(value)


def test_format_instant():
    assert format_instant(datetime(2026, 3, 1, 9, 0)) == "2026-03-01T09:00:00Z"


def test_combine_utc():
    assert combine_utc(date(2026, 3, 1), 17 * 60 + 30) == datetime(2026, 3, 1, 17, 30)


def test_slot_minutes_has_no_trailing_partial_slot():
    # 09:00-10:00 in 90 minute steps only fits the 09:00 slot
    assert slot_minutes(540, 600, 90) == [540]
    assert slot_minutes(540, 1080, 30)[-1] == 1050
