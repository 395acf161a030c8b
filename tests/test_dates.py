from datetime import date, datetime, timedelta, timezone

import pytest

from ledger_normalizer import FormatError, format_date, parse_date, spread_installment_date


def test_parse_iso_with_offset_keeps_written_calendar_day():
    assert parse_date("2024-03-15T00:00:00+02:00") == date(2024, 3, 15)
    assert parse_date("2024-03-15T23:30:00-05:00") == date(2024, 3, 15)


def test_parse_plain_and_fallback_formats():
    assert parse_date("2024-03-15") == date(2024, 3, 15)
    assert parse_date("2024-03-15T10:30:00Z") == date(2024, 3, 15)
    assert parse_date("2024/03/15") == date(2024, 3, 15)
    assert parse_date("03/15/2024") == date(2024, 3, 15)
    assert parse_date("Mar 15, 2024") == date(2024, 3, 15)


def test_parse_accepts_date_objects():
    assert parse_date(date(2024, 1, 5)) == date(2024, 1, 5)
    dt = datetime(2024, 1, 5, 22, 0, tzinfo=timezone(timedelta(hours=3)))
    assert parse_date(dt) == date(2024, 1, 5)


@pytest.mark.parametrize("value", ["not-a-date", "", "   ", "2024-02-30", "2024-13-01", None])
def test_parse_returns_none_for_invalid(value):
    assert parse_date(value) is None


def test_format_date():
    assert format_date(date(2024, 3, 15)) == "2024-03-15"
    assert format_date("2024-03-15T10:30:00Z") == "2024-03-15"
    # Zero padding for single-digit months and days
    assert format_date(date(2024, 1, 5)) == "2024-01-05"


def test_format_date_raises_for_invalid():
    with pytest.raises(FormatError, match="Invalid date"):
        format_date("invalid")
    # FormatError is a ValueError for callers that catch broadly.
    with pytest.raises(ValueError):
        format_date("")


def test_spread_first_installment_keeps_date():
    assert spread_installment_date("2024-03-15", 1) == "2024-03-15"
    assert spread_installment_date("2024-03-15T00:00:00+02:00", 1) == "2024-03-15"


def test_spread_adds_one_day_per_installment():
    assert spread_installment_date("2024-03-15", 2) == "2024-03-16"
    assert spread_installment_date("2024-03-15", 3) == "2024-03-17"
    assert spread_installment_date("2024-03-15", 12) == "2024-03-26"


def test_spread_rolls_over_month_and_year():
    assert spread_installment_date("2024-03-30", 5) == "2024-04-03"
    assert spread_installment_date("2024-12-31", 2) == "2025-01-01"
    assert spread_installment_date("2024-02-28", 2) == "2024-02-29"


def test_spread_is_date_additive():
    for k in range(2, 40):
        prev = date.fromisoformat(spread_installment_date("2024-01-20", k - 1))
        cur = date.fromisoformat(spread_installment_date("2024-01-20", k))
        assert cur - prev == timedelta(days=1)


def test_spread_returns_input_for_invalid_date():
    assert spread_installment_date("invalid", 2) == "invalid"


def test_spread_returns_input_when_shift_passes_max_date():
    assert spread_installment_date("9999-12-31", 2) == "9999-12-31"
    assert spread_installment_date("9999-12-30", 2) == "9999-12-31"
