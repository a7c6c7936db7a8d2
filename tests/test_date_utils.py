from datetime import date, datetime

from wizard.date_utils import default_date, default_order_expiry, to_calendar_date


def test_to_calendar_date_normalises_inputs() -> None:
    assert to_calendar_date("1990-05-01") == "1990-05-01"
    assert to_calendar_date("1990-05-01T23:30:00-05:00") == "1990-05-02"
    assert to_calendar_date("1990-05-01T10:00:00Z") == "1990-05-01"
    assert to_calendar_date(date(1990, 5, 1)) == "1990-05-01"
    assert to_calendar_date("") == ""
    assert to_calendar_date("not a date") == ""
    assert to_calendar_date(None) == ""


def test_default_order_expiry_format() -> None:
    assert default_order_expiry(datetime(2026, 12, 28, 8, 5), 10) == "2027-01-07T08:05"


def test_default_date_parses_iso_strings() -> None:
    assert default_date("1990-05-01") == date(1990, 5, 1)
    assert default_date("", fallback=None) is None
    assert default_date("garbage", fallback=date(2000, 1, 1)) == date(2000, 1, 1)
