from datetime import UTC, date

from ledgerly.app.core.time import local_today, start_of_year, utc_now


def test_utc_now_is_timezone_aware_utc():
    value = utc_now()
    assert value.tzinfo is UTC


def test_start_of_year():
    assert start_of_year(date(2025, 11, 6)) == date(2025, 1, 1)
    assert isinstance(local_today(), date)
