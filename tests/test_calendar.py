"""Tests for calendar component access."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from calround import DateCalendar, DateTimeCalendar, calendar_for
from calround.calendar import EPOCH

CENTRAL = ZoneInfo("America/Chicago")
X = datetime(2009, 8, 3, 12, 1, 59, 230000, tzinfo=CENTRAL)


@pytest.fixture
def cal() -> DateTimeCalendar:
    return DateTimeCalendar()


def test_get_components(cal):
    """Test reading every component of a Monday in August."""
    assert cal.get(X, "year") == 2009
    assert cal.get(X, "month") == 8
    assert cal.get(X, "day_of_month") == 3
    assert cal.get(X, "day_of_week") == 2  # Sunday is 1
    assert cal.get(X, "day_of_year") == 215
    assert cal.get(X, "week") == 31
    assert cal.get(X, "hour") == 12
    assert cal.get(X, "minute") == 1
    assert cal.get(X, "second") == pytest.approx(59.23)


def test_set_returns_new_value(cal):
    """Test that set leaves its input untouched."""
    result = cal.set(X, hour=0, minute=0, second=0)

    assert result == datetime(2009, 8, 3, tzinfo=CENTRAL)
    assert X.hour == 12


def test_set_rolls_over(cal):
    """Test that out-of-range values carry into larger components."""
    assert cal.set(X, second=60) == datetime(2009, 8, 3, 12, 2, tzinfo=CENTRAL)
    assert cal.set(datetime(2009, 5, 5), day_of_year=366) == datetime(2010, 1, 1, 0, 0)
    assert cal.set(datetime(2009, 5, 5), month=13) == datetime(2010, 1, 5)


def test_set_month_clamps_day(cal):
    """Test that moving Jan 31st to February lands on the last day."""
    assert cal.set(datetime(2009, 1, 31), month=2) == datetime(2009, 2, 28)


def test_set_applies_larger_components_first(cal):
    """Test that month is set before day of month regardless of kwarg order."""
    result = cal.set(datetime(2009, 8, 31), day_of_month=1, month=7)

    assert result == datetime(2009, 7, 1)


def test_set_fractional_second(cal):
    """Test that a float second sets microseconds."""
    result = cal.set(datetime(2009, 8, 3), second=1.5)

    assert result == datetime(2009, 8, 3, 0, 0, 1, 500000)


def test_set_week_and_day_of_week(cal):
    """Test moving by week index and within a Sunday-start week."""
    monday = datetime(2009, 8, 3)

    assert cal.set(monday, day_of_week=1) == datetime(2009, 8, 2)
    assert cal.set(monday, day_of_week=7) == datetime(2009, 8, 8)
    assert cal.set(monday, week=32) == datetime(2009, 8, 10)


def test_unknown_component_raises(cal):
    """Test that unknown component names are rejected."""
    with pytest.raises(ValueError, match="fortnight"):
        cal.get(X, "fortnight")  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="fortnight"):
        cal.set(X, fortnight=1)


def test_shift_uses_calendar_arithmetic(cal):
    """Test that shift steps by calendar units, not fixed seconds."""
    assert cal.shift(datetime(2009, 1, 31), "month") == datetime(2009, 2, 28)
    assert cal.shift(datetime(2009, 11, 1), "quarter") == datetime(2010, 2, 1)
    assert cal.shift(datetime(2012, 2, 29), "year") == datetime(2013, 2, 28)
    assert cal.shift(datetime(2009, 8, 2), "week", 2) == datetime(2009, 8, 16)


def test_shift_short_units_use_elapsed_time(cal):
    """Test that minute and hour steps keep fold through the repeated hour."""
    second_pass = datetime(2009, 11, 1, 1, 0, fold=1, tzinfo=CENTRAL)  # 07:00Z
    first_pass = datetime(2009, 11, 1, 1, 59, tzinfo=CENTRAL)  # 06:59Z

    after_minute = cal.shift(second_pass, "minute")
    after_hour = cal.shift(first_pass, "hour")

    assert after_minute.astimezone(timezone.utc) == datetime(
        2009, 11, 1, 7, 1, tzinfo=timezone.utc
    )
    assert after_hour.astimezone(timezone.utc) == datetime(
        2009, 11, 1, 7, 59, tzinfo=timezone.utc
    )
    assert after_hour.fold == 1
    assert after_hour.tzinfo is CENTRAL


def test_shift_day_keeps_wall_clock_across_dst(cal):
    """Test that a day step from midnight lands on midnight after DST starts."""
    result = cal.shift(datetime(2009, 3, 8, tzinfo=CENTRAL), "day")

    assert (result.day, result.hour) == (9, 0)
    assert result.utcoffset() == timedelta(hours=-5)


def test_reclassify_normalizes_gap_wall_time(cal):
    """Test that a nonexistent wall time is returned as a real one."""
    eastern = ZoneInfo("America/New_York")
    missing = datetime(2021, 3, 14, 2, 0, tzinfo=eastern)

    result = cal.reclassify(missing, missing)

    assert (result.hour, result.minute) == (3, 0)
    assert result.utcoffset() == timedelta(hours=-4)
    assert result.tzinfo is eastern


def test_subtract_seconds_uses_elapsed_time(cal):
    """Test subtraction across the spring-forward gap."""
    after_gap = datetime(2009, 3, 8, 3, 0, tzinfo=CENTRAL)

    result = cal.subtract_seconds(after_gap, 1)

    assert (result.hour, result.minute, result.second) == (1, 59, 59)
    assert result.utcoffset() == timedelta(hours=-6)
    assert result.tzinfo is CENTRAL


def test_instant_and_reclassify(cal):
    """Test converting to a raw instant and back."""
    assert cal.instant(EPOCH) == timedelta(0)
    assert cal.instant(datetime(1970, 1, 2)) == timedelta(days=1)

    raw = cal.instant(X)
    back = cal.reclassify(raw, X)

    assert back == X
    assert back.tzinfo is CENTRAL
    assert cal.reclassify(raw, X.replace(tzinfo=None)).tzinfo is None


def test_reclassify_datetime_moves_to_reference_zone(cal):
    """Test that a computed datetime takes on the reference tzinfo."""
    utc_value = datetime(2009, 8, 3, 17, 0, tzinfo=timezone.utc)

    result = cal.reclassify(utc_value, X)

    assert result.tzinfo is CENTRAL
    assert result.hour == 12


def test_timezone_of():
    """Test reporting tzinfo for each value kind."""
    assert calendar_for(X).timezone_of(X) is CENTRAL
    assert calendar_for(datetime(2009, 8, 3)).timezone_of(datetime(2009, 8, 3)) is None
    assert calendar_for(date(2009, 8, 3)).timezone_of(date(2009, 8, 3)) is None


def test_date_calendar_round_trip():
    """Test that dates are lifted to midnight and come back as dates."""
    cal = DateCalendar()
    d = date(2009, 8, 3)

    assert cal.lift(d) == datetime(2009, 8, 3)
    assert cal.reclassify(datetime(2009, 8, 1, 0, 0), d) == date(2009, 8, 1)
    assert cal.reclassify(cal.instant(d), d) == d


def test_calendar_for_dispatch():
    """Test that datetimes and dates get different calendars."""
    assert isinstance(calendar_for(X), DateTimeCalendar)
    assert isinstance(calendar_for(date(2009, 8, 3)), DateCalendar)

    with pytest.raises(TypeError, match="Expected a datetime or date"):
        calendar_for("2009-08-03")
