"""Floor, ceiling and round for date-times, by calendar unit.

Each function accepts a single ``datetime``/``date`` or a sequence of them
and returns the same shape. Results keep the input's type and ``tzinfo``.

By convention the boundary of a period is its first instant: the boundary
of a month is the first second of the month, the boundary of a week is
Sunday 00:00, and quarters start in January, April, July and October.

Example:
    >>> from datetime import datetime
    >>> x = datetime(2009, 8, 3, 12, 1, 59, 230000)
    >>> floor_date(x, "month")
    datetime.datetime(2009, 8, 1, 0, 0)
    >>> ceiling_date(x, "hour")
    datetime.datetime(2009, 8, 3, 13, 0)
    >>> round_date(x, "minute")
    datetime.datetime(2009, 8, 3, 12, 2)
"""

import math
from collections.abc import Iterable
from datetime import date, datetime
from functools import wraps
from typing import Any, Callable, TypeVar

from calround.calendar import Calendar, calendar_for
from calround.units import Unit, match_unit
from calround.util import SECOND

T = TypeVar("T", bound=date)

_MIDNIGHT = {"hour": 0, "minute": 0, "second": 0}

# Components to reset for each unit, given the working datetime
_FLOOR_RULES: dict[Unit, Callable[[Calendar[Any], datetime], dict[str, int]]] = {
    "second": lambda cal, dt: {"second": math.floor(cal.get(dt, "second"))},
    "minute": lambda cal, dt: {"second": 0},
    "hour": lambda cal, dt: {"minute": 0, "second": 0},
    "day": lambda cal, dt: _MIDNIGHT,
    "week": lambda cal, dt: {"day_of_week": 1, **_MIDNIGHT},
    "month": lambda cal, dt: {"day_of_month": 1, **_MIDNIGHT},
    "quarter": lambda cal, dt: {
        "month": (int(cal.get(dt, "month")) - 1) // 3 * 3 + 1,
        "day_of_month": 1,
        **_MIDNIGHT,
    },
    "year": lambda cal, dt: {"day_of_year": 1, **_MIDNIGHT},
}


def _floor(cal: Calendar[Any], dt: datetime, unit: Unit) -> datetime:
    return cal.set(dt, **_FLOOR_RULES[unit](cal, dt))


def _ceil_second(cal: Calendar[Any], dt: datetime) -> datetime:
    whole = _floor(cal, dt, "second")
    if cal.get(whole, "second") == cal.get(dt, "second"):
        return whole
    return cal.shift(whole, "second", 1)


def _floor_one(x: T, unit: Unit) -> T:
    cal = calendar_for(x)
    return cal.reclassify(_floor(cal, cal.lift(x), unit), x)


def _ceiling_one(x: T, unit: Unit) -> T:
    cal = calendar_for(x)
    whole = _ceil_second(cal, cal.lift(x))
    if unit == "second":
        return cal.reclassify(whole, x)

    # Stepping back one second pushes a value sitting on a boundary into the
    # previous period, so advancing one unit lands back on it.
    start = _floor(cal, cal.subtract_seconds(whole, SECOND), unit)
    return cal.reclassify(cal.shift(start, unit, 1), x)


def _round_one(x: T, unit: Unit) -> T:
    cal = calendar_for(x)
    above = cal.instant(_ceiling_one(x, unit))
    mid = cal.instant(x)
    below = cal.instant(_floor_one(x, unit))

    # Strict comparison: ties resolve to the floor
    chosen = above if (above - mid) < (mid - below) else below
    return cal.reclassify(chosen, x)


def _elementwise(
    func: Callable[[Any, Unit], Any],
) -> Callable[..., Any]:
    """Lift a single-value rounding function to scalars and sequences.

    The unit is validated before any value is looked at. Empty sequences
    come back as the very same object.
    """

    @wraps(func)
    def wrapper(x: Any, unit: str = "second") -> Any:
        resolved = match_unit(unit)
        if isinstance(x, date):
            return func(x, resolved)
        if isinstance(x, (str, bytes)) or not isinstance(x, Iterable):
            raise TypeError(
                f"Expected a datetime, a date, or a sequence of them.\n"
                f"Got {type(x).__name__!r}: {x!r}"
            )
        if isinstance(x, (list, tuple)) and not x:
            return x

        results = [func(value, resolved) for value in x]
        if isinstance(x, tuple):
            return tuple(results)
        return results

    return wrapper


@_elementwise
def floor_date(x: T, unit: Unit) -> T:
    """Round date-times down to the start of their ``unit`` period.

    Units: "second", "minute", "hour", "day", "week", "month", "quarter",
    "year". Unambiguous prefixes ("min", "q") are accepted.

    Example:
        >>> x = datetime(2009, 8, 3, 12, 1, 59, 230000)
        >>> floor_date(x, "week")   # weeks start on Sunday
        datetime.datetime(2009, 8, 2, 0, 0)
        >>> floor_date(x, "quarter")
        datetime.datetime(2009, 7, 1, 0, 0)
    """
    return _floor_one(x, unit)


@_elementwise
def ceiling_date(x: T, unit: Unit) -> T:
    """Round date-times up to the earliest ``unit`` boundary at or after them.

    A value already on a boundary is returned unchanged.

    Example:
        >>> x = datetime(2009, 8, 3, 12, 1, 59, 230000)
        >>> ceiling_date(x, "second")
        datetime.datetime(2009, 8, 3, 12, 2)
        >>> ceiling_date(x, "month")
        datetime.datetime(2009, 9, 1, 0, 0)
    """
    return _ceiling_one(x, unit)


@_elementwise
def round_date(x: T, unit: Unit) -> T:
    """Round date-times to the nearer of their floor and ceiling.

    An exact tie rounds down.

    Example:
        >>> x = datetime(2009, 8, 3, 12, 1, 59, 230000)
        >>> round_date(x, "day")
        datetime.datetime(2009, 8, 4, 0, 0)
        >>> round_date(x, "year")
        datetime.datetime(2010, 1, 1, 0, 0)
    """
    return _round_one(x, unit)
