"""Calendar component access for the rounding engines.

The engines never touch ``datetime`` fields directly. They work on a
*working* ``datetime`` obtained from ``Calendar.lift``, read and write its
calendar components through ``get``/``set``/``shift``, and hand the result
back through ``Calendar.reclassify`` so the caller gets the same kind of
value (``date`` or ``datetime``, same ``tzinfo``) they passed in.

Component setters are copy-on-write: every call returns a new value.
"""

import math
from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, Callable, Generic, Literal, TypeAlias, TypeVar

from dateutil.relativedelta import relativedelta
from typing_extensions import override

from calround.units import Unit
from calround.util import HOUR, ISO_WEEKDAYS, MINUTE, SECOND, WEEK_START

D = TypeVar("D", bound=date)

Component: TypeAlias = Literal[
    "year",
    "month",
    "week",
    "day_of_year",
    "day_of_month",
    "day_of_week",
    "hour",
    "minute",
    "second",
]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_NAIVE_EPOCH = datetime(1970, 1, 1)

# Components are applied most significant first, so that e.g. setting the
# month happens before pinning the day of month.
_SET_ORDER: tuple[Component, ...] = (
    "year",
    "month",
    "day_of_year",
    "week",
    "day_of_month",
    "day_of_week",
    "hour",
    "minute",
    "second",
)

# Units shorter than a day step by elapsed time, so the repeated hour on
# fall-back day is walked through rather than skipped or replayed.
_ELAPSED_STEPS: dict[Unit, timedelta] = {
    "second": timedelta(seconds=SECOND),
    "minute": timedelta(seconds=MINUTE),
    "hour": timedelta(seconds=HOUR),
}

_STEPS: dict[Unit, relativedelta] = {
    "second": relativedelta(seconds=1),
    "minute": relativedelta(minutes=1),
    "hour": relativedelta(hours=1),
    "day": relativedelta(days=1),
    "week": relativedelta(weeks=1),
    "month": relativedelta(months=1),
    "quarter": relativedelta(months=3),
    "year": relativedelta(years=1),
}


def _day_of_week(dt: datetime) -> int:
    # 1 = WEEK_START (Sunday) ... 7 = the day before it
    return (dt.isoweekday() - ISO_WEEKDAYS[WEEK_START]) % 7 + 1


def _week(dt: datetime) -> int:
    # Completed 7-day stretches since January 1st, plus one
    return (dt.timetuple().tm_yday - 1) // 7 + 1


_GETTERS: dict[Component, Callable[[datetime], int | float]] = {
    "year": lambda dt: dt.year,
    "month": lambda dt: dt.month,
    "week": _week,
    "day_of_year": lambda dt: dt.timetuple().tm_yday,
    "day_of_month": lambda dt: dt.day,
    "day_of_week": _day_of_week,
    "hour": lambda dt: dt.hour,
    "minute": lambda dt: dt.minute,
    "second": lambda dt: dt.second + dt.microsecond / 1_000_000,
}


class Calendar(ABC, Generic[D]):
    """Component accessors over a working ``datetime``.

    Subclasses decide how a user value becomes a working ``datetime``
    (``lift``) and how a computed result becomes a user value again
    (``reclassify``).
    """

    @abstractmethod
    def lift(self, x: D) -> datetime:
        """Return the working ``datetime`` for ``x``."""
        pass

    @abstractmethod
    def reclassify(self, value: datetime | timedelta, reference: D) -> D:
        """Re-wrap a computed value with the representation of ``reference``.

        ``value`` is either a working ``datetime`` or a raw instant as
        returned by ``instant``.
        """
        pass

    @abstractmethod
    def timezone_of(self, x: D) -> tzinfo | None:
        pass

    def instant(self, x: D) -> timedelta:
        """Absolute position of ``x`` as exact elapsed time since the epoch.

        Naive values are read as UTC wall time.
        """
        dt = self.lift(x)
        if dt.tzinfo is None:
            return dt - _NAIVE_EPOCH
        return dt - EPOCH

    def get(self, dt: datetime, component: Component) -> int | float:
        if component not in _GETTERS:
            raise ValueError(
                f"Unknown calendar component '{component}'.\n"
                f"Valid components: {', '.join(_SET_ORDER)}"
            )
        return _GETTERS[component](dt)

    def set(self, dt: datetime, **components: int | float) -> datetime:
        """Return a copy of ``dt`` with the given components replaced.

        Out-of-range values roll over into the next larger component, so
        ``set(dt, second=60)`` lands on the next minute and
        ``set(dt, day_of_year=366)`` on January 1st in a common year.
        """
        unknown = set(components) - set(_SET_ORDER)
        if unknown:
            raise ValueError(
                f"Unknown calendar component(s): {', '.join(sorted(unknown))}\n"
                f"Valid components: {', '.join(_SET_ORDER)}"
            )

        # Arithmetic drops fold; keep the input's so repeated DST hours stay put
        fold = dt.fold
        for component in _SET_ORDER:
            if component not in components:
                continue
            value = components[component]
            if component == "year":
                dt = dt + relativedelta(year=int(value))
            elif component == "month":
                dt = dt + relativedelta(month=1, months=int(value) - 1)
            elif component == "day_of_year":
                dt = dt.replace(month=1, day=1) + timedelta(days=int(value) - 1)
            elif component == "week":
                dt = dt + timedelta(weeks=int(value) - _week(dt))
            elif component == "day_of_month":
                dt = dt.replace(day=1) + timedelta(days=int(value) - 1)
            elif component == "day_of_week":
                dt = dt + timedelta(days=int(value) - _day_of_week(dt))
            elif component == "hour":
                dt = dt.replace(hour=0) + timedelta(hours=int(value))
            elif component == "minute":
                dt = dt.replace(minute=0) + timedelta(minutes=int(value))
            else:
                whole = math.floor(value)
                micros = round((value - whole) * 1_000_000)
                dt = dt.replace(second=0, microsecond=0) + timedelta(
                    seconds=whole, microseconds=micros
                )
        return dt.replace(fold=fold)

    def shift(self, dt: datetime, unit: Unit, n: int = 1) -> datetime:
        """Advance ``dt`` by ``n`` units.

        Seconds, minutes and hours are elapsed time. Days and longer are
        calendar (wall-clock) steps, so a day after midnight is midnight
        even across a DST change.
        """
        if unit in _ELAPSED_STEPS and dt.tzinfo is not None:
            moved = dt.astimezone(timezone.utc) + _ELAPSED_STEPS[unit] * n
            return moved.astimezone(dt.tzinfo)
        return dt + _STEPS[unit] * n

    def subtract_seconds(self, dt: datetime, seconds: float) -> datetime:
        """Move ``dt`` back by elapsed time, independent of DST shifts."""
        delta = timedelta(seconds=seconds)
        if dt.tzinfo is None:
            return dt - delta
        return (dt.astimezone(timezone.utc) - delta).astimezone(dt.tzinfo)


class DateTimeCalendar(Calendar[datetime]):
    """Calendar for ``datetime`` values, naive or timezone-aware."""

    @override
    def lift(self, x: datetime) -> datetime:
        return x

    @override
    def reclassify(self, value: datetime | timedelta, reference: datetime) -> datetime:
        zone = reference.tzinfo
        if isinstance(value, timedelta):
            if zone is None:
                return _NAIVE_EPOCH + value
            return (EPOCH + value).astimezone(zone)
        if zone is None:
            return value
        # Round-trip through UTC so wall times in a DST gap come back valid
        return value.astimezone(timezone.utc).astimezone(zone)

    @override
    def timezone_of(self, x: datetime) -> tzinfo | None:
        return x.tzinfo


class DateCalendar(Calendar[date]):
    """Calendar for plain ``date`` values, treated as midnight."""

    @override
    def lift(self, x: date) -> datetime:
        return datetime.combine(x, time.min)

    @override
    def reclassify(self, value: datetime | timedelta, reference: date) -> date:
        if isinstance(value, timedelta):
            value = _NAIVE_EPOCH + value
        return value.date()

    @override
    def timezone_of(self, x: date) -> tzinfo | None:
        return None


_DATETIME_CALENDAR = DateTimeCalendar()
_DATE_CALENDAR = DateCalendar()


def calendar_for(x: Any) -> Calendar[Any]:
    """Return the calendar that handles values like ``x``.

    Raises:
        TypeError: If ``x`` is neither a ``datetime`` nor a ``date``.
    """
    # datetime is a subclass of date, so check it first
    if isinstance(x, datetime):
        return _DATETIME_CALENDAR
    if isinstance(x, date):
        return _DATE_CALENDAR
    raise TypeError(
        f"Expected a datetime or date, got {type(x).__name__!r}: {x!r}\n"
        f"Hint: build values with the datetime module, e.g.\n"
        f"  datetime(2009, 8, 3, 12, 1, 59, tzinfo=ZoneInfo('US/Central'))\n"
        f"  date(2009, 8, 3)"
    )
