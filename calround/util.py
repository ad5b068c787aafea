"""Constants shared by the calendar and rounding modules.

``SECOND``, ``MINUTE`` and ``HOUR`` are fixed elapsed-time steps. Longer
units vary in length with DST, month and leap year, so they are stepped
with ``dateutil.relativedelta`` and have no constant here.
"""

# Fixed-length units, in seconds
SECOND = 1
MINUTE = 60
HOUR = 3600

# First day of the week (day-of-week 1)
WEEK_START = "sunday"

# ISO weekday numbers, as returned by datetime.isoweekday()
ISO_WEEKDAYS = {
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
    "sunday": 7,
}
