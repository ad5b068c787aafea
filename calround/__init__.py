from importlib.resources import files

from .calendar import Calendar, DateCalendar, DateTimeCalendar, calendar_for
from .rounding import ceiling_date, floor_date, round_date
from .units import (
    SPEC_UNITS,
    UNITS,
    InvalidUnitError,
    InvalidUnitSpecFormatError,
    Unit,
    UnitSpec,
    match_unit,
    parse_unit_spec,
)

# Load documentation files for programmatic access by agents and code-aware tools
_docs_path = files(__package__) / "docs"
docs = {
    "readme": (_docs_path / "README.md").read_text(),
    "api": (_docs_path / "API.md").read_text(),
}

__all__ = [
    "floor_date",
    "ceiling_date",
    "round_date",
    "parse_unit_spec",
    "match_unit",
    "Unit",
    "UnitSpec",
    "UNITS",
    "SPEC_UNITS",
    "InvalidUnitError",
    "InvalidUnitSpecFormatError",
    "Calendar",
    "DateCalendar",
    "DateTimeCalendar",
    "calendar_for",
    "docs",
]
