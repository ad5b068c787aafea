"""Time units and the unit-spec parser.

Rounding functions accept any unit in ``UNITS``. The parser accepts the
smaller ``SPEC_UNITS`` set, which has no ``quarter``.
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal, TypeAlias

logger = logging.getLogger(__name__)

Unit: TypeAlias = Literal[
    "second", "minute", "hour", "day", "week", "month", "quarter", "year"
]

UNITS: tuple[Unit, ...] = (
    "second",
    "minute",
    "hour",
    "day",
    "week",
    "month",
    "quarter",
    "year",
)

SPEC_UNITS: tuple[Unit, ...] = (
    "second",
    "minute",
    "hour",
    "day",
    "week",
    "month",
    "year",
)


class InvalidUnitError(ValueError):
    """Raised when a unit name does not match any accepted unit."""


class InvalidUnitSpecFormatError(ValueError):
    """Raised when a unit spec string is malformed."""


def match_unit(unit: str, choices: Sequence[Unit] = UNITS) -> Unit:
    """Resolve ``unit`` against ``choices``.

    Matching is case-insensitive. An exact match wins; otherwise a prefix
    that selects exactly one choice is accepted ("min" -> "minute").

    Raises:
        InvalidUnitError: If nothing matches or the prefix is ambiguous.
    """
    if not isinstance(unit, str):
        raise InvalidUnitError(
            f"Unit must be a string, got {type(unit).__name__!r}: {unit!r}\n"
            f"Valid units: {', '.join(choices)}"
        )

    name = unit.lower()
    if name in choices:
        return name  # type: ignore[return-value]

    candidates = [choice for choice in choices if name and choice.startswith(name)]
    if len(candidates) == 1:
        logger.debug("Resolved unit prefix %r to %r", unit, candidates[0])
        return candidates[0]

    if len(candidates) > 1:
        raise InvalidUnitError(
            f"Ambiguous unit '{unit}' matches: {', '.join(candidates)}\n"
            f"Hint: spell out more of the name, e.g. '{candidates[0]}'"
        )
    raise InvalidUnitError(
        f"Invalid unit '{unit}'. Valid units: {', '.join(choices)}"
    )


@dataclass(frozen=True, kw_only=True)
class UnitSpec:
    unit: Unit
    multiplier: int | float = 1

    def __post_init__(self) -> None:
        if self.unit not in SPEC_UNITS:
            raise InvalidUnitError(
                f"Invalid unit '{self.unit}'. Valid units: {', '.join(SPEC_UNITS)}"
            )
        if not math.isfinite(self.multiplier) or self.multiplier <= 0:
            raise InvalidUnitSpecFormatError(
                f"Multiplier must be a positive number, got {self.multiplier!r}"
            )

    def __str__(self) -> str:
        """Human-friendly form, e.g. '2 months'."""
        if self.multiplier == 1:
            return self.unit
        return f"{self.multiplier:g} {self.unit}s"


def _parse_multiplier(token: str, spec: str) -> int | float:
    try:
        return int(token)
    except ValueError:
        pass
    try:
        return float(token)
    except ValueError:
        raise InvalidUnitSpecFormatError(
            f"Multiplier '{token}' in unit spec '{spec}' is not a number.\n"
            f"Examples: '2 months', '15 minutes', 'hour'"
        ) from None


def parse_unit_spec(spec: str) -> UnitSpec:
    """Parse a unit spec such as ``"2 months"`` or ``"hour"``.

    A single token is a unit name with multiplier 1. Two tokens are a
    multiplier followed by a unit name. One trailing "s" is stripped from
    the name, so plurals work.

    Example:
        >>> parse_unit_spec("2 months")
        UnitSpec(unit='month', multiplier=2)
        >>> parse_unit_spec("hour")
        UnitSpec(unit='hour', multiplier=1)

    Raises:
        InvalidUnitSpecFormatError: Non-numeric multiplier or too many tokens.
        InvalidUnitError: The unit name is not one of ``SPEC_UNITS``.
    """
    parts = spec.split(" ")
    if len(parts) == 1:
        multiplier: int | float = 1
        name = parts[0]
    elif len(parts) == 2:
        multiplier = _parse_multiplier(parts[0], spec)
        name = parts[1]
    else:
        raise InvalidUnitSpecFormatError(
            f"Unit spec '{spec}' must be '<unit>' or '<multiplier> <unit>', "
            f"separated by a single space.\n"
            f"Examples: '2 months', '15 minutes', 'hour'"
        )

    # Only a lowercase plural "s" is stripped; "HOURS" stays unmatched
    if name.endswith("s"):
        name = name[:-1]

    parsed = UnitSpec(unit=match_unit(name, SPEC_UNITS), multiplier=multiplier)
    logger.debug("Parsed unit spec %r as %r", spec, parsed)
    return parsed
