"""Typed tokens produced by the filter grammar.

A filter expression such as ``"vim AND >2019-10"`` tokenizes into a flat,
ordered sequence of the variants below.  The compiler walks that sequence
left to right; there is no intermediate tree.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

_DAY = 86_400


class ComparatorKind(enum.Enum):
    GREATER_THAN = ">"
    LESS_THAN = "<"


class OperatorKind(enum.Enum):
    AND = "AND"
    OR = "OR"


class Granularity(enum.Enum):
    """Precision of a date literal."""

    YEAR = "year"
    YEAR_MONTH = "year_month"
    YEAR_MONTH_DAY = "year_month_day"


class DurationUnit(enum.Enum):
    """Relative duration units, keyed by their suffix letter.

    Months and years are fixed approximations (30 and 365 days), not
    calendar arithmetic.
    """

    HOUR = "h"
    DAY = "d"
    WEEK = "w"
    MONTH = "m"
    YEAR = "y"

    @property
    def seconds(self) -> int:
        return _UNIT_SECONDS[self]


_UNIT_SECONDS: dict[DurationUnit, int] = {
    DurationUnit.HOUR: 3_600,
    DurationUnit.DAY: _DAY,
    DurationUnit.WEEK: 7 * _DAY,
    DurationUnit.MONTH: 30 * _DAY,
    DurationUnit.YEAR: 365 * _DAY,
}


# ------------------------------------------------------------------
# Token variants
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Tag:
    """Inclusion constraint: documents carrying tag *name*."""

    name: str


@dataclass(frozen=True, slots=True)
class NotTag:
    """Exclusion constraint: documents not carrying tag *name*."""

    name: str


@dataclass(frozen=True, slots=True)
class Comparator:
    """Narrows the next date or duration to one side of its range."""

    kind: ComparatorKind


@dataclass(frozen=True, slots=True)
class DateLiteral:
    """An absolute date at year, year-month or year-month-day precision.

    Attributes:
        year: Four-digit year as written.
        month: Month as written, or ``None`` for year granularity.
        day: Day as written, or ``None`` unless day granularity.
        text: The literal exactly as it appeared in the input.
        position: Zero-based offset of the literal in the input.
    """

    year: int
    month: int | None = None
    day: int | None = None
    text: str = ""
    position: int = 0

    @property
    def granularity(self) -> Granularity:
        if self.month is None:
            return Granularity.YEAR
        if self.day is None:
            return Granularity.YEAR_MONTH
        return Granularity.YEAR_MONTH_DAY


@dataclass(frozen=True, slots=True)
class Duration:
    """A relative time span counted back from "now"."""

    amount: int
    unit: DurationUnit

    @property
    def seconds(self) -> int:
        return self.amount * self.unit.seconds


@dataclass(frozen=True, slots=True)
class Operator:
    kind: OperatorKind


@dataclass(frozen=True, slots=True)
class EndOfInput:
    """Terminal marker; compilation stops here."""


Token = Union[Tag, NotTag, Comparator, DateLiteral, Duration, Operator, EndOfInput]
