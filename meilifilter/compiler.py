"""Compile filter expressions into backend filter strings.

The compiler makes a single left-to-right pass over the token sequence
produced by :mod:`meilifilter.grammar`, carrying one piece of state: the
comparator waiting for the next date or duration.  Output atoms use the
search backend's filter syntax verbatim::

    tags = vim
    tags != draft
    date > 1569888000
    date < 1570319999

joined by literal ``" AND "`` / ``" OR "``.
"""

from __future__ import annotations

import calendar
import functools
import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timezone

from meilifilter.errors import FilterDateError
from meilifilter.grammar import tokenize, tokenize_or_raise
from meilifilter.tokens import (
    Comparator,
    ComparatorKind,
    DateLiteral,
    Duration,
    EndOfInput,
    NotTag,
    Operator,
    OperatorKind,
    Tag,
    Token,
)

logger = logging.getLogger(__name__)

_DAY_START = time(0, 0, 0)
_DAY_END = time(23, 59, 59)

_OPERATOR_TEXT: dict[OperatorKind, str] = {
    OperatorKind.AND: " AND ",
    OperatorKind.OR: " OR ",
}


# ------------------------------------------------------------------
# Date / duration resolution
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive UTC range covered by a date literal."""

    start: datetime
    end: datetime

    @property
    def start_epoch(self) -> int:
        return _epoch(self.start)

    @property
    def end_epoch(self) -> int:
        return _epoch(self.end)


def _epoch(moment: datetime) -> int:
    """Whole UTC epoch seconds for *moment*; naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return math.floor(moment.timestamp())


def _utc(day: date, at: time) -> datetime:
    return datetime.combine(day, at, tzinfo=timezone.utc)


def resolve_date(token: DateLiteral) -> DateRange:
    """Resolve a date literal to the range of instants it covers.

    * ``YYYY`` covers Jan 1 00:00:00 through Dec 31 23:59:59.
    * ``YYYY-MM`` covers the 1st 00:00:00 through the last day of the
      month 23:59:59.
    * ``YYYY-MM-DD`` covers that day, 00:00:00 through 23:59:59.

    Raises:
        FilterDateError: If the literal is not a real calendar date.
    """
    first_month = 1 if token.month is None else token.month
    try:
        if token.day is not None:
            first = last = date(token.year, first_month, token.day)
        else:
            first = date(token.year, first_month, 1)
            last_month = 12 if token.month is None else token.month
            _, days_in_month = calendar.monthrange(token.year, last_month)
            last = date(token.year, last_month, days_in_month)
    except ValueError as exc:
        raise FilterDateError(token.text, token.position, str(exc)) from exc

    return DateRange(start=_utc(first, _DAY_START), end=_utc(last, _DAY_END))


def resolve_duration(token: Duration, now: datetime) -> int:
    """Return the epoch second lying *token* before *now*.

    A day is always 86400 seconds; months and years use the fixed
    30- and 365-day approximations of :class:`DurationUnit`.
    """
    return _epoch(now) - token.seconds


# ------------------------------------------------------------------
# Compilation
# ------------------------------------------------------------------


def _bound(comparator: ComparatorKind, value: int) -> str:
    return f"date {comparator.value} {value}"


def compile_tokens(tokens: Iterable[Token], *, now: datetime) -> str:
    """Fold *tokens* into a backend filter string.

    Parameters:
        tokens: Tokens in source order, as returned by
            :func:`~meilifilter.grammar.tokenize`.
        now: Reference instant for relative durations.

    Returns:
        The compiled filter, or ``""`` if no token emits output.

    Raises:
        FilterDateError: If a date literal is not a real calendar date.
            The whole expression is rejected.
        TypeError: If an object that is not a known token is encountered.
    """
    parts: list[str] = []
    # Last comparator wins if two arrive before a date or duration.
    pending: ComparatorKind | None = None

    for token in tokens:
        if isinstance(token, EndOfInput):
            break
        if isinstance(token, Comparator):
            pending = token.kind
        elif isinstance(token, DateLiteral):
            span = resolve_date(token)
            if pending is ComparatorKind.GREATER_THAN:
                parts.append(_bound(pending, span.start_epoch))
            elif pending is ComparatorKind.LESS_THAN:
                parts.append(_bound(pending, span.end_epoch))
            else:
                parts.append(
                    f"{_bound(ComparatorKind.GREATER_THAN, span.start_epoch)}"
                    f" AND {_bound(ComparatorKind.LESS_THAN, span.end_epoch)}"
                )
            pending = None
        elif isinstance(token, Duration):
            threshold = resolve_duration(token, now)
            parts.append(_bound(pending or ComparatorKind.GREATER_THAN, threshold))
            pending = None
        elif isinstance(token, Tag):
            parts.append(f"tags = {token.name}")
        elif isinstance(token, NotTag):
            parts.append(f"tags != {token.name}")
        elif isinstance(token, Operator):
            parts.append(_OPERATOR_TEXT[token.kind])
        else:
            raise TypeError(f"Unexpected filter token {token!r}")

    return "".join(parts)


class FilterCompiler:
    """Compile human-authored filter expressions for the search backend.

    Parameters:
        clock: Zero-argument callable returning the current time, used
            to resolve relative durations such as ``7d``.  Defaults to
            the current UTC time.

    Example::

        compiler = FilterCompiler()
        compiler.compile("vim AND >2019-10")
        # 'tags = vim AND date > 1569888000'
    """

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or _utc_now
        logger.info("FilterCompiler initialised with clock=%r", self._clock)

    def _now(self, now: datetime | None) -> datetime:
        return now if now is not None else self._clock()

    def compile(self, text: str, *, now: datetime | None = None) -> str:
        """Compile *text*, returning ``""`` if it does not parse.

        An empty result means "no filter": callers should leave any
        previously applied filter in place.

        Parameters:
            text: The filter expression.
            now: Reference instant for durations; overrides the clock.

        Raises:
            FilterDateError: If *text* parses but contains an impossible
                date.  This is a rejected filter, not "no filter".
        """
        tokens = tokenize(text)
        if not tokens:
            return ""
        return self._compile(text, tokens, now)

    def compile_or_raise(self, text: str, *, now: datetime | None = None) -> str:
        """Compile *text*, raising :class:`FilterSyntaxError` if it does
        not parse.

        Intended for interactive callers that need to show why a
        filter was rejected.
        """
        return self._compile(text, tokenize_or_raise(text), now)

    def _compile(self, text: str, tokens: list[Token], now: datetime | None) -> str:
        try:
            compiled = compile_tokens(tokens, now=self._now(now))
        except FilterDateError as exc:
            logger.warning("Rejecting filter %r: %s", text, exc)
            raise
        logger.debug("Compiled filter %r -> %r", text, compiled)
        return compiled


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@functools.lru_cache(maxsize=1)
def _default_compiler() -> FilterCompiler:
    return FilterCompiler()


def compile_filter(text: str, *, now: datetime | None = None) -> str:
    """Compile *text* with a shared default :class:`FilterCompiler`.

    Returns ``""`` if *text* is not a valid filter expression.
    """
    return _default_compiler().compile(text, now=now)
