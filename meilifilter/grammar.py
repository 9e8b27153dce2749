"""Grammar for the filter mini-language.

The language is a flat, left-to-right sequence of terms joined by
``AND`` / ``OR``::

    expression := (term operator)* term EOI
    term       := comparator? (date | duration) | tag | not_tag
    comparator := ">" | "<"
    date       := YYYY-MM-DD | YYYY-MM | YYYY
    duration   := integer ("h" | "d" | "w" | "m" | "y")
    tag        := identifier
    not_tag    := "!" identifier
    operator   := "AND" | "OR"

Parenthesized sub-expressions and quoted tags are not supported.  A tag
containing whitespace therefore cannot be expressed.

Each rule carries a parse action that turns the match directly into a
:mod:`meilifilter.tokens` variant, so a successful parse is already the
ordered token sequence.
"""

from __future__ import annotations

import logging

import pyparsing as pp

from meilifilter.errors import FilterSyntaxError
from meilifilter.tokens import (
    Comparator,
    ComparatorKind,
    DateLiteral,
    Duration,
    DurationUnit,
    EndOfInput,
    NotTag,
    Operator,
    OperatorKind,
    Tag,
    Token,
)

logger = logging.getLogger(__name__)

# Tag identifier.
_IDENT = r"\w[\w.-]*"

# A date or duration literal must not run on into an identifier, so that
# ``2019foo`` or ``7days`` are read as tags rather than rejected.
_BOUNDARY = r"(?![\w.-])"


# ------------------------------------------------------------------
# Parse actions
# ------------------------------------------------------------------


def _to_comparator(toks: pp.ParseResults) -> Comparator:
    return Comparator(ComparatorKind(toks[0]))


def _to_operator(toks: pp.ParseResults) -> Operator:
    return Operator(OperatorKind(toks[0]))


def _to_date(s: str, loc: int, toks: pp.ParseResults) -> DateLiteral:
    month = toks.get("month")
    day = toks.get("day")
    return DateLiteral(
        year=int(toks["year"]),
        month=int(month) if month is not None else None,
        day=int(day) if day is not None else None,
        text=toks[0],
        position=loc,
    )


def _to_duration(toks: pp.ParseResults) -> Duration:
    return Duration(int(toks["amount"]), DurationUnit(toks["unit"]))


def _to_tag(toks: pp.ParseResults) -> Tag:
    return Tag(toks[0])


def _to_not_tag(toks: pp.ParseResults) -> NotTag:
    return NotTag(toks["name"])


# ------------------------------------------------------------------
# Grammar
# ------------------------------------------------------------------


def _build_grammar() -> pp.ParserElement:
    """Assemble the pyparsing element for a whole filter expression."""
    comparator = pp.Char("<>").set_name("comparator")
    comparator.set_parse_action(_to_comparator)

    year_month_day = pp.Regex(
        rf"(?P<year>\d{{4}})-(?P<month>\d{{2}})-(?P<day>\d{{2}}){_BOUNDARY}"
    )
    year_month = pp.Regex(rf"(?P<year>\d{{4}})-(?P<month>\d{{2}}){_BOUNDARY}")
    year = pp.Regex(rf"(?P<year>\d{{4}}){_BOUNDARY}")
    date = (year_month_day | year_month | year).set_name("date")
    date.set_parse_action(_to_date)

    duration = pp.Regex(
        rf"(?P<amount>\d+)(?P<unit>[hdwmy]){_BOUNDARY}"
    ).set_name("duration")
    duration.set_parse_action(_to_duration)

    operator = pp.Regex(rf"(AND|OR){_BOUNDARY}").set_name("operator")
    operator.set_parse_action(_to_operator)

    tag = (~operator + pp.Regex(_IDENT)).set_name("tag")
    tag.set_parse_action(_to_tag)

    not_tag = pp.Regex(rf"!(?P<name>{_IDENT})").set_name("not_tag")
    not_tag.set_parse_action(_to_not_tag)

    term = (pp.Opt(comparator) + (date | duration)) | tag | not_tag
    expression = term + pp.ZeroOrMore(operator + term) + pp.StringEnd()
    # Keep tabs as-is so reported positions match the input.
    return expression.parse_with_tabs()


_EXPRESSION = _build_grammar()


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------


def tokenize_or_raise(text: str) -> list[Token]:
    """Tokenize *text*, raising on any grammar mismatch.

    Parameters:
        text: A filter expression, e.g. ``"vim AND >2019-10"``.

    Returns:
        The tokens in source order, terminated by :class:`EndOfInput`.

    Raises:
        FilterSyntaxError: If *text* is not in the filter language.
    """
    try:
        result = _EXPRESSION.parse_string(text, parse_all=True)
    except pp.ParseBaseException as exc:
        raise FilterSyntaxError(text, exc.col, exc.msg) from exc

    tokens: list[Token] = list(result)
    tokens.append(EndOfInput())
    return tokens


def tokenize(text: str) -> list[Token]:
    """Tokenize *text*, returning an empty list if it does not parse.

    A malformed filter is dropped rather than reported; use
    :func:`tokenize_or_raise` to find out why.
    """
    try:
        return tokenize_or_raise(text)
    except FilterSyntaxError as exc:
        logger.debug("Dropping filter %r: %s", text, exc.reason)
        return []
