"""Exceptions raised while tokenizing or compiling filter expressions."""

from __future__ import annotations


class FilterError(ValueError):
    """Base class for filter expressions that cannot be compiled."""


class FilterSyntaxError(FilterError):
    """The input does not conform to the filter grammar.

    Attributes:
        text: The rejected filter expression.
        column: One-based column where parsing failed.
        reason: The parser's description of the failure.
    """

    def __init__(self, text: str, column: int, reason: str) -> None:
        self.text = text
        self.column = column
        self.reason = reason
        super().__init__(f"Invalid filter {text!r} at column {column}: {reason}")


class FilterDateError(FilterError):
    """A well-formed date literal does not name a real calendar date.

    Attributes:
        term: The offending literal as written (e.g. ``"2019-02-30"``).
        position: Zero-based offset of the literal in the input.
        reason: Why the date was rejected.
    """

    def __init__(self, term: str, position: int, reason: str) -> None:
        self.term = term
        self.position = position
        self.reason = reason
        super().__init__(f"Invalid date {term!r} at position {position}: {reason}")
