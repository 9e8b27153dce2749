"""meilifilter — filter expressions for document search.

Compiles a small boolean filter language (tags, negated tags, absolute
dates, relative durations, ``>``/``<`` comparators, ``AND``/``OR``) into
the filter string understood by the document-search backend.
"""

from meilifilter.compiler import (
    DateRange,
    FilterCompiler,
    compile_filter,
    compile_tokens,
    resolve_date,
    resolve_duration,
)
from meilifilter.errors import FilterDateError, FilterError, FilterSyntaxError
from meilifilter.grammar import tokenize, tokenize_or_raise
from meilifilter.query import SearchQuery, SearchResponse

__all__ = [
    "DateRange",
    "FilterCompiler",
    "FilterDateError",
    "FilterError",
    "FilterSyntaxError",
    "SearchQuery",
    "SearchResponse",
    "compile_filter",
    "compile_tokens",
    "resolve_date",
    "resolve_duration",
    "tokenize",
    "tokenize_or_raise",
]
__version__ = "1.0.0"
