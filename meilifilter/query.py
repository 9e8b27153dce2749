"""Search request and response bodies for the document-search backend.

:class:`SearchQuery` is the JSON body posted to
``/indexes/<index>/search``; its ``filter`` field carries the output of
:class:`~meilifilter.compiler.FilterCompiler`.  Sending the request is left
to the caller's HTTP client.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from meilifilter.compiler import FilterCompiler, compile_filter

logger = logging.getLogger(__name__)

DEFAULT_SORT = ["date:desc"]
DEFAULT_LIMIT = 10_000


class SearchQuery(BaseModel):
    """Body of a search request.

    Attributes:
        query: Free-text query (serialized as ``q``).
        filter: Compiled backend filter string.
        sort: Sort expressions, newest documents first by default.
        facets_distribution: Facets to count (serialized as
            ``facetsDistribution``).
        limit: Maximum number of hits to return.
    """

    model_config = ConfigDict(populate_by_name=True)

    query: str | None = Field(default=None, alias="q")
    filter: str | None = None
    sort: list[str] | None = Field(default_factory=lambda: list(DEFAULT_SORT))
    facets_distribution: list[str] | None = Field(
        default=None,
        alias="facetsDistribution",
    )
    limit: int = DEFAULT_LIMIT

    def process_filter(
        self,
        text: str,
        *,
        compiler: FilterCompiler | None = None,
        now: datetime | None = None,
    ) -> str | None:
        """Compile *text* into :attr:`filter`.

        The filter is only replaced when compilation yields a non-empty
        string; an expression that does not parse leaves any previous
        filter untouched.

        Parameters:
            text: The human-authored filter expression.
            compiler: Compiler to use; a shared default when omitted.
            now: Reference instant for relative durations.

        Returns:
            The current value of :attr:`filter`.

        Raises:
            FilterDateError: If *text* contains an impossible date.
        """
        if compiler is not None:
            compiled = compiler.compile(text, now=now)
        else:
            compiled = compile_filter(text, now=now)

        if compiled:
            self.filter = compiled
        else:
            logger.debug("No filter applied for %r", text)
        return self.filter

    def to_json(self) -> str:
        """Serialize with backend field names, omitting unset fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class SearchResponse(BaseModel):
    """Body of a search reply.

    Hits are kept as raw mappings; turning them into documents is up to
    the caller.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    hits: list[dict[str, Any]] = Field(default_factory=list)
    num_hits: int = Field(default=0, alias="nbHits")
    exhaustive_num_hits: bool = Field(default=False, alias="exhaustiveNbHits")
    query: str = ""
    limit: int = 0
    offset: int = 0
    processing_time_ms: int = Field(default=0, alias="processingTimeMs")
