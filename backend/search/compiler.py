"""
Query Compiler
==============

Pure mapping from a validated FilterState to one of two equivalent query
descriptors:

- ENGINE: a full-text engine body (bool must/filter, range and sort clauses,
  from/size pagination).
- FALLBACK: a single sort field + direction with plain offset/limit. Facets,
  text matching and date/site/flag filters are not available there; which of
  them were dropped is reported on the descriptor so the UI can say so.

Both modes end the sort with `id asc` so equal primary keys still order
deterministically.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from catalog.types import SortDirection

from .filter_state import DATE_MAX, DATE_MIN, Facet, FilterState, SortMode

logger = logging.getLogger(__name__)

# Title weighted highest, description next, everything else unweighted
SEARCH_FIELDS = ["title^3", "description^2", "culture", "period", "materials", "site", "tags"]

# Engine document field for each facet
FACET_FIELDS = {
    Facet.CULTURES: "culture",
    Facet.MATERIALS: "materials",
    Facet.TAGS: "tags",
}

# A-Z sort needs the keyword sub-field; analyzed text is not sortable
TITLE_SORT_FIELD = "title.keyword"

TIE_BREAK = {"id": {"order": "asc"}}


class QueryMode(str, Enum):
    ENGINE = "engine"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class FallbackQuery:
    sort_field: str
    direction: SortDirection
    offset: int
    limit: int


@dataclass
class CompiledQuery:
    """
    Opaque descriptor handed to the Search Executor.
    """

    mode: QueryMode
    page: int
    page_size: int
    body: Optional[Dict[str, Any]] = None
    fallback: Optional[FallbackQuery] = None
    ignored_filters: List[str] = field(default_factory=list)
    notice: Optional[str] = None

    def describe(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "ignoredFilters": list(self.ignored_filters),
            "notice": self.notice,
        }


def fallback_sort(sort: SortMode) -> Tuple[str, SortDirection]:
    """Relational sort column and direction for a sort mode."""
    sort = SortMode(sort)
    if sort == SortMode.DATE_ASC:
        return "date_start", SortDirection.ASC
    if sort == SortMode.DATE_DESC:
        return "date_start", SortDirection.DESC
    if sort == SortMode.AZ:
        return "title", SortDirection.ASC
    return "id", SortDirection.DESC


def build_sort_clauses(state: FilterState) -> List[Dict[str, Any]]:
    if state.sort == SortMode.DATE_ASC:
        return [{"date_start": {"order": "asc"}}, TIE_BREAK]
    if state.sort == SortMode.DATE_DESC:
        return [{"date_start": {"order": "desc"}}, TIE_BREAK]
    if state.sort == SortMode.AZ:
        return [{TITLE_SORT_FIELD: {"order": "asc"}}, TIE_BREAK]
    if state.query_text:
        return [{"_score": {"order": "desc"}}, TIE_BREAK]
    # relevance without a query has nothing to score: newest ids first
    return [{"id": {"order": "desc"}}]


def build_filter_clauses(state: FilterState) -> List[Dict[str, Any]]:
    """
    One `terms` clause per non-empty facet (value in set), then site, flag and
    the contained-within date window.
    """
    filters: List[Dict[str, Any]] = []
    for facet in Facet:
        values = state.facet_values(facet)
        if values:
            filters.append({"terms": {FACET_FIELDS[facet]: list(values)}})

    if state.site:
        filters.append({"term": {"site": state.site}})

    if state.has_3d_model:
        filters.append({"term": {"has_3d_model": True}})

    # Contained-within: the artifact's own span must lie inside the window
    if state.date_start != DATE_MIN:
        filters.append({"range": {"date_start": {"gte": state.date_start}}})
    if state.date_end != DATE_MAX:
        filters.append({"range": {"date_end": {"lte": state.date_end}}})

    return filters


def build_engine_body(state: FilterState) -> Dict[str, Any]:
    must: List[Dict[str, Any]] = []
    filters = build_filter_clauses(state)

    if state.query_text:
        text_clause = {
            "multi_match": {
                "query": state.query_text,
                "fields": list(SEARCH_FIELDS),
                "fuzziness": "AUTO",
            }
        }
        if state.uses_relevance_scoring():
            must.append(text_clause)
        else:
            # explicit sort: still restrict matches, but skip scoring
            filters.append(text_clause)

    if must or filters:
        bool_query: Dict[str, Any] = {}
        if must:
            bool_query["must"] = must
        if filters:
            bool_query["filter"] = filters
        query: Dict[str, Any] = {"bool": bool_query}
    else:
        query = {"match_all": {}}

    return {
        "query": query,
        "sort": build_sort_clauses(state),
        "from": state.offset,
        "size": state.page_size,
        "track_total_hits": True,
    }


def compile_query(state: FilterState, engine_available: bool) -> CompiledQuery:
    """
    Compile a validated state for whichever backend is usable right now.
    """
    if engine_available:
        compiled = CompiledQuery(
            mode=QueryMode.ENGINE,
            page=state.page,
            page_size=state.page_size,
            body=build_engine_body(state),
        )
        logger.debug(f"🧭 Compiled engine query: page={state.page} size={state.page_size} sort={state.sort.value}")
        return compiled

    sort_field, direction = fallback_sort(state.sort)
    ignored = state.active_filters()
    notice = None
    if ignored:
        notice = (
            "Full-text search is unavailable; these filters were ignored: "
            + ", ".join(ignored)
        )
        logger.info(f"⚠️ Fallback query ignores filters: {ignored}")

    return CompiledQuery(
        mode=QueryMode.FALLBACK,
        page=state.page,
        page_size=state.page_size,
        fallback=FallbackQuery(
            sort_field=sort_field,
            direction=direction,
            offset=state.offset,
            limit=state.page_size,
        ),
        ignored_filters=ignored,
        notice=notice,
    )
