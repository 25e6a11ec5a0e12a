"""
Result / Pagination View-Model
==============================

Turns the committed FilterState and the latest search result into what the
results pane renders: active-filter chips, result cards, the pager, and one of
four mutually exclusive display states. Loading, error and empty are modeled
explicitly; an error is never rendered as "0 results".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from search.filter_state import Facet, FilterState

from .api_client import ClientResult
from .display import date_range_label, format_year, period_label
from .pagination import PaginationModel, build_pagination


class DisplayState(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    RESULTS = "results"


class ChipKind(str, Enum):
    QUERY = "query"
    CULTURE = "culture"
    MATERIAL = "material"
    TAG = "tag"
    DATE_RANGE = "dateRange"
    SITE = "site"
    HAS_3D_MODEL = "has3dModel"


# Chip kind for each multi-select facet
FACET_CHIPS = {
    Facet.CULTURES: ChipKind.CULTURE,
    Facet.MATERIALS: ChipKind.MATERIAL,
    Facet.TAGS: ChipKind.TAG,
}


@dataclass(frozen=True)
class FilterChip:
    """One removable active filter; `value` identifies facet members."""

    kind: ChipKind
    label: str
    value: Optional[str] = None


def build_chips(state: FilterState) -> List[FilterChip]:
    chips: List[FilterChip] = []
    if state.query_text:
        chips.append(FilterChip(ChipKind.QUERY, f"“{state.query_text}”", state.query_text))
    for facet, kind in FACET_CHIPS.items():
        for value in state.facet_values(facet):
            chips.append(FilterChip(kind, value, value))
    if state.has_custom_date_range():
        chips.append(FilterChip(ChipKind.DATE_RANGE, date_range_label(state.date_start, state.date_end)))
    if state.site:
        chips.append(FilterChip(ChipKind.SITE, state.site, state.site))
    if state.has_3d_model:
        chips.append(FilterChip(ChipKind.HAS_3D_MODEL, "Has 3D Model"))
    return chips


def remove_chip(state: FilterState, chip: FilterChip) -> FilterState:
    """The transition that undoes one chip."""
    kind = ChipKind(chip.kind)
    if kind == ChipKind.QUERY:
        return state.set_query_text(None)
    if kind == ChipKind.DATE_RANGE:
        return state.clear_date_range()
    if kind == ChipKind.SITE:
        return state.set_site(None)
    if kind == ChipKind.HAS_3D_MODEL:
        return state.set_flag(False)
    for facet, facet_kind in FACET_CHIPS.items():
        if facet_kind == kind:
            remaining = [v for v in state.facet_values(facet) if v != chip.value]
            return state.with_facet_values(facet, remaining)
    return state


@dataclass
class ResultView:
    display: DisplayState
    chips: List[FilterChip] = field(default_factory=list)
    cards: List[Dict[str, Any]] = field(default_factory=list)
    total: Optional[int] = None
    pagination: PaginationModel = field(default_factory=PaginationModel)
    notice: Optional[str] = None
    error: Optional[str] = None
    date_display: Tuple[str, str] = ("", "")
    period_display: Tuple[str, str] = ("", "")


def build_view(
    state: FilterState,
    *,
    loading: bool,
    result: Optional[ClientResult],
) -> ResultView:
    view = ResultView(
        display=DisplayState.LOADING,
        chips=build_chips(state),
        date_display=(format_year(state.date_start), format_year(state.date_end)),
        period_display=(period_label(state.date_start), period_label(state.date_end)),
    )
    if loading or result is None:
        return view

    if not result.ok or result.response is None:
        view.display = DisplayState.ERROR
        view.error = result.error or "There was a problem retrieving the artifact data."
        return view

    response = result.response
    view.total = response.total
    view.notice = response.notice
    if response.total_pages > 0:
        # a deep link past the last page still gets a pager back into range
        view.pagination = build_pagination(state.page, response.total_pages)
    if not response.artifacts:
        view.display = DisplayState.EMPTY
        return view

    view.display = DisplayState.RESULTS
    view.cards = list(response.artifacts)
    return view
