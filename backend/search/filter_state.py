"""
Filter State Model
==================

Canonical, immutable representation of the active search criteria. Every
transition returns a new state; any change other than pure pagination puts
the result back on page 1.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Optional, Tuple

# "Unbounded" date window for this domain (signed years, negative = BCE)
DATE_MIN = -3000
DATE_MAX = 2000

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100


class SortMode(str, Enum):
    RELEVANCE = "relevance"
    DATE_ASC = "date_asc"
    DATE_DESC = "date_desc"
    AZ = "az"


class Facet(str, Enum):
    """Multi-select facets: OR within a facet, AND across facets."""

    CULTURES = "cultures"
    MATERIALS = "materials"
    TAGS = "tags"


def normalize_values(values: Iterable[str]) -> Tuple[str, ...]:
    """Strip, drop empty members and de-duplicate while keeping first-seen order."""
    seen: List[str] = []
    for raw in values:
        value = (raw or "").strip()
        if value and value not in seen:
            seen.append(value)
    return tuple(seen)


def _clean_text(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


@dataclass(frozen=True)
class FilterState:
    query_text: Optional[str] = None
    cultures: Tuple[str, ...] = field(default_factory=tuple)
    materials: Tuple[str, ...] = field(default_factory=tuple)
    tags: Tuple[str, ...] = field(default_factory=tuple)
    date_start: int = DATE_MIN
    date_end: int = DATE_MAX
    has_3d_model: bool = False
    site: Optional[str] = None
    sort: SortMode = SortMode.RELEVANCE
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def date_range(self) -> Tuple[int, int]:
        return (self.date_start, self.date_end)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def facet_values(self, facet: Facet) -> Tuple[str, ...]:
        return getattr(self, Facet(facet).value)

    def has_custom_date_range(self) -> bool:
        return self.date_start != DATE_MIN or self.date_end != DATE_MAX

    def uses_relevance_scoring(self) -> bool:
        """Engine scoring only applies to relevance sort with a non-empty query."""
        return self.sort == SortMode.RELEVANCE and bool(self.query_text)

    def active_filters(self) -> List[str]:
        """Names of the narrowing criteria that differ from their defaults."""
        active: List[str] = []
        if self.query_text:
            active.append("query")
        for facet in Facet:
            if self.facet_values(facet):
                active.append(facet.value)
        if self.has_custom_date_range():
            active.append("dateRange")
        if self.site:
            active.append("site")
        if self.has_3d_model:
            active.append("has3dModel")
        return active

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def toggle_facet_value(self, facet: Facet, value: str) -> "FilterState":
        """Add the value if absent, remove it if present."""
        facet = Facet(facet)
        value = (value or "").strip()
        if not value:
            return self
        current = self.facet_values(facet)
        if value in current:
            updated = tuple(v for v in current if v != value)
        else:
            updated = current + (value,)
        return replace(self, **{facet.value: updated, "page": 1})

    def with_facet_values(self, facet: Facet, values: Iterable[str]) -> "FilterState":
        facet = Facet(facet)
        return replace(self, **{facet.value: normalize_values(values), "page": 1})

    def set_date_range(self, start: int, end: int) -> "FilterState":
        if start > end:
            raise ValueError(f"Date range start {start} is after end {end}")
        return replace(self, date_start=int(start), date_end=int(end), page=1)

    def clear_date_range(self) -> "FilterState":
        return replace(self, date_start=DATE_MIN, date_end=DATE_MAX, page=1)

    def set_flag(self, has_3d_model: bool) -> "FilterState":
        return replace(self, has_3d_model=bool(has_3d_model), page=1)

    def set_site(self, site: Optional[str]) -> "FilterState":
        return replace(self, site=_clean_text(site), page=1)

    def set_query_text(self, query_text: Optional[str]) -> "FilterState":
        return replace(self, query_text=_clean_text(query_text), page=1)

    def set_sort(self, sort: SortMode) -> "FilterState":
        return replace(self, sort=SortMode(sort), page=1)

    def set_page(self, page: int) -> "FilterState":
        return replace(self, page=max(1, int(page)))

    def set_page_size(self, page_size: int) -> "FilterState":
        return replace(self, page_size=min(max(1, int(page_size)), MAX_PAGE_SIZE), page=1)

    @staticmethod
    def reset() -> "FilterState":
        """A completely fresh default state (never a patch of the old one)."""
        return FilterState()


def normalize(state: FilterState) -> FilterState:
    """
    Bring any state into the reachable domain: clamp numbers, drop empty
    facet members, collapse blank text to None. An inverted date window is
    treated as malformed and falls back to the unbounded default.
    """
    date_start = min(max(int(state.date_start), DATE_MIN), DATE_MAX)
    date_end = min(max(int(state.date_end), DATE_MIN), DATE_MAX)
    if date_start > date_end:
        date_start, date_end = DATE_MIN, DATE_MAX

    return FilterState(
        query_text=_clean_text(state.query_text),
        cultures=normalize_values(state.cultures),
        materials=normalize_values(state.materials),
        tags=normalize_values(state.tags),
        date_start=date_start,
        date_end=date_end,
        has_3d_model=bool(state.has_3d_model),
        site=_clean_text(state.site),
        sort=SortMode(state.sort),
        page=max(1, int(state.page)),
        page_size=min(max(1, int(state.page_size)), MAX_PAGE_SIZE),
    )
