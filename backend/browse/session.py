"""
Search Session
==============

Headless controller for the results page. Owns the committed FilterState,
keeps it in sync with the address bar, and tracks in-flight searches.

- The URL is the source of truth on load and on back/forward; the state is
  re-hydrated from it without writing a new history entry.
- Control changes replace the current entry; explicit navigation pushes.
- Facet toggles can be staged in `pending` and committed together with
  `apply_pending()`, which lands on page 1 like every other filter change.
- Each search carries a monotonically increasing token. Only the response
  for the latest token is kept; anything older is stale and dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from search.filter_state import Facet, FilterState, SortMode, normalize_values
from search.url_state import parse, serialize

from .api_client import CatalogApiClient, ClientResult
from .view_model import FilterChip, ResultView, build_view
from .view_model import remove_chip as remove_chip_from_state

logger = logging.getLogger(__name__)


class NavigationOrigin(str, Enum):
    INITIAL = "initial"
    CONTROL = "control"
    NAVIGATE = "navigate"
    HISTORY = "history"


class History(Protocol):
    def current(self) -> str: ...

    def push(self, query_string: str) -> None: ...

    def replace(self, query_string: str) -> None: ...


@dataclass
class MemoryHistory:
    """In-memory history stack with browser-like back/forward."""

    entries: List[str] = field(default_factory=lambda: [""])
    index: int = 0

    def current(self) -> str:
        return self.entries[self.index]

    def push(self, query_string: str) -> None:
        # pushing drops any forward entries
        del self.entries[self.index + 1 :]
        self.entries.append(query_string)
        self.index = len(self.entries) - 1

    def replace(self, query_string: str) -> None:
        self.entries[self.index] = query_string

    def back(self) -> Optional[str]:
        if self.index == 0:
            return None
        self.index -= 1
        return self.current()

    def forward(self) -> Optional[str]:
        if self.index >= len(self.entries) - 1:
            return None
        self.index += 1
        return self.current()


@dataclass(frozen=True)
class SearchRequest:
    token: int
    query_string: str
    state: FilterState


Fetch = Callable[[SearchRequest], None]


class SearchSession:
    def __init__(self, history: History, fetch: Optional[Fetch] = None):
        self.history = history
        self.fetch = fetch
        self.state = parse(history.current())
        self.pending: Dict[Facet, Tuple[str, ...]] = {}
        self.result: Optional[ClientResult] = None
        self.origin = NavigationOrigin.INITIAL
        self.last_request: Optional[SearchRequest] = None
        self._latest_token = 0
        self._in_flight: Optional[int] = None
        self._last_query: Optional[str] = None
        self._search()

    @classmethod
    def with_client(cls, client: CatalogApiClient, history: History) -> "SearchSession":
        """Session whose searches run synchronously through the API client."""
        session = cls(history)

        def fetch(request: SearchRequest) -> None:
            session.receive(request.token, client.search(request.query_string))

        session.fetch = fetch
        session.refresh()
        return session

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def loading(self) -> bool:
        return self._in_flight is not None

    @property
    def query_string(self) -> str:
        return serialize(self.state)

    def staged_values(self, facet: Facet) -> Tuple[str, ...]:
        """What a facet's checkboxes show: staged values if any, else committed."""
        facet = Facet(facet)
        if facet in self.pending:
            return self.pending[facet]
        return self.state.facet_values(facet)

    @property
    def has_pending(self) -> bool:
        return any(self.pending[f] != self.state.facet_values(f) for f in self.pending)

    def view(self) -> ResultView:
        return build_view(self.state, loading=self.loading, result=self.result)

    # ------------------------------------------------------------------
    # Staged facet edits
    # ------------------------------------------------------------------

    def stage_toggle(self, facet: Facet, value: str) -> None:
        facet = Facet(facet)
        value = (value or "").strip()
        if not value:
            return
        current = self.staged_values(facet)
        if value in current:
            self.pending[facet] = tuple(v for v in current if v != value)
        else:
            self.pending[facet] = current + (value,)

    def discard_pending(self) -> None:
        self.pending.clear()

    def apply_pending(self) -> FilterState:
        state = self.state
        for facet, values in self.pending.items():
            state = state.with_facet_values(facet, normalize_values(values))
        self.pending.clear()
        return self._commit(state)

    # ------------------------------------------------------------------
    # Committed transitions
    # ------------------------------------------------------------------

    def toggle_facet_value(self, facet: Facet, value: str) -> FilterState:
        return self._commit(self.state.toggle_facet_value(facet, value))

    def set_date_range(self, start: int, end: int) -> FilterState:
        return self._commit(self.state.set_date_range(start, end))

    def clear_date_range(self) -> FilterState:
        return self._commit(self.state.clear_date_range())

    def set_flag(self, has_3d_model: bool) -> FilterState:
        return self._commit(self.state.set_flag(has_3d_model))

    def set_site(self, site: Optional[str]) -> FilterState:
        return self._commit(self.state.set_site(site))

    def set_query_text(self, query_text: Optional[str]) -> FilterState:
        return self._commit(self.state.set_query_text(query_text))

    def set_sort(self, sort: SortMode) -> FilterState:
        return self._commit(self.state.set_sort(sort))

    def set_page(self, page: int) -> FilterState:
        return self._commit(self.state.set_page(page))

    def set_page_size(self, page_size: int) -> FilterState:
        return self._commit(self.state.set_page_size(page_size))

    def remove_chip(self, chip: FilterChip) -> FilterState:
        return self._commit(remove_chip_from_state(self.state, chip))

    def reset(self) -> FilterState:
        self.pending.clear()
        return self._commit(FilterState.reset())

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    def navigate(self, query_string: str) -> FilterState:
        """Follow a link: new history entry, state taken from the link."""
        state = parse(query_string)
        self.history.push(serialize(state))
        self.pending.clear()
        self.origin = NavigationOrigin.NAVIGATE
        self.state = state
        self._search()
        return state

    def on_location_change(self, query_string: str) -> FilterState:
        """Back/forward: re-hydrate from the URL without touching history."""
        state = parse(query_string)
        self.origin = NavigationOrigin.HISTORY
        self.pending.clear()
        if state == self.state:
            return state
        self.state = state
        self._search()
        return state

    def refresh(self) -> None:
        """Search again for the current state even if nothing changed."""
        self._search(force=True)

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    def receive(self, token: int, result: ClientResult) -> bool:
        """Accept the response for `token`; returns False when it was stale."""
        if token != self._latest_token:
            logger.debug(f"Dropping stale search response {token} (latest {self._latest_token})")
            return False
        self.result = result
        self._in_flight = None
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _commit(self, state: FilterState) -> FilterState:
        self.origin = NavigationOrigin.CONTROL
        self.state = state
        self.history.replace(serialize(state))
        self._search()
        return state

    def _search(self, force: bool = False) -> None:
        query_string = serialize(self.state)
        if not force and query_string == self._last_query:
            return
        self._last_query = query_string
        self._latest_token += 1
        request = SearchRequest(self._latest_token, query_string, self.state)
        self._in_flight = request.token
        self.last_request = request
        if self.fetch is not None:
            self.fetch(request)
