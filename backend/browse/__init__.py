"""
Browse client
=============

Headless view-model for the artifact search page: URL-synced session,
active-filter chips, pager, and the results display state.
"""

from .api_client import CatalogApiClient, ClientResult, SearchResponse
from .pagination import PaginationModel, build_pagination, page_sequence
from .session import MemoryHistory, SearchRequest, SearchSession
from .view_model import DisplayState, FilterChip, ResultView, build_chips, build_view

__all__ = [
    "CatalogApiClient",
    "ClientResult",
    "DisplayState",
    "FilterChip",
    "MemoryHistory",
    "PaginationModel",
    "ResultView",
    "SearchRequest",
    "SearchResponse",
    "SearchSession",
    "build_chips",
    "build_pagination",
    "build_view",
    "page_sequence",
]
