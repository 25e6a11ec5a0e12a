"""
Catalog Service Singletons
==========================

Lazy, process-wide instances of the catalog store, facet provider, engine
capability and search service. Nothing connects at import time; the first
request (or startup hook) builds what it needs. Endpoints receive these via
FastAPI `Depends`, so tests swap them with `app.dependency_overrides`.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from catalog.facets import FacetCatalogProvider
from catalog.sql_store import SqlCatalogStore
from config.settings import (
    DATABASE_URL,
    ELASTICSEARCH_INDEX,
    ELASTICSEARCH_TIMEOUT_SECONDS,
    ELASTICSEARCH_URL,
    ENGINE_PROBE_TTL_SECONDS,
    ENRICH_MAX_WORKERS,
    SEARCH_DEGRADE_ON_UNAVAILABLE,
)
from search.engine import EngineCapability, build_engine_capability
from search.enrichment import ImageEnricher
from search.executor import SearchExecutor
from search.service import SearchService

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_store: Optional[SqlCatalogStore] = None
_capability: Optional[EngineCapability] = None
_search_service: Optional[SearchService] = None


def get_store() -> SqlCatalogStore:
    global _store
    with _lock:
        if _store is None:
            _store = SqlCatalogStore(DATABASE_URL)
            logger.info("🗄️ Catalog store initialized")
        return _store


def get_facet_provider() -> FacetCatalogProvider:
    return FacetCatalogProvider(get_store())


def get_engine_capability() -> EngineCapability:
    global _capability
    with _lock:
        if _capability is None:
            _capability = build_engine_capability(
                ELASTICSEARCH_URL,
                index=ELASTICSEARCH_INDEX,
                timeout=ELASTICSEARCH_TIMEOUT_SECONDS,
                ttl_seconds=ENGINE_PROBE_TTL_SECONDS,
            )
        return _capability


def get_search_service() -> SearchService:
    global _search_service
    if _search_service is not None:
        return _search_service
    store = get_store()
    capability = get_engine_capability()
    with _lock:
        if _search_service is None:
            executor = SearchExecutor(
                store=store,
                enricher=ImageEnricher(store, max_workers=ENRICH_MAX_WORKERS),
                backend=capability.backend,
            )
            _search_service = SearchService(
                executor,
                capability,
                degrade_on_unavailable=SEARCH_DEGRADE_ON_UNAVAILABLE,
            )
            logger.info("🔍 Search service initialized")
        return _search_service


def reset_services() -> None:
    """Drop every cached instance; the next getter call rebuilds it."""
    global _store, _capability, _search_service
    with _lock:
        _store = None
        _capability = None
        _search_service = None
