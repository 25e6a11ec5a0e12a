"""
Search Executor
===============

Runs a compiled query against the backend it was compiled for, pages the raw
hits, and enriches each hit with its images. For a fixed data snapshot and a
fixed descriptor the result is always the same.

Engine failures never escape as exceptions: they come back as a
`SearchOutcome` carrying the `BackendUnavailable` condition.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from catalog.interfaces import ArtifactStore
from catalog.types import EnrichedArtifact

from .compiler import CompiledQuery, QueryMode
from .engine import SearchBackend
from .enrichment import ImageEnricher
from .errors import BackendUnavailable

logger = logging.getLogger(__name__)


def count_pages(total: int, page_size: int) -> int:
    if total <= 0 or page_size <= 0:
        return 0
    return math.ceil(total / page_size)


@dataclass
class SearchResultPage:
    items: List[EnrichedArtifact] = field(default_factory=list)
    page: int = 1
    page_size: int = 12
    total: int = 0

    @property
    def total_pages(self) -> int:
        return count_pages(self.total, self.page_size)

    def pagination(self) -> Dict[str, int]:
        return {
            "page": self.page,
            "limit": self.page_size,
            "total": self.total,
            "totalPages": self.total_pages,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "artifacts": [item.to_dict() for item in self.items],
            "pagination": self.pagination(),
        }


@dataclass
class SearchOutcome:
    """Either a result page or the backend failure that prevented one."""

    query: CompiledQuery
    page: Optional[SearchResultPage] = None
    failure: Optional[BackendUnavailable] = None
    degraded_from: Optional[BackendUnavailable] = None

    @property
    def ok(self) -> bool:
        return self.page is not None and self.failure is None

    def to_dict(self) -> Dict[str, Any]:
        if self.page is None:
            raise ValueError("No result page on a failed search outcome")
        data = self.page.to_dict()
        meta = self.query.describe()
        if self.degraded_from is not None:
            meta["degradedFrom"] = self.degraded_from.backend
        data["search"] = meta
        return data


class SearchExecutor:
    def __init__(self, store: ArtifactStore, enricher: ImageEnricher, backend: SearchBackend):
        self.store = store
        self.enricher = enricher
        self.backend = backend

    def execute(self, compiled: CompiledQuery) -> SearchOutcome:
        if compiled.mode == QueryMode.ENGINE:
            try:
                hits = self.backend.search(compiled.body or {})
            except BackendUnavailable as e:
                logger.warning(f"⚠️ Engine search failed: {e}")
                return SearchOutcome(query=compiled, failure=e)
            records = hits.documents
            total = hits.total
        else:
            fb = compiled.fallback
            if fb is None:
                raise ValueError("Fallback query descriptor is missing its fallback section")
            artifacts = self.store.list_artifacts(
                sort_field=fb.sort_field,
                direction=fb.direction,
                limit=fb.limit,
                offset=fb.offset,
            )
            records = [a.to_dict() for a in artifacts]
            total = self.store.count_artifacts()

        items = self.enricher.enrich(records)
        page = SearchResultPage(
            items=items,
            page=compiled.page,
            page_size=compiled.page_size,
            total=total,
        )
        logger.info(
            f"🔍 {compiled.mode.value} search: page {page.page}/{page.total_pages} "
            f"({len(items)} of {total})"
        )
        return SearchOutcome(query=compiled, page=page)
