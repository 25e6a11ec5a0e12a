"""
Search Engine Capability
========================

The full-text engine is an injected capability, never a nullable global:

- `ElasticsearchBackend` wraps a real client and turns every transport or API
  failure into `BackendUnavailable`.
- `UnavailableBackend` is the explicit "no engine" variant.
- `EngineCapability` answers "can the engine serve this request?" per request,
  caching ping results for a short TTL so a recovered engine is picked up
  again without a restart.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol

from elasticsearch import (
    ApiError,
    ConnectionError as ESConnectionError,
    ConnectionTimeout,
    Elasticsearch,
    TransportError,
    helpers,
)

from .errors import BackendUnavailable

logger = logging.getLogger(__name__)

_ENGINE_FAILURES = (ESConnectionError, ConnectionTimeout, TransportError, ApiError)


@dataclass
class EngineHits:
    total: int
    documents: List[Dict[str, Any]] = field(default_factory=list)


class SearchBackend(Protocol):
    name: str

    def ping(self) -> bool:
        ...

    def search(self, body: Dict[str, Any]) -> EngineHits:
        ...

    def index_documents(self, documents: Iterable[Dict[str, Any]]) -> int:
        ...


@dataclass
class UnavailableBackend:
    """Explicit stand-in when no engine is configured."""

    reason: str = "search engine not configured"
    name: str = "unavailable"

    def ping(self) -> bool:
        return False

    def search(self, body: Dict[str, Any]) -> EngineHits:
        raise BackendUnavailable(self.reason, backend=self.name)

    def index_documents(self, documents: Iterable[Dict[str, Any]]) -> int:
        raise BackendUnavailable(self.reason, backend=self.name)


class ElasticsearchBackend:
    """Elasticsearch adapter over a single artifacts index."""

    name = "elasticsearch"

    def __init__(self, client: Elasticsearch, index: str = "artifacts"):
        self.client = client
        self.index = index

    @classmethod
    def from_url(cls, url: str, index: str = "artifacts", timeout: float = 10.0) -> "ElasticsearchBackend":
        client = Elasticsearch(url, request_timeout=timeout)
        logger.info(f"🔎 Elasticsearch configured at {url} (index={index})")
        return cls(client, index=index)

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except Exception as e:
            logger.warning(f"⚠️ Elasticsearch ping failed: {e}")
            return False

    def search(self, body: Dict[str, Any]) -> EngineHits:
        kwargs = dict(body)
        from_ = kwargs.pop("from", 0)
        try:
            response = self.client.search(index=self.index, from_=from_, **kwargs)
        except _ENGINE_FAILURES as e:
            raise BackendUnavailable(str(e), backend=self.name) from e

        hits = response["hits"]
        total = hits.get("total", 0)
        if isinstance(total, dict):
            total = total.get("value", 0)
        documents = [dict(h.get("_source") or {}) for h in hits.get("hits", [])]
        return EngineHits(total=int(total), documents=documents)

    def ensure_index(self, mapping: Dict[str, Any]) -> bool:
        """Create the index with `mapping` when it does not exist yet."""
        try:
            if self.client.indices.exists(index=self.index):
                return False
            self.client.indices.create(index=self.index, **mapping)
        except _ENGINE_FAILURES as e:
            raise BackendUnavailable(str(e), backend=self.name) from e
        logger.info(f"📚 Created search index '{self.index}'")
        return True

    def index_documents(self, documents: Iterable[Dict[str, Any]]) -> int:
        actions = (
            {"_index": self.index, "_id": doc["id"], "_source": doc}
            for doc in documents
        )
        try:
            indexed, _errors = helpers.bulk(self.client, actions, refresh=True)
        except _ENGINE_FAILURES as e:
            raise BackendUnavailable(str(e), backend=self.name) from e
        return int(indexed)


class EngineCapability:
    """
    Per-request engine availability with a cached ping.

    A failed search marks the engine unavailable immediately; the next probe
    after the TTL expires gives it another chance.
    """

    def __init__(
        self,
        backend: SearchBackend,
        ttl_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.backend = backend
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._available: Optional[bool] = None
        self._checked_at: float = 0.0

    @property
    def configured(self) -> bool:
        return not isinstance(self.backend, UnavailableBackend)

    def is_available(self) -> bool:
        if not self.configured:
            return False
        now = self._clock()
        with self._lock:
            if self._available is not None and now - self._checked_at < self.ttl_seconds:
                return self._available
        available = self.backend.ping()
        with self._lock:
            if self._available is not False and not available:
                logger.warning("⚠️ Search engine unreachable; searches degrade to fallback")
            elif self._available is False and available:
                logger.info("✅ Search engine reachable again")
            self._available = available
            self._checked_at = now
        return available

    def mark_unavailable(self, reason: str) -> None:
        with self._lock:
            self._available = False
            self._checked_at = self._clock()
        logger.warning(f"⚠️ Search engine marked unavailable: {reason}")

    def status(self) -> Dict[str, Any]:
        if not self.configured:
            return {"engine": "not_configured", "mode": "fallback"}
        available = self.is_available()
        return {
            "engine": "configured" if available else "unavailable",
            "mode": "engine" if available else "fallback",
        }


def build_engine_capability(
    url: Optional[str],
    index: str = "artifacts",
    timeout: float = 10.0,
    ttl_seconds: float = 30.0,
) -> EngineCapability:
    if not url:
        logger.info("🔎 No search engine configured; using relational fallback")
        return EngineCapability(UnavailableBackend(), ttl_seconds=ttl_seconds)
    backend = ElasticsearchBackend.from_url(url, index=index, timeout=timeout)
    return EngineCapability(backend, ttl_seconds=ttl_seconds)
