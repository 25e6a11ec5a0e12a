"""
Catalog API Client
==================

Thin `requests` client for the search and facet endpoints. Transport failures
and non-2xx answers come back as a `ClientResult` error so the view can show
its error state instead of crashing or pretending there were zero results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from config.settings import CATALOG_API_TIMEOUT_SECONDS, CATALOG_API_URL

logger = logging.getLogger(__name__)


@dataclass
class SearchResponse:
    artifacts: List[Dict[str, Any]] = field(default_factory=list)
    page: int = 1
    limit: int = 12
    total: int = 0
    total_pages: int = 0
    mode: str = "engine"
    ignored_filters: List[str] = field(default_factory=list)
    notice: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "SearchResponse":
        pagination = payload.get("pagination") or {}
        meta = payload.get("search") or {}
        return cls(
            artifacts=list(payload.get("artifacts") or []),
            page=int(pagination.get("page", 1)),
            limit=int(pagination.get("limit", 12)),
            total=int(pagination.get("total", 0)),
            total_pages=int(pagination.get("totalPages", 0)),
            mode=str(meta.get("mode", "engine")),
            ignored_filters=list(meta.get("ignoredFilters") or []),
            notice=meta.get("notice"),
        )


@dataclass
class ClientResult:
    response: Optional[SearchResponse] = None
    error: Optional[str] = None
    status_code: Optional[int] = None
    field_errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.response is not None and self.error is None


class CatalogApiClient:
    def __init__(
        self,
        base_url: str = CATALOG_API_URL,
        timeout: float = CATALOG_API_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def search(self, query_string: str) -> ClientResult:
        url = f"{self.base_url}/api/search"
        if query_string:
            url = f"{url}?{query_string}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(f"⚠️ Search request failed: {e}")
            return ClientResult(error=f"Search request failed: {e}")

        if response.status_code != 200:
            body = _json_or_empty(response)
            message = body.get("message") or body.get("detail") or response.reason
            logger.warning(f"⚠️ Search returned {response.status_code}: {message}")
            return ClientResult(
                error=str(message),
                status_code=response.status_code,
                field_errors=list(body.get("errors") or []),
            )

        try:
            payload = response.json()
        except ValueError as e:
            return ClientResult(error=f"Malformed search response: {e}", status_code=response.status_code)
        return ClientResult(response=SearchResponse.from_payload(payload), status_code=200)

    def facet_values(self, facet: str) -> List[str]:
        """Plain value list from /api/cultures, /api/materials or /api/periods."""
        response = self.session.get(f"{self.base_url}/api/{facet}", timeout=self.timeout)
        response.raise_for_status()
        return list(response.json())

    def facet_counts(self) -> Dict[str, List[Dict[str, Any]]]:
        response = self.session.get(f"{self.base_url}/api/facets", timeout=self.timeout)
        response.raise_for_status()
        return dict(response.json())


def _json_or_empty(response: requests.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
