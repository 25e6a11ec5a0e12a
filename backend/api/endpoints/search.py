"""
Artifact Search Endpoint
========================

GET /api/search - faceted artifact search.

Query parameters: query, cultures, materials, tags (comma-joined or repeated),
dateStart, dateEnd, site, has3dModel, sort, page, limit.

- 200: `{artifacts, pagination, search}`; `search.mode` says whether the
  full-text engine or the relational fallback answered.
- 400: `{message, errors: [{field, message}]}` for malformed parameters.
- 503: engine unreachable and degradation disabled.
"""

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from search.params import parse_search_params
from search.service import SearchService
from services.catalog_services import get_search_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _group_query_params(request: Request) -> Dict[str, List[str]]:
    grouped: Dict[str, List[str]] = {}
    for key, value in request.query_params.multi_items():
        grouped.setdefault(key, []).append(value)
    return grouped


@router.get("/search")
def search_artifacts(request: Request, service: SearchService = Depends(get_search_service)):
    parsed = parse_search_params(_group_query_params(request))
    if not parsed.ok:
        logger.info(f"⚠️ API: Rejected search parameters: {[e.field for e in parsed.errors]}")
        return JSONResponse(status_code=400, content=parsed.error_payload())

    try:
        outcome = service.search(parsed.state)
    except Exception as e:
        logger.exception(f"❌ API: Search failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to search artifacts")

    if not outcome.ok:
        reason = outcome.failure.reason if outcome.failure else "unknown"
        raise HTTPException(status_code=503, detail=f"Search engine unavailable: {reason}")

    payload = outcome.to_dict()
    logger.info(
        f"✅ API: Search ({payload['search']['mode']}) returned "
        f"{len(payload['artifacts'])} of {payload['pagination']['total']}"
    )
    return payload
