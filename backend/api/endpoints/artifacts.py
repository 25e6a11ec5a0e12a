"""
Artifact Read Endpoints
=======================

Plain catalog browsing (no filtering) and single-artifact detail for the
artifact page and 3D viewer.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from catalog.sql_store import SqlCatalogStore
from catalog.types import SORTABLE_FIELDS, SortDirection
from config.settings import ENRICH_MAX_WORKERS
from search.enrichment import ImageEnricher
from search.errors import FieldError, NotFound
from search.executor import SearchResultPage
from search.filter_state import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from services.catalog_services import get_store

logger = logging.getLogger(__name__)
router = APIRouter()


def _require_artifact(store: SqlCatalogStore, artifact_id: int):
    artifact = store.get_artifact(artifact_id)
    if artifact is None:
        raise NotFound("artifact", artifact_id)
    return artifact


def _bounded_int(
    raw: Optional[str], name: str, default: int, minimum: int, maximum: Optional[int], errors: List[FieldError]
) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        errors.append(FieldError(name, f"must be an integer, got '{raw}'"))
        return default
    if value < minimum or (maximum is not None and value > maximum):
        bounds = f"between {minimum} and {maximum}" if maximum is not None else f">= {minimum}"
        errors.append(FieldError(name, f"must be {bounds}"))
        return default
    return value


@router.get("/artifacts")
def list_artifacts(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    sortBy: str = Query("id"),
    sortDir: str = Query(SortDirection.DESC.value),
    store: SqlCatalogStore = Depends(get_store),
):
    errors: List[FieldError] = []
    page_number = _bounded_int(page, "page", 1, 1, None, errors)
    page_size = _bounded_int(limit, "limit", DEFAULT_PAGE_SIZE, 1, MAX_PAGE_SIZE, errors)
    if sortBy not in SORTABLE_FIELDS:
        errors.append(FieldError("sortBy", f"must be one of {', '.join(SORTABLE_FIELDS)}, got '{sortBy}'"))
    if sortDir not in (SortDirection.ASC.value, SortDirection.DESC.value):
        errors.append(FieldError("sortDir", f"must be asc or desc, got '{sortDir}'"))
    if errors:
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid list parameters", "errors": [e.to_dict() for e in errors]},
        )

    try:
        artifacts = store.list_artifacts(
            sort_field=sortBy,
            direction=SortDirection(sortDir),
            limit=page_size,
            offset=(page_number - 1) * page_size,
        )
        total = store.count_artifacts()
        items = ImageEnricher(store, max_workers=ENRICH_MAX_WORKERS).enrich([a.to_dict() for a in artifacts])
    except Exception as e:
        logger.exception(f"❌ API: Failed to list artifacts: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch artifacts")

    return SearchResultPage(items=items, page=page_number, page_size=page_size, total=total).to_dict()


@router.get("/artifacts/{artifact_id}")
def get_artifact(artifact_id: int, store: SqlCatalogStore = Depends(get_store)) -> Dict[str, Any]:
    try:
        artifact = _require_artifact(store, artifact_id)
        images = store.get_artifact_images(artifact_id)
        tags = store.get_tags_for_artifact(artifact_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    model = None
    if artifact.has_3d_model and artifact.model_url:
        model = {"url": artifact.model_url, "type": artifact.model_type}

    logger.info(f"🏺 API: Artifact {artifact_id} with {len(images)} images")
    return {
        "artifact": artifact.to_dict(),
        "images": [img.to_dict() for img in images],
        "tags": [tag.to_dict() for tag in tags],
        "model": model,
    }


@router.get("/artifacts/{artifact_id}/images")
def get_artifact_images(artifact_id: int, store: SqlCatalogStore = Depends(get_store)):
    try:
        _require_artifact(store, artifact_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return [img.to_dict() for img in store.get_artifact_images(artifact_id)]


@router.get("/artifacts/{artifact_id}/tags")
def get_artifact_tags(artifact_id: int, store: SqlCatalogStore = Depends(get_store)):
    try:
        _require_artifact(store, artifact_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return [tag.to_dict() for tag in store.get_tags_for_artifact(artifact_id)]
