"""
Facet Catalog Endpoints
=======================

Distinct values for the filter sidebar, and value counts for all catalog
facets at once.
"""

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from catalog.facets import FacetCatalogProvider
from catalog.sql_store import SqlCatalogStore
from services.catalog_services import get_facet_provider, get_store

logger = logging.getLogger(__name__)
router = APIRouter()


class FacetCount(BaseModel):
    value: str
    count: int


class TagResponse(BaseModel):
    id: int
    name: str


class FacetCountsResponse(BaseModel):
    cultures: List[FacetCount] = []
    materials: List[FacetCount] = []
    tags: List[FacetCount] = []
    sites: List[FacetCount] = []


def _values(provider: FacetCatalogProvider, facet: str) -> List[str]:
    try:
        return provider.values(facet)
    except Exception as e:
        logger.exception(f"❌ API: Failed to list {facet}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch {facet}")


@router.get("/cultures", response_model=List[str])
def list_cultures(provider: FacetCatalogProvider = Depends(get_facet_provider)):
    return _values(provider, "cultures")


@router.get("/materials", response_model=List[str])
def list_materials(provider: FacetCatalogProvider = Depends(get_facet_provider)):
    return _values(provider, "materials")


@router.get("/periods", response_model=List[str])
def list_periods(provider: FacetCatalogProvider = Depends(get_facet_provider)):
    return _values(provider, "periods")


@router.get("/tags", response_model=List[TagResponse])
def list_tags(store: SqlCatalogStore = Depends(get_store)):
    try:
        return [tag.to_dict() for tag in store.list_tags()]
    except Exception as e:
        logger.exception(f"❌ API: Failed to list tags: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch tags")


@router.get("/facets", response_model=FacetCountsResponse)
def facet_counts(provider: FacetCatalogProvider = Depends(get_facet_provider)):
    try:
        snapshot = provider.snapshot()
    except Exception as e:
        logger.exception(f"❌ API: Failed to build facet counts: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch facet counts")
    data: Dict[str, List[Dict[str, object]]] = {
        facet: [fv.to_dict() for fv in values] for facet, values in snapshot.items()
    }
    return data
