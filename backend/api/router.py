"""
Central API Router
Combines all API endpoints into a single router for main.py
"""
from fastapi import APIRouter

from api import logs
from api.endpoints import artifacts, facets, search, system

# Create the main API router
api_router = APIRouter()

api_router.include_router(search.router, prefix="/api", tags=["search"])
api_router.include_router(facets.router, prefix="/api", tags=["facets"])
api_router.include_router(artifacts.router, prefix="/api", tags=["artifacts"])
api_router.include_router(system.router, prefix="/api", tags=["system"])
api_router.include_router(logs.router)


@api_router.get("/api")
async def api_root():
    """API root endpoint for discovery"""
    return {
        "message": "Artifact Catalog API v1.0",
        "documentation": "/docs",
        "endpoints": {
            "search": "/api/search - Faceted artifact search (query, cultures, materials, tags, dateStart, dateEnd, site, has3dModel, sort, page, limit)",
            "cultures": "/api/cultures - Distinct cultures",
            "materials": "/api/materials - Distinct materials",
            "periods": "/api/periods - Distinct periods",
            "tags": "/api/tags - All tags",
            "facets": "/api/facets - Facet value counts",
            "artifacts": "/api/artifacts - Paged catalog listing",
            "artifact": "/api/artifacts/{id} - Artifact detail with images, tags and 3D model",
            "health": "/api/health - System, database and search engine health",
            "logs": "/logs/recent - Recent log records",
        },
    }
