"""
System Endpoints
================

Health check covering the process, the catalog database and the search
engine capability.
"""

import logging
import time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from catalog.sql_store import SqlCatalogStore
from search.engine import EngineCapability
from services.catalog_services import get_engine_capability, get_store
from utils.health_monitor import check_health as hm_check

logger = logging.getLogger(__name__)
router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    overall_status: str
    memory_usage_mb: float = 0.0
    cpu_percent: float = 0.0
    uptime_seconds: float = 0.0
    disk_free_mb: Optional[float] = None
    database: str
    search: Dict[str, Any]
    recommendations: List[str] = []
    errors: List[str] = []


_LAST_HEALTH_LOG_TS: float = 0.0


@router.get("/health", response_model=HealthResponse)
def check_system_health(
    store: SqlCatalogStore = Depends(get_store),
    capability: EngineCapability = Depends(get_engine_capability),
):
    global _LAST_HEALTH_LOG_TS
    health = hm_check() or {}
    errors: List[str] = []
    if health.get("error"):
        errors.append(str(health["error"]))

    database = "ok" if store.ping() else "unreachable"
    if database != "ok":
        errors.append("Catalog database unreachable")
    search = capability.status()

    overall = health.get("overall_status", "unknown")
    if database != "ok":
        overall = "error"
    elif search["engine"] == "unavailable" and overall == "healthy":
        overall = "degraded"

    msg = (
        f"🏥 HEALTH ► mem={health.get('memory_usage_mb', 0)}MB "
        f"db={database} engine={search['engine']} status={overall}"
    )
    now = time.time()
    if now - _LAST_HEALTH_LOG_TS > 60:
        logger.info(msg)
        _LAST_HEALTH_LOG_TS = now
    else:
        logger.debug(msg)

    return HealthResponse(
        status="ok" if database == "ok" else "error",
        overall_status=overall,
        memory_usage_mb=health.get("memory_usage_mb", 0.0),
        cpu_percent=health.get("cpu_percent", 0.0),
        uptime_seconds=health.get("uptime_seconds", 0.0),
        disk_free_mb=health.get("disk_free_mb"),
        database=database,
        search=search,
        recommendations=health.get("recommendations", []),
        errors=errors,
    )
