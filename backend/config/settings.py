"""
Central configuration for backend settings.
"""
import os
from pathlib import Path


_BACKEND_ROOT = Path(__file__).resolve().parents[1]

# Relational catalog (artifacts, images, tags)
DATABASE_URL: str = os.getenv(
    "DATABASE_URL",
    f"sqlite:///{(_BACKEND_ROOT / 'data' / 'catalog.db').as_posix()}",
)

# Full-text engine. Unset means "not configured": search always runs in fallback mode.
ELASTICSEARCH_URL: str = os.getenv("ELASTICSEARCH_URL", "")
ELASTICSEARCH_INDEX: str = os.getenv("ELASTICSEARCH_INDEX", "artifacts")
ELASTICSEARCH_TIMEOUT_SECONDS: float = float(os.getenv("ELASTICSEARCH_TIMEOUT_SECONDS", "10"))

# How long a ping result is trusted before the engine is probed again
ENGINE_PROBE_TTL_SECONDS: float = float(os.getenv("ENGINE_PROBE_TTL_SECONDS", "30"))

# When the engine is configured but unreachable: degrade to fallback (true) or answer 503 (false)
SEARCH_DEGRADE_ON_UNAVAILABLE: bool = os.getenv("SEARCH_DEGRADE_ON_UNAVAILABLE", "true").lower() in ("true", "1", "yes")

# Image enrichment fan-out cap per page
ENRICH_MAX_WORKERS: int = int(os.getenv("ENRICH_MAX_WORKERS", "8"))

# Client side
CATALOG_API_URL: str = os.getenv("CATALOG_API_URL", "http://localhost:8000")
CATALOG_API_TIMEOUT_SECONDS: float = float(os.getenv("CATALOG_API_TIMEOUT_SECONDS", "15"))
