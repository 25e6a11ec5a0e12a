"""
Search Index Maintenance
========================

Builds engine documents from the relational catalog and bulk-loads them.
Facet fields are keywords so `terms` filters match exact values; the title
keeps a keyword sub-field for A-Z sorting.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence

from catalog.types import Artifact, ArtifactImage, Tag, order_images, pick_primary_image

from .engine import SearchBackend

logger = logging.getLogger(__name__)

INDEX_MAPPING: Dict[str, Any] = {
    "settings": {"number_of_shards": 1, "number_of_replicas": 0},
    "mappings": {
        "properties": {
            "id": {"type": "integer"},
            "title": {"type": "text", "fields": {"keyword": {"type": "keyword"}}},
            "description": {"type": "text"},
            "culture": {"type": "keyword"},
            "period": {"type": "keyword"},
            "date_start": {"type": "integer"},
            "date_end": {"type": "integer"},
            "materials": {"type": "keyword"},
            "id_number": {"type": "keyword"},
            "image_urls": {"type": "keyword", "index": False},
            "primary_image_url": {"type": "keyword", "index": False},
            "has_3d_model": {"type": "boolean"},
            "model_url": {"type": "keyword", "index": False},
            "model_type": {"type": "keyword"},
            "tags": {"type": "keyword"},
            "location": {"type": "geo_point"},
            "site": {"type": "keyword"},
        }
    },
}


def build_index_document(
    artifact: Artifact,
    images: Sequence[ArtifactImage] = (),
    tags: Sequence[Tag] = (),
) -> Dict[str, Any]:
    """Engine document for one artifact; None-valued fields are left out."""
    ordered = order_images(images)
    primary = pick_primary_image(ordered)

    location: Optional[Dict[str, float]] = None
    if artifact.findspot_lat is not None and artifact.findspot_lng is not None:
        location = {"lat": float(artifact.findspot_lat), "lon": float(artifact.findspot_lng)}

    doc: Dict[str, Any] = {
        "id": artifact.id,
        "title": artifact.title,
        "description": artifact.description,
        "culture": artifact.culture,
        "period": artifact.period,
        "date_start": artifact.date_start,
        "date_end": artifact.date_end,
        "materials": list(artifact.materials or []),
        "id_number": artifact.id_number,
        "image_urls": [img.url for img in ordered],
        "primary_image_url": primary.url if primary else None,
        "has_3d_model": bool(artifact.has_3d_model),
        "model_url": artifact.model_url,
        "model_type": artifact.model_type,
        "tags": [t.name for t in tags],
        "location": location,
        "site": artifact.site,
    }
    return {k: v for k, v in doc.items() if v is not None}


def iter_index_documents(store: Any, batch_size: int = 500) -> Iterator[Dict[str, Any]]:
    for artifact in store.iter_artifacts(batch_size=batch_size):
        yield build_index_document(
            artifact,
            store.get_artifact_images(artifact.id),
            store.get_tags_for_artifact(artifact.id),
        )


def reindex_all(store: Any, backend: SearchBackend, batch_size: int = 500) -> int:
    """
    Push every stored artifact into the engine. Returns the number indexed.
    """
    logger.info("📚 Reindexing catalog into search engine")
    batch: List[Dict[str, Any]] = []
    indexed = 0
    for doc in iter_index_documents(store, batch_size=batch_size):
        batch.append(doc)
        if len(batch) >= batch_size:
            indexed += backend.index_documents(batch)
            batch = []
    if batch:
        indexed += backend.index_documents(batch)
    logger.info(f"✅ Reindexed {indexed} artifacts")
    return indexed
