"""
Image enrichment for search hits.

Artifact records and image records are separate sources of truth; each page of
hits is joined with its images on demand. Lookups for one page run
concurrently, and results are reassembled by index so completion order never
leaks into the output order.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Sequence

from catalog.interfaces import ImageStore
from catalog.types import EnrichedArtifact, order_images, pick_primary_image

from .filter_state import MAX_PAGE_SIZE

logger = logging.getLogger(__name__)

# Stale engine-side copies of derived fields are always replaced
_DERIVED_FIELDS = ("image_urls", "primary_image_url")


class ImageEnricher:
    def __init__(self, images: ImageStore, max_workers: int = 8):
        self.images = images
        self.max_workers = max(1, min(int(max_workers), MAX_PAGE_SIZE))

    def enrich_one(self, record: Dict[str, Any]) -> EnrichedArtifact:
        base = {k: v for k, v in record.items() if k not in _DERIVED_FIELDS}
        artifact_id = base.get("id")
        if artifact_id is None:
            return EnrichedArtifact(record=base)

        images = order_images(self.images.get_artifact_images(int(artifact_id)))
        primary = pick_primary_image(images)
        return EnrichedArtifact(
            record=base,
            image_urls=[img.url for img in images],
            primary_image_url=primary.url if primary else None,
        )

    def enrich(self, records: Sequence[Dict[str, Any]]) -> List[EnrichedArtifact]:
        if not records:
            return []
        workers = min(self.max_workers, len(records))
        if workers == 1:
            return [self.enrich_one(r) for r in records]

        # map() yields in submission order regardless of which lookup finishes first
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="enrich") as pool:
            enriched = list(pool.map(self.enrich_one, records))
        logger.debug(f"🖼️ Enriched {len(enriched)} hits with {workers} workers")
        return enriched
