"""
Facet Catalog Provider
======================

Read-only enumeration of facet values (cultures, materials, periods, sites,
tags) and their artifact counts. The search core queries it to populate
filter widgets; it never owns or mutates the underlying records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from .interfaces import FacetSource
from .types import FacetValue

logger = logging.getLogger(__name__)

# Facets exposed by the catalog, in the order the filter sidebar shows them
CATALOG_FACETS = ("cultures", "materials", "tags", "sites")


@dataclass
class FacetCatalogProvider:
    source: FacetSource

    def values(self, facet: str) -> List[str]:
        """Sorted distinct values for one facet."""
        values = self.source.distinct_values(facet)
        logger.debug(f"🏷️ Facet '{facet}': {len(values)} values")
        return values

    def counts(self, facet: str) -> List[FacetValue]:
        return self.source.value_counts(facet)

    def snapshot(self) -> Dict[str, List[FacetValue]]:
        """Counts for every catalog facet in one call."""
        return {facet: self.counts(facet) for facet in CATALOG_FACETS}
