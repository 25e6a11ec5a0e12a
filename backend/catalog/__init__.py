"""
Catalog package
===============

Record types for artifacts, images and tags, the storage interfaces the search
core depends on, and the SQLAlchemy store that implements them.
"""

from .facets import FacetCatalogProvider
from .sql_store import SqlCatalogStore
from .types import (
    Artifact,
    ArtifactImage,
    EnrichedArtifact,
    FacetValue,
    SortDirection,
    Tag,
)

__all__ = [
    "Artifact",
    "ArtifactImage",
    "EnrichedArtifact",
    "FacetValue",
    "SortDirection",
    "Tag",
    "FacetCatalogProvider",
    "SqlCatalogStore",
]
