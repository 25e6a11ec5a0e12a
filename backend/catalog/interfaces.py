from __future__ import annotations

from typing import List, Optional, Protocol

from .types import Artifact, ArtifactImage, FacetValue, SortDirection, Tag


class ArtifactStore(Protocol):
    """
    Read interface over stored artifact records.

    The search layer depends on this instead of a concrete database so the
    relational store can be swapped for a fake in tests.
    """

    def get_artifact(self, artifact_id: int) -> Optional[Artifact]:
        ...

    def list_artifacts(
        self,
        *,
        sort_field: str = "id",
        direction: SortDirection = SortDirection.DESC,
        limit: int = 12,
        offset: int = 0,
    ) -> List[Artifact]:
        ...

    def count_artifacts(self) -> int:
        ...


class ImageStore(Protocol):
    """
    Image storage is a separate source of truth, joined to artifacts on demand.
    """

    def get_artifact_images(self, artifact_id: int) -> List[ArtifactImage]:
        ...


class FacetSource(Protocol):
    """
    Enumerates facet values; backs the Facet Catalog Provider.
    """

    def distinct_values(self, facet: str) -> List[str]:
        ...

    def value_counts(self, facet: str) -> List[FacetValue]:
        ...


class TagStore(Protocol):
    def list_tags(self) -> List[Tag]:
        ...

    def get_tags_for_artifact(self, artifact_id: int) -> List[Tag]:
        ...
