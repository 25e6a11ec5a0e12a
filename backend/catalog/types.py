from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# Columns the relational store accepts as a primary sort key
SORTABLE_FIELDS = ("id", "title", "date_start", "date_end", "created_at")


@dataclass
class Artifact:
    """
    Stored artifact record.

    Dates are signed years (negative = BCE). `materials` is an ordered list of
    free-text material names.
    """

    id: int
    title: str
    description: str
    id_number: str
    culture: Optional[str] = None
    period: Optional[str] = None
    date_start: Optional[int] = None
    date_end: Optional[int] = None
    materials: List[str] = field(default_factory=list)
    dimensions: Optional[str] = None
    provenance: Optional[str] = None
    findspot_lat: Optional[float] = None
    findspot_lng: Optional[float] = None
    site: Optional[str] = None
    has_3d_model: bool = False
    model_url: Optional[str] = None
    model_type: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        return data


@dataclass
class ArtifactImage:
    id: int
    artifact_id: int
    url: str
    caption: Optional[str] = None
    is_primary: bool = False
    sort_order: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Tag:
    id: int
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class FacetValue:
    """One enumerable facet value and the number of artifacts carrying it."""

    value: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "count": self.count}


@dataclass
class EnrichedArtifact:
    """
    An artifact record joined with its images at query time.

    `record` is the artifact as the backend returned it (a stored row or an
    engine document); image fields are always recomputed from image storage.
    """

    record: Dict[str, Any]
    image_urls: List[str] = field(default_factory=list)
    primary_image_url: Optional[str] = None

    @property
    def id(self) -> Any:
        return self.record.get("id")

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.record)
        data["image_urls"] = list(self.image_urls)
        data["primary_image_url"] = self.primary_image_url
        return data


def order_images(images: Sequence[ArtifactImage]) -> List[ArtifactImage]:
    """Images in their defined display order: sort_order, then id."""

    return sorted(images, key=lambda img: (img.sort_order, img.id))


def pick_primary_image(images: Sequence[ArtifactImage]) -> Optional[ArtifactImage]:
    """
    First image flagged primary, else the first by sort order, else None.
    """

    ordered = order_images(images)
    for img in ordered:
        if img.is_primary:
            return img
    return ordered[0] if ordered else None
