"""
SQL Catalog Store
=================

SQLAlchemy-backed implementation of the artifact, image, tag and facet
interfaces. Works against any SQLAlchemy URL; SQLite is the default for local
runs and tests.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from sqlalchemy import asc, create_engine, desc, func, select, text, update
from sqlalchemy.engine import Engine, make_url

from .tables import artifact_images, artifact_tags, artifacts, metadata, tags
from .types import (
    SORTABLE_FIELDS,
    Artifact,
    ArtifactImage,
    FacetValue,
    SortDirection,
    Tag,
)

logger = logging.getLogger(__name__)

# Facets backed by a single scalar column
_SCALAR_FACETS = {
    "cultures": artifacts.c.culture,
    "periods": artifacts.c.period,
    "sites": artifacts.c.site,
}
FACETS = ("cultures", "materials", "periods", "sites", "tags")


def _row_to_artifact(row: Any) -> Artifact:
    m = row._mapping
    return Artifact(
        id=m["id"],
        title=m["title"],
        description=m["description"],
        id_number=m["id_number"],
        culture=m["culture"],
        period=m["period"],
        date_start=m["date_start"],
        date_end=m["date_end"],
        materials=list(m["materials"] or []),
        dimensions=m["dimensions"],
        provenance=m["provenance"],
        findspot_lat=m["findspot_lat"],
        findspot_lng=m["findspot_lng"],
        site=m["site"],
        has_3d_model=bool(m["has_3d_model"]),
        model_url=m["model_url"],
        model_type=m["model_type"],
        created_at=m["created_at"],
    )


def _row_to_image(row: Any) -> ArtifactImage:
    m = row._mapping
    return ArtifactImage(
        id=m["id"],
        artifact_id=m["artifact_id"],
        url=m["url"],
        caption=m["caption"],
        is_primary=bool(m["is_primary"]),
        sort_order=m["sort_order"] or 0,
    )


class SqlCatalogStore:
    """
    Relational store for artifacts, images and tags.

    Last write wins; there is no conflict detection beyond what the database
    itself enforces (unique id_number, unique tag name).
    """

    def __init__(self, engine: Union[Engine, str]):
        if isinstance(engine, str):
            url = make_url(engine)
            if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
                Path(url.database).parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(engine, future=True)
        self.engine = engine

    def create_schema(self) -> None:
        metadata.create_all(self.engine)
        logger.info("🗄️ Catalog schema ready")

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"⚠️ Catalog database unreachable: {e}")
            return False

    # ------------------------------------------------------------------
    # Artifacts
    # ------------------------------------------------------------------

    def get_artifact(self, artifact_id: int) -> Optional[Artifact]:
        with self.engine.connect() as conn:
            row = conn.execute(select(artifacts).where(artifacts.c.id == artifact_id)).first()
        return _row_to_artifact(row) if row is not None else None

    def list_artifacts(
        self,
        *,
        sort_field: str = "id",
        direction: SortDirection = SortDirection.DESC,
        limit: int = 12,
        offset: int = 0,
    ) -> List[Artifact]:
        """
        One page of artifacts ordered by a single field, ties broken by id ascending.
        Rows missing the sort value come last in either direction, matching the
        engine's treatment of documents without the field.
        """
        if sort_field not in SORTABLE_FIELDS:
            raise ValueError(f"Unsupported sort field: {sort_field}")
        column = artifacts.c[sort_field]
        primary = asc(column) if SortDirection(direction) == SortDirection.ASC else desc(column)
        primary = primary.nulls_last()
        order = [primary] if sort_field == "id" else [primary, asc(artifacts.c.id)]

        stmt = select(artifacts).order_by(*order).limit(limit).offset(offset)
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).all()
        return [_row_to_artifact(r) for r in rows]

    def count_artifacts(self) -> int:
        with self.engine.connect() as conn:
            return int(conn.execute(select(func.count()).select_from(artifacts)).scalar_one())

    def iter_artifacts(self, batch_size: int = 500) -> Iterator[Artifact]:
        """All artifacts by ascending id, fetched in batches."""
        last_id = 0
        while True:
            stmt = (
                select(artifacts)
                .where(artifacts.c.id > last_id)
                .order_by(asc(artifacts.c.id))
                .limit(batch_size)
            )
            with self.engine.connect() as conn:
                rows = conn.execute(stmt).all()
            if not rows:
                return
            for row in rows:
                yield _row_to_artifact(row)
            last_id = rows[-1]._mapping["id"]

    def add_artifact(self, **fields: Any) -> Artifact:
        values: Dict[str, Any] = dict(fields)
        values["materials"] = list(values.get("materials") or [])
        with self.engine.begin() as conn:
            result = conn.execute(artifacts.insert().values(**values))
            new_id = result.inserted_primary_key[0]
        created = self.get_artifact(new_id)
        logger.info(f"🏺 Added artifact {new_id}: {values.get('title')}")
        return created  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def get_artifact_images(self, artifact_id: int) -> List[ArtifactImage]:
        stmt = (
            select(artifact_images)
            .where(artifact_images.c.artifact_id == artifact_id)
            .order_by(asc(artifact_images.c.sort_order), asc(artifact_images.c.id))
        )
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).all()
        return [_row_to_image(r) for r in rows]

    def add_image(
        self,
        artifact_id: int,
        url: str,
        *,
        caption: Optional[str] = None,
        is_primary: bool = False,
        sort_order: int = 0,
    ) -> ArtifactImage:
        with self.engine.begin() as conn:
            result = conn.execute(
                artifact_images.insert().values(
                    artifact_id=artifact_id,
                    url=url,
                    caption=caption,
                    is_primary=False,
                    sort_order=sort_order,
                )
            )
            image_id = result.inserted_primary_key[0]
        if is_primary:
            return self.set_primary_image(image_id)  # type: ignore[return-value]
        return self._get_image(image_id)  # type: ignore[return-value]

    def set_primary_image(self, image_id: int) -> Optional[ArtifactImage]:
        """Flag one image as primary and clear the flag on its siblings."""
        image = self._get_image(image_id)
        if image is None:
            return None
        with self.engine.begin() as conn:
            conn.execute(
                update(artifact_images)
                .where(artifact_images.c.artifact_id == image.artifact_id)
                .values(is_primary=False)
            )
            conn.execute(
                update(artifact_images)
                .where(artifact_images.c.id == image_id)
                .values(is_primary=True)
            )
        return self._get_image(image_id)

    def _get_image(self, image_id: int) -> Optional[ArtifactImage]:
        with self.engine.connect() as conn:
            row = conn.execute(select(artifact_images).where(artifact_images.c.id == image_id)).first()
        return _row_to_image(row) if row is not None else None

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def list_tags(self) -> List[Tag]:
        with self.engine.connect() as conn:
            rows = conn.execute(select(tags).order_by(asc(tags.c.name))).all()
        return [Tag(id=r._mapping["id"], name=r._mapping["name"]) for r in rows]

    def get_tags_for_artifact(self, artifact_id: int) -> List[Tag]:
        stmt = (
            select(tags.c.id, tags.c.name)
            .join(artifact_tags, artifact_tags.c.tag_id == tags.c.id)
            .where(artifact_tags.c.artifact_id == artifact_id)
            .order_by(asc(tags.c.name))
        )
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).all()
        return [Tag(id=r._mapping["id"], name=r._mapping["name"]) for r in rows]

    def add_tag(self, name: str) -> Tag:
        with self.engine.begin() as conn:
            result = conn.execute(tags.insert().values(name=name))
            tag_id = result.inserted_primary_key[0]
        return Tag(id=tag_id, name=name)

    def tag_artifact(self, artifact_id: int, tag_id: int) -> None:
        with self.engine.begin() as conn:
            conn.execute(artifact_tags.insert().values(artifact_id=artifact_id, tag_id=tag_id))

    # ------------------------------------------------------------------
    # Facets
    # ------------------------------------------------------------------

    def distinct_values(self, facet: str) -> List[str]:
        """Sorted distinct non-empty values for a facet."""
        return sorted(fv.value for fv in self.value_counts(facet))

    def value_counts(self, facet: str) -> List[FacetValue]:
        """
        Facet values with artifact counts, most frequent first, ties by value.
        """
        if facet not in FACETS:
            raise ValueError(f"Unknown facet: {facet}")

        counts: Counter = Counter()
        with self.engine.connect() as conn:
            if facet in _SCALAR_FACETS:
                column = _SCALAR_FACETS[facet]
                stmt = (
                    select(column, func.count(artifacts.c.id))
                    .where(column.is_not(None))
                    .group_by(column)
                )
                for value, n in conn.execute(stmt).all():
                    if value:
                        counts[value] += int(n)
            elif facet == "tags":
                stmt = (
                    select(tags.c.name, func.count(artifact_tags.c.artifact_id))
                    .join(artifact_tags, artifact_tags.c.tag_id == tags.c.id)
                    .group_by(tags.c.name)
                )
                for value, n in conn.execute(stmt).all():
                    counts[value] += int(n)
            else:
                # materials is a JSON list column; unnest in Python for portability
                for (materials,) in conn.execute(select(artifacts.c.materials)).all():
                    for material in set(materials or []):
                        if material:
                            counts[material] += 1

        return [
            FacetValue(value=value, count=n)
            for value, n in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
        ]
