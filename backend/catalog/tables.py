"""
Relational schema for the artifact catalog.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


artifacts = Table(
    "artifacts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text, nullable=False),
    Column("description", Text, nullable=False),
    Column("culture", Text),
    Column("period", Text),
    Column("date_start", Integer),
    Column("date_end", Integer),
    Column("materials", JSON),  # ordered list of material names
    Column("dimensions", Text),
    Column("provenance", Text),
    Column("id_number", String(64), nullable=False, unique=True),
    Column("findspot_lat", Float),
    Column("findspot_lng", Float),
    Column("site", Text),
    Column("has_3d_model", Boolean, default=False),
    Column("model_url", Text),
    Column("model_type", String(16)),
    Column("created_at", DateTime, default=_utcnow),
)

artifact_images = Table(
    "artifact_images",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("artifact_id", Integer, ForeignKey("artifacts.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("url", Text, nullable=False),
    Column("caption", Text),
    Column("is_primary", Boolean, default=False),
    Column("sort_order", Integer, default=0),
)

tags = Table(
    "tags",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(128), nullable=False, unique=True),
)

artifact_tags = Table(
    "artifact_tags",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("artifact_id", Integer, ForeignKey("artifacts.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False),
    UniqueConstraint("artifact_id", "tag_id", name="uq_artifact_tag"),
)
