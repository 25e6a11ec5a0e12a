from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from catalog.types import Artifact, ArtifactImage, Tag

from .indexer import INDEX_MAPPING, build_index_document, reindex_all


@dataclass
class FakeStore:
    artifacts: List[Artifact] = field(default_factory=list)

    def iter_artifacts(self, batch_size: int = 500):
        return iter(self.artifacts)

    def get_artifact_images(self, artifact_id: int) -> List[ArtifactImage]:
        return [ArtifactImage(id=artifact_id, artifact_id=artifact_id, url=f"/img/{artifact_id}.jpg")]

    def get_tags_for_artifact(self, artifact_id: int) -> List[Tag]:
        return [Tag(id=1, name="weapon")]


@dataclass
class RecordingBackend:
    batches: List[List[Dict[str, Any]]] = field(default_factory=list)
    name: str = "recording"

    def ping(self) -> bool:
        return True

    def search(self, body):
        raise NotImplementedError

    def index_documents(self, documents) -> int:
        batch = list(documents)
        self.batches.append(batch)
        return len(batch)


def _artifact(n: int, **fields) -> Artifact:
    return Artifact(id=n, title=f"Artifact {n}", description="", id_number=f"ACC-{n}", **fields)


def test_document_mirrors_record_with_location_and_tags() -> None:
    artifact = _artifact(
        1,
        culture="Roman",
        materials=["bronze"],
        date_start=-50,
        date_end=50,
        findspot_lat=40.75,
        findspot_lng=14.48,
        has_3d_model=True,
    )
    images = [
        ArtifactImage(id=2, artifact_id=1, url="/b.jpg", sort_order=1),
        ArtifactImage(id=1, artifact_id=1, url="/a.jpg", sort_order=0),
    ]
    doc = build_index_document(artifact, images, [Tag(id=1, name="weapon")])

    assert doc["culture"] == "Roman"
    assert doc["materials"] == ["bronze"]
    assert doc["location"] == {"lat": 40.75, "lon": 14.48}
    assert doc["tags"] == ["weapon"]
    assert doc["image_urls"] == ["/a.jpg", "/b.jpg"]
    assert doc["primary_image_url"] == "/a.jpg"
    assert doc["has_3d_model"] is True


def test_missing_values_are_left_out() -> None:
    doc = build_index_document(_artifact(1))
    assert "location" not in doc
    assert "culture" not in doc
    assert "primary_image_url" not in doc
    assert doc["image_urls"] == []


def test_mapping_supports_keyword_title_sort() -> None:
    title = INDEX_MAPPING["mappings"]["properties"]["title"]
    assert title["fields"]["keyword"]["type"] == "keyword"


def test_reindex_all_sends_batches() -> None:
    store = FakeStore([_artifact(n) for n in range(1, 6)])
    backend = RecordingBackend()

    assert reindex_all(store, backend, batch_size=2) == 5
    assert [len(b) for b in backend.batches] == [2, 2, 1]
    assert backend.batches[0][0]["primary_image_url"] == "/img/1.jpg"
