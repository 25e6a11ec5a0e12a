from __future__ import annotations

from pathlib import Path

import pytest

from .sql_store import SqlCatalogStore
from .types import SortDirection


def _store(tmp_path: Path) -> SqlCatalogStore:
    store = SqlCatalogStore(f"sqlite:///{(tmp_path / 'catalog.db').as_posix()}")
    store.create_schema()
    return store


def _add(store: SqlCatalogStore, n: int, **fields):
    values = {
        "title": f"Artifact {n}",
        "description": f"Description {n}",
        "id_number": f"ACC-{n:04d}",
    }
    values.update(fields)
    return store.add_artifact(**values)


def test_add_and_get_artifact_round_trips_fields(tmp_path) -> None:
    store = _store(tmp_path)
    created = _add(
        store,
        1,
        culture="Roman",
        period="Classical",
        date_start=-50,
        date_end=150,
        materials=["bronze", "iron"],
        site="Pompeii",
        has_3d_model=True,
        model_url="/models/1.glb",
        model_type="glb",
    )

    fetched = store.get_artifact(created.id)
    assert fetched is not None
    assert fetched.title == "Artifact 1"
    assert fetched.materials == ["bronze", "iron"]
    assert fetched.has_3d_model is True
    assert fetched.created_at is not None
    assert store.get_artifact(9999) is None


def test_list_artifacts_breaks_ties_by_id_ascending(tmp_path) -> None:
    store = _store(tmp_path)
    a = _add(store, 1, date_start=-100)
    b = _add(store, 2, date_start=-500)
    c = _add(store, 3, date_start=-100)

    asc_ids = [x.id for x in store.list_artifacts(sort_field="date_start", direction=SortDirection.ASC)]
    assert asc_ids == [b.id, a.id, c.id]

    desc_ids = [x.id for x in store.list_artifacts(sort_field="date_start", direction=SortDirection.DESC)]
    assert desc_ids == [a.id, c.id, b.id]


def test_undated_artifacts_sort_last_in_both_directions(tmp_path) -> None:
    store = _store(tmp_path)
    undated = _add(store, 1)
    older = _add(store, 2, date_start=-500)
    newer = _add(store, 3, date_start=-100)

    asc_ids = [x.id for x in store.list_artifacts(sort_field="date_start", direction=SortDirection.ASC)]
    assert asc_ids == [older.id, newer.id, undated.id]

    desc_ids = [x.id for x in store.list_artifacts(sort_field="date_start", direction=SortDirection.DESC)]
    assert desc_ids == [newer.id, older.id, undated.id]


def test_list_artifacts_pages_with_limit_and_offset(tmp_path) -> None:
    store = _store(tmp_path)
    ids = [_add(store, n).id for n in range(1, 6)]

    page = store.list_artifacts(sort_field="id", direction=SortDirection.ASC, limit=2, offset=2)
    assert [a.id for a in page] == ids[2:4]
    assert store.count_artifacts() == 5


def test_list_artifacts_rejects_unknown_sort_field(tmp_path) -> None:
    store = _store(tmp_path)
    with pytest.raises(ValueError):
        store.list_artifacts(sort_field="description; DROP TABLE artifacts")


def test_iter_artifacts_spans_batches(tmp_path) -> None:
    store = _store(tmp_path)
    for n in range(1, 8):
        _add(store, n)

    assert [a.id for a in store.iter_artifacts(batch_size=3)] == list(range(1, 8))


def test_images_are_ordered_and_primary_is_exclusive(tmp_path) -> None:
    store = _store(tmp_path)
    artifact = _add(store, 1)
    first = store.add_image(artifact.id, "/img/a.jpg", sort_order=2, is_primary=True)
    second = store.add_image(artifact.id, "/img/b.jpg", sort_order=1)
    store.add_image(artifact.id, "/img/c.jpg", sort_order=1)

    images = store.get_artifact_images(artifact.id)
    assert [img.url for img in images] == ["/img/b.jpg", "/img/c.jpg", "/img/a.jpg"]
    assert [img.is_primary for img in images] == [False, False, True]

    store.set_primary_image(second.id)
    primaries = [img.id for img in store.get_artifact_images(artifact.id) if img.is_primary]
    assert primaries == [second.id]
    assert first.id not in primaries
    assert store.set_primary_image(12345) is None


def test_tags_for_artifact_sorted_by_name(tmp_path) -> None:
    store = _store(tmp_path)
    artifact = _add(store, 1)
    weapon = store.add_tag("weapon")
    ritual = store.add_tag("ritual")
    store.tag_artifact(artifact.id, weapon.id)
    store.tag_artifact(artifact.id, ritual.id)

    assert [t.name for t in store.get_tags_for_artifact(artifact.id)] == ["ritual", "weapon"]
    assert [t.name for t in store.list_tags()] == ["ritual", "weapon"]


def test_facet_counts_unnest_materials_and_order_by_count(tmp_path) -> None:
    store = _store(tmp_path)
    _add(store, 1, culture="Roman", materials=["bronze", "iron"], site="Pompeii")
    _add(store, 2, culture="Roman", materials=["bronze"])
    _add(store, 3, culture="Egyptian", materials=["gold", "bronze"])
    _add(store, 4, culture=None, materials=[])

    cultures = store.value_counts("cultures")
    assert [(fv.value, fv.count) for fv in cultures] == [("Roman", 2), ("Egyptian", 1)]

    materials = store.value_counts("materials")
    assert [(fv.value, fv.count) for fv in materials] == [("bronze", 3), ("gold", 1), ("iron", 1)]

    assert store.distinct_values("cultures") == ["Egyptian", "Roman"]
    assert store.distinct_values("sites") == ["Pompeii"]


def test_unknown_facet_is_rejected(tmp_path) -> None:
    store = _store(tmp_path)
    with pytest.raises(ValueError):
        store.value_counts("colors")


def test_ping_reports_reachable_database(tmp_path) -> None:
    assert _store(tmp_path).ping() is True
