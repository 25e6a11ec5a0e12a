from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from catalog.sql_store import SqlCatalogStore

from .compiler import QueryMode, compile_query
from .engine import EngineCapability, EngineHits
from .enrichment import ImageEnricher
from .errors import BackendUnavailable
from .executor import SearchExecutor, count_pages
from .filter_state import FilterState, SortMode
from .service import SearchService


@dataclass
class FakeBackend:
    hits: EngineHits = field(default_factory=lambda: EngineHits(total=0))
    fail: bool = False
    up: bool = True
    bodies: List[Dict[str, Any]] = field(default_factory=list)
    name: str = "elasticsearch"

    def ping(self) -> bool:
        return self.up

    def search(self, body: Dict[str, Any]) -> EngineHits:
        self.bodies.append(body)
        if self.fail:
            raise BackendUnavailable("connection refused")
        return self.hits

    def index_documents(self, documents) -> int:
        return 0


def _store(tmp_path: Path) -> SqlCatalogStore:
    store = SqlCatalogStore(f"sqlite:///{(tmp_path / 'catalog.db').as_posix()}")
    store.create_schema()
    return store


def _seed(store: SqlCatalogStore, count: int) -> None:
    for n in range(1, count + 1):
        artifact = store.add_artifact(
            title=f"Artifact {n}",
            description="",
            id_number=f"ACC-{n:04d}",
            culture="Roman" if n % 2 else "Greek",
            date_start=-100 * (n % 3),
        )
        store.add_image(artifact.id, f"/img/{n}.jpg")


def _executor(store: SqlCatalogStore, backend: FakeBackend) -> SearchExecutor:
    return SearchExecutor(store=store, enricher=ImageEnricher(store, max_workers=4), backend=backend)


def test_count_pages() -> None:
    assert count_pages(0, 12) == 0
    assert count_pages(12, 12) == 1
    assert count_pages(13, 12) == 2


def test_fallback_pages_by_id_desc_with_real_count(tmp_path) -> None:
    store = _store(tmp_path)
    _seed(store, 30)
    executor = _executor(store, FakeBackend())

    outcome = executor.execute(compile_query(FilterState(page=3), engine_available=False))

    assert outcome.ok
    page = outcome.page
    assert page.total == 30
    assert page.total_pages == 3
    assert [item.id for item in page.items] == [6, 5, 4, 3, 2, 1]
    assert page.items[0].primary_image_url == "/img/6.jpg"
    assert page.pagination() == {"page": 3, "limit": 12, "total": 30, "totalPages": 3}


def test_fallback_date_sort_is_deterministic_for_equal_dates(tmp_path) -> None:
    store = _store(tmp_path)
    _seed(store, 9)
    executor = _executor(store, FakeBackend())
    compiled = compile_query(FilterState(sort=SortMode.DATE_ASC, page_size=100), engine_available=False)

    first = [item.id for item in executor.execute(compiled).page.items]
    second = [item.id for item in executor.execute(compiled).page.items]

    assert first == second
    # date_start -200 for n%3==2, -100 for n%3==1, 0 for n%3==0; ties by id
    assert first == [2, 5, 8, 1, 4, 7, 3, 6, 9]


def test_engine_hits_are_enriched_in_hit_order(tmp_path) -> None:
    store = _store(tmp_path)
    _seed(store, 3)
    backend = FakeBackend(
        hits=EngineHits(
            total=25,
            documents=[{"id": 3, "title": "Artifact 3"}, {"id": 1, "title": "Artifact 1"}],
        )
    )
    executor = _executor(store, backend)

    outcome = executor.execute(compile_query(FilterState(query_text="artifact", page=2), engine_available=True))

    assert outcome.ok
    assert [item.id for item in outcome.page.items] == [3, 1]
    assert outcome.page.items[0].image_urls == ["/img/3.jpg"]
    assert outcome.page.total == 25
    assert backend.bodies[0]["from"] == 12

    data = outcome.to_dict()
    assert data["search"]["mode"] == "engine"
    assert data["artifacts"][1]["primary_image_url"] == "/img/1.jpg"


def test_engine_failure_is_a_typed_outcome(tmp_path) -> None:
    store = _store(tmp_path)
    executor = _executor(store, FakeBackend(fail=True))

    outcome = executor.execute(compile_query(FilterState(), engine_available=True))

    assert not outcome.ok
    assert outcome.page is None
    assert isinstance(outcome.failure, BackendUnavailable)


def test_service_degrades_to_fallback_when_engine_fails(tmp_path) -> None:
    store = _store(tmp_path)
    _seed(store, 5)
    backend = FakeBackend(fail=True)
    capability = EngineCapability(backend, ttl_seconds=60)
    service = SearchService(_executor(store, backend), capability, degrade_on_unavailable=True)

    outcome = service.search(FilterState(cultures=("Roman",)))

    assert outcome.ok
    assert outcome.query.mode == QueryMode.FALLBACK
    assert outcome.degraded_from is not None
    assert outcome.to_dict()["search"]["degradedFrom"] == "elasticsearch"
    assert outcome.to_dict()["search"]["ignoredFilters"] == ["cultures"]
    assert not capability.is_available()


def test_service_without_degradation_reports_failure(tmp_path) -> None:
    store = _store(tmp_path)
    backend = FakeBackend(fail=True)
    service = SearchService(
        _executor(store, backend),
        EngineCapability(backend, ttl_seconds=60),
        degrade_on_unavailable=False,
    )

    outcome = service.search(FilterState())
    assert not outcome.ok
    assert outcome.failure.reason == "connection refused"


def test_service_uses_fallback_when_engine_is_down_before_searching(tmp_path) -> None:
    store = _store(tmp_path)
    _seed(store, 2)
    backend = FakeBackend(up=False)
    service = SearchService(_executor(store, backend), EngineCapability(backend, ttl_seconds=60))

    outcome = service.search(FilterState())
    assert outcome.query.mode == QueryMode.FALLBACK
    assert outcome.degraded_from is None
    assert backend.bodies == []
