from __future__ import annotations

from search.filter_state import FilterState

from .api_client import ClientResult, SearchResponse
from .view_model import ChipKind, DisplayState, FilterChip, build_chips, build_view, remove_chip


def _result(total: int, count: int, page: int = 1, limit: int = 12) -> ClientResult:
    pages = -(-total // limit) if total else 0
    return ClientResult(
        response=SearchResponse(
            artifacts=[{"id": i} for i in range(count)],
            page=page,
            limit=limit,
            total=total,
            total_pages=pages,
        ),
        status_code=200,
    )


def test_one_chip_per_active_value() -> None:
    state = FilterState(
        query_text="axe",
        cultures=("Roman", "Greek"),
        tags=("weapon",),
        date_start=-500,
        date_end=200,
        site="Pompeii",
        has_3d_model=True,
        page=3,
    )
    chips = build_chips(state)

    assert [c.kind for c in chips] == [
        ChipKind.QUERY,
        ChipKind.CULTURE,
        ChipKind.CULTURE,
        ChipKind.TAG,
        ChipKind.DATE_RANGE,
        ChipKind.SITE,
        ChipKind.HAS_3D_MODEL,
    ]
    assert chips[4].label == "500 BCE – 200 CE"


def test_default_state_has_no_chips() -> None:
    assert build_chips(FilterState()) == []


def test_removing_a_chip_undoes_only_that_value() -> None:
    state = FilterState(cultures=("Roman", "Greek"), date_start=-500, page=4)

    without_roman = remove_chip(state, FilterChip(ChipKind.CULTURE, "Roman", "Roman"))
    assert without_roman.cultures == ("Greek",)
    assert without_roman.date_start == -500
    assert without_roman.page == 1

    without_dates = remove_chip(state, FilterChip(ChipKind.DATE_RANGE, ""))
    assert not without_dates.has_custom_date_range()


def test_loading_state_wins() -> None:
    view = build_view(FilterState(), loading=True, result=_result(30, 12))
    assert view.display == DisplayState.LOADING
    assert view.cards == []


def test_error_is_never_shown_as_zero_results() -> None:
    view = build_view(FilterState(), loading=False, result=ClientResult(error="timeout"))
    assert view.display == DisplayState.ERROR
    assert view.error == "timeout"
    assert view.total is None


def test_empty_results() -> None:
    view = build_view(FilterState(cultures=("Atlantean",)), loading=False, result=_result(0, 0))
    assert view.display == DisplayState.EMPTY
    assert view.total == 0
    assert not view.pagination.visible


def test_results_with_pager() -> None:
    state = FilterState().set_page(5)
    view = build_view(state, loading=False, result=_result(120, 12, page=5))

    assert view.display == DisplayState.RESULTS
    assert len(view.cards) == 12
    assert view.pagination.items == [1, None, 4, 5, 6, None, 10]
    assert view.date_display == ("3000 BCE", "2000 CE")


def test_page_past_the_end_is_empty_but_keeps_the_pager() -> None:
    state = FilterState().set_page(5)
    view = build_view(state, loading=False, result=_result(20, 0, page=5))

    assert view.display == DisplayState.EMPTY
    assert view.total == 20
    assert view.pagination.visible
    assert view.pagination.items == [1, 2]
    assert view.pagination.has_previous
