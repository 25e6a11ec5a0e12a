from __future__ import annotations

import pytest

from .filter_state import (
    DATE_MAX,
    DATE_MIN,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    Facet,
    FilterState,
    SortMode,
    normalize,
)


def _on_page_3() -> FilterState:
    return FilterState(cultures=("Roman",)).set_page(3)


def test_default_state_has_no_active_filters() -> None:
    state = FilterState()
    assert state.active_filters() == []
    assert state.date_range == (DATE_MIN, DATE_MAX)
    assert state.page == 1
    assert state.page_size == DEFAULT_PAGE_SIZE
    assert state.offset == 0


def test_every_filter_transition_returns_to_page_one() -> None:
    transitions = [
        lambda s: s.toggle_facet_value(Facet.MATERIALS, "bronze"),
        lambda s: s.with_facet_values(Facet.TAGS, ["weapon"]),
        lambda s: s.set_date_range(-500, 200),
        lambda s: s.clear_date_range(),
        lambda s: s.set_flag(True),
        lambda s: s.set_site("Pompeii"),
        lambda s: s.set_query_text("axe"),
        lambda s: s.set_sort(SortMode.AZ),
        lambda s: s.set_page_size(24),
    ]
    for transition in transitions:
        assert transition(_on_page_3()).page == 1


def test_set_page_keeps_filters_and_clamps_to_one() -> None:
    state = _on_page_3()
    assert state.page == 3
    assert state.cultures == ("Roman",)
    assert state.offset == 2 * DEFAULT_PAGE_SIZE
    assert state.set_page(0).page == 1


def test_toggle_adds_then_removes_a_value() -> None:
    state = FilterState().toggle_facet_value(Facet.CULTURES, "Roman")
    state = state.toggle_facet_value(Facet.CULTURES, "Greek")
    assert state.cultures == ("Roman", "Greek")

    state = state.toggle_facet_value(Facet.CULTURES, "Roman")
    assert state.cultures == ("Greek",)


def test_toggle_ignores_blank_values() -> None:
    state = FilterState()
    assert state.toggle_facet_value(Facet.TAGS, "  ") is state


def test_with_facet_values_deduplicates_in_first_seen_order() -> None:
    state = FilterState().with_facet_values(Facet.MATERIALS, ["iron", " bronze ", "iron", ""])
    assert state.materials == ("iron", "bronze")


def test_inverted_date_range_is_rejected() -> None:
    with pytest.raises(ValueError):
        FilterState().set_date_range(200, -500)


def test_reset_is_a_fresh_default_state() -> None:
    assert FilterState.reset() == FilterState()


def test_relevance_scoring_needs_a_query() -> None:
    assert not FilterState().uses_relevance_scoring()
    assert FilterState(query_text="axe").uses_relevance_scoring()
    assert not FilterState(query_text="axe", sort=SortMode.DATE_ASC).uses_relevance_scoring()


def test_active_filters_names_non_default_criteria() -> None:
    state = FilterState(
        query_text="axe",
        cultures=("Roman",),
        date_start=-500,
        site="Pompeii",
        has_3d_model=True,
    )
    assert state.active_filters() == ["query", "cultures", "dateRange", "site", "has3dModel"]


def test_blank_text_collapses_to_none() -> None:
    assert FilterState().set_query_text("   ").query_text is None
    assert FilterState().set_site("").site is None


def test_normalize_clamps_and_repairs() -> None:
    state = normalize(
        FilterState(
            query_text="  ",
            cultures=("Roman", "Roman", ""),
            date_start=-9000,
            date_end=9000,
            page=-4,
            page_size=1000,
        )
    )
    assert state.query_text is None
    assert state.cultures == ("Roman",)
    assert state.date_range == (DATE_MIN, DATE_MAX)
    assert state.page == 1
    assert state.page_size == MAX_PAGE_SIZE


def test_normalize_replaces_inverted_range_with_default() -> None:
    state = normalize(FilterState(date_start=500, date_end=-500))
    assert state.date_range == (DATE_MIN, DATE_MAX)
