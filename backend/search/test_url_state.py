from __future__ import annotations

from .filter_state import DATE_MAX, DATE_MIN, DEFAULT_PAGE_SIZE, Facet, FilterState, SortMode, normalize
from .url_state import parse, serialize


def test_default_state_serializes_to_empty_string() -> None:
    assert serialize(FilterState()) == ""
    assert parse("") == FilterState()


def test_only_non_default_fields_are_written() -> None:
    state = FilterState(cultures=("Roman", "Greek"), date_start=-500)
    assert serialize(state) == "cultures=Roman,Greek&dateStart=-500"


def test_full_state_survives_a_round_trip() -> None:
    state = FilterState(
        query_text="bronze axe",
        cultures=("Roman", "Celtic"),
        materials=("bronze",),
        tags=("weapon", "ritual"),
        date_start=-500,
        date_end=200,
        has_3d_model=True,
        site="Hallstatt",
        sort=SortMode.DATE_DESC,
        page=3,
        page_size=24,
    )
    assert parse(serialize(state)) == state


def test_repeated_and_comma_joined_params_merge() -> None:
    state = parse("cultures=Roman&cultures=Greek,Celtic&materials=,bronze,")
    assert state.cultures == ("Roman", "Greek", "Celtic")
    assert state.materials == ("bronze",)


def test_unknown_params_are_ignored() -> None:
    assert parse("utm_source=newsletter&foo=bar") == FilterState()


def test_malformed_numbers_fall_back_to_defaults() -> None:
    state = parse("dateStart=abc&dateEnd=&page=zero&limit=-3&sort=shuffle")
    assert state.date_range == (DATE_MIN, DATE_MAX)
    assert state.page == 1
    assert state.page_size == DEFAULT_PAGE_SIZE
    assert state.sort == SortMode.RELEVANCE


def test_out_of_range_dates_are_clamped() -> None:
    state = parse("dateStart=-10000&dateEnd=5000")
    assert state.date_range == (DATE_MIN, DATE_MAX)


def test_inverted_dates_fall_back_to_default_range() -> None:
    state = parse("dateStart=200&dateEnd=-500")
    assert state.date_range == (DATE_MIN, DATE_MAX)


def test_has_3d_model_only_accepts_literal_true() -> None:
    assert parse("has3dModel=true").has_3d_model is True
    assert parse("has3dModel=1").has_3d_model is False


def test_leading_question_mark_and_encoding() -> None:
    state = parse("?query=bronze%20axe&site=Tell%20el-Amarna")
    assert state.query_text == "bronze axe"
    assert state.site == "Tell el-Amarna"
    assert parse(serialize(state)) == state


def test_parse_of_serialize_equals_normalize() -> None:
    state = FilterState(
        cultures=("Roman", "", "Roman"),
        date_start=-9000,
        date_end=1500,
        page=2,
        page_size=1000,
        site="  ",
    )
    assert parse(serialize(state)) == normalize(state)


def test_facet_values_with_commas_survive_a_round_trip() -> None:
    state = (
        FilterState()
        .toggle_facet_value(Facet.CULTURES, "Greek, Hellenistic")
        .toggle_facet_value(Facet.CULTURES, "Roman")
        .toggle_facet_value(Facet.MATERIALS, "back\\slash")
    )
    query = serialize(state)

    assert query.startswith("cultures=Greek%5C,+Hellenistic,Roman")
    assert parse(query) == normalize(state)
    assert parse(query).cultures == ("Greek, Hellenistic", "Roman")
    assert parse(query).materials == ("back\\slash",)
