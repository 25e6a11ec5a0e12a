"""
URL State Codec
===============

Lenient translation between a FilterState and the address-bar query string.

- Default-valued fields are omitted on serialize; absent fields parse to defaults.
- Multi-valued facets travel as one comma-joined parameter (repeated
  parameters are also accepted and merged).
- Unknown parameters are ignored and malformed numbers fall back to their
  defaults: a bad deep link never breaks the search page.

Parameter names are a public contract (bookmarks, shared links).
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode

from .filter_state import (
    DATE_MAX,
    DATE_MIN,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    FilterState,
    SortMode,
    normalize,
)

PARAM_QUERY = "query"
PARAM_CULTURES = "cultures"
PARAM_MATERIALS = "materials"
PARAM_TAGS = "tags"
PARAM_DATE_START = "dateStart"
PARAM_DATE_END = "dateEnd"
PARAM_SITE = "site"
PARAM_HAS_3D_MODEL = "has3dModel"
PARAM_SORT = "sort"
PARAM_PAGE = "page"
PARAM_LIMIT = "limit"


def escape_value(value: str) -> str:
    """Protect literal backslashes and commas inside one facet value."""
    return value.replace("\\", "\\\\").replace(",", "\\,")


def join_multi(values: Iterable[str]) -> str:
    return ",".join(escape_value(v) for v in values)


def _split_escaped(raw: str) -> List[str]:
    tokens: List[str] = []
    current: List[str] = []
    chars = iter(raw)
    for ch in chars:
        if ch == "\\":
            # a trailing lone backslash is kept as-is
            current.append(next(chars, "\\"))
        elif ch == ",":
            tokens.append("".join(current))
            current = []
        else:
            current.append(ch)
    tokens.append("".join(current))
    return tokens


def split_multi(raw_values: List[str]) -> List[str]:
    """
    Flatten repeated and comma-joined values into one list, dropping empty
    tokens. `\\,` is a literal comma inside a value and `\\\\` a backslash.
    """
    out: List[str] = []
    for raw in raw_values:
        for token in _split_escaped(raw or ""):
            token = token.strip()
            if token:
                out.append(token)
    return out


def group_params(query_string: str) -> Dict[str, List[str]]:
    """Query string -> {name: [values...]} preserving repeat order."""
    grouped: Dict[str, List[str]] = {}
    for key, value in parse_qsl(query_string.lstrip("?"), keep_blank_values=True):
        grouped.setdefault(key, []).append(value)
    return grouped


def _lenient_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except (ValueError, AttributeError):
        return None


def parse(query_string: str) -> FilterState:
    """Hydrate a FilterState from a URL query string. Never raises."""
    params = group_params(query_string or "")

    def first(name: str) -> Optional[str]:
        values = params.get(name)
        return values[0] if values else None

    date_start = _lenient_int(first(PARAM_DATE_START))
    date_end = _lenient_int(first(PARAM_DATE_END))
    page = _lenient_int(first(PARAM_PAGE))
    limit = _lenient_int(first(PARAM_LIMIT))

    try:
        sort = SortMode(first(PARAM_SORT) or SortMode.RELEVANCE.value)
    except ValueError:
        sort = SortMode.RELEVANCE

    state = FilterState(
        query_text=first(PARAM_QUERY),
        cultures=tuple(split_multi(params.get(PARAM_CULTURES, []))),
        materials=tuple(split_multi(params.get(PARAM_MATERIALS, []))),
        tags=tuple(split_multi(params.get(PARAM_TAGS, []))),
        date_start=date_start if date_start is not None else DATE_MIN,
        date_end=date_end if date_end is not None else DATE_MAX,
        has_3d_model=first(PARAM_HAS_3D_MODEL) == "true",
        site=first(PARAM_SITE),
        sort=sort,
        page=page if page is not None and page >= 1 else 1,
        page_size=limit if limit is not None and limit >= 1 else DEFAULT_PAGE_SIZE,
    )
    return normalize(state)


def to_pairs(state: FilterState) -> List[Tuple[str, str]]:
    """Ordered (name, value) pairs for the non-default fields of a state."""
    pairs: List[Tuple[str, str]] = []
    if state.query_text:
        pairs.append((PARAM_QUERY, state.query_text))
    if state.cultures:
        pairs.append((PARAM_CULTURES, join_multi(state.cultures)))
    if state.materials:
        pairs.append((PARAM_MATERIALS, join_multi(state.materials)))
    if state.date_start != DATE_MIN:
        pairs.append((PARAM_DATE_START, str(state.date_start)))
    if state.date_end != DATE_MAX:
        pairs.append((PARAM_DATE_END, str(state.date_end)))
    if state.tags:
        pairs.append((PARAM_TAGS, join_multi(state.tags)))
    if state.site:
        pairs.append((PARAM_SITE, state.site))
    if state.has_3d_model:
        pairs.append((PARAM_HAS_3D_MODEL, "true"))
    if state.sort != SortMode.RELEVANCE:
        pairs.append((PARAM_SORT, state.sort.value))
    if state.page != 1:
        pairs.append((PARAM_PAGE, str(state.page)))
    if state.page_size != DEFAULT_PAGE_SIZE:
        pairs.append((PARAM_LIMIT, str(min(state.page_size, MAX_PAGE_SIZE))))
    return pairs


def serialize(state: FilterState) -> str:
    """FilterState -> query string without a leading '?'. Default state -> ''."""
    return urlencode(to_pairs(state), safe=",")
