"""
Search Parameter Parser (API boundary)
======================================

Strict counterpart of the URL codec. Malformed or out-of-range parameters are
reported back to the caller as field errors instead of being silently
corrected; nothing here raises for bad input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence

from .errors import FieldError
from .filter_state import (
    DATE_MAX,
    DATE_MIN,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    FilterState,
    SortMode,
    normalize_values,
)
from .url_state import (
    PARAM_CULTURES,
    PARAM_DATE_END,
    PARAM_DATE_START,
    PARAM_HAS_3D_MODEL,
    PARAM_LIMIT,
    PARAM_MATERIALS,
    PARAM_PAGE,
    PARAM_QUERY,
    PARAM_SITE,
    PARAM_SORT,
    PARAM_TAGS,
    split_multi,
)

SORT_VALUES = tuple(m.value for m in SortMode)


@dataclass
class ParseResult:
    """Either a validated FilterState or the list of offending fields."""

    state: Optional[FilterState] = None
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state is not None and not self.errors

    def error_payload(self) -> dict:
        return {
            "message": "Invalid search parameters",
            "errors": [e.to_dict() for e in self.errors],
        }


def _first(params: Mapping[str, Sequence[str]], name: str) -> Optional[str]:
    values = params.get(name) or []
    for v in values:
        if v is not None and v.strip() != "":
            return v.strip()
    return None


def _int_field(
    params: Mapping[str, Sequence[str]],
    name: str,
    errors: List[FieldError],
    *,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> Optional[int]:
    raw = _first(params, name)
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        errors.append(FieldError(name, f"must be an integer, got '{raw}'"))
        return None
    if minimum is not None and value < minimum:
        errors.append(FieldError(name, f"must be >= {minimum}"))
        return None
    if maximum is not None and value > maximum:
        errors.append(FieldError(name, f"must be <= {maximum}"))
        return None
    return value


def parse_search_params(params: Mapping[str, Sequence[str]]) -> ParseResult:
    """
    Validate raw multi-valued query parameters into a FilterState.

    `params` maps each parameter name to every value it was given, so a facet
    sent as `cultures=A,B` and as `cultures=A&cultures=B` parse identically.
    """
    errors: List[FieldError] = []

    date_start = _int_field(params, PARAM_DATE_START, errors, minimum=DATE_MIN, maximum=DATE_MAX)
    date_end = _int_field(params, PARAM_DATE_END, errors, minimum=DATE_MIN, maximum=DATE_MAX)
    page = _int_field(params, PARAM_PAGE, errors, minimum=1)
    limit = _int_field(params, PARAM_LIMIT, errors, minimum=1, maximum=MAX_PAGE_SIZE)

    sort_raw = _first(params, PARAM_SORT)
    sort = SortMode.RELEVANCE
    if sort_raw is not None:
        if sort_raw in SORT_VALUES:
            sort = SortMode(sort_raw)
        else:
            errors.append(
                FieldError(PARAM_SORT, f"must be one of {', '.join(SORT_VALUES)}, got '{sort_raw}'")
            )

    start = date_start if date_start is not None else DATE_MIN
    end = date_end if date_end is not None else DATE_MAX
    if date_start is not None or date_end is not None:
        if start > end:
            errors.append(FieldError(PARAM_DATE_START, f"must be <= {PARAM_DATE_END} ({start} > {end})"))

    if errors:
        return ParseResult(state=None, errors=errors)

    state = FilterState(
        query_text=_first(params, PARAM_QUERY),
        cultures=normalize_values(split_multi(list(params.get(PARAM_CULTURES) or []))),
        materials=normalize_values(split_multi(list(params.get(PARAM_MATERIALS) or []))),
        tags=normalize_values(split_multi(list(params.get(PARAM_TAGS) or []))),
        date_start=start,
        date_end=end,
        has_3d_model=_first(params, PARAM_HAS_3D_MODEL) == "true",
        site=_first(params, PARAM_SITE),
        sort=sort,
        page=page if page is not None else 1,
        page_size=limit if limit is not None else DEFAULT_PAGE_SIZE,
    )
    return ParseResult(state=state)
