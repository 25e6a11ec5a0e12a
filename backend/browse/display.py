"""
Display helpers for the browse client: year and period labels, sort options.
"""

from typing import List, Tuple

from search.filter_state import SortMode

SORT_OPTIONS: List[Tuple[str, str]] = [
    (SortMode.RELEVANCE.value, "Relevance"),
    (SortMode.DATE_ASC.value, "Date (Oldest)"),
    (SortMode.DATE_DESC.value, "Date (Newest)"),
    (SortMode.AZ.value, "Name (A-Z)"),
]

# (exclusive upper bound, label), checked in order
_PERIODS = [
    (-2500, "Early Bronze Age"),
    (-1200, "Bronze Age"),
    (-500, "Iron Age"),
    (500, "Classical"),
    (1500, "Medieval"),
]


def format_year(year: int) -> str:
    """-500 -> '500 BCE', 200 -> '200 CE', 0 -> '0'."""
    if year < 0:
        return f"{abs(year)} BCE"
    if year > 0:
        return f"{year} CE"
    return "0"


def period_label(year: int) -> str:
    for bound, label in _PERIODS:
        if year < bound:
            return label
    return "Modern"


def date_range_label(start: int, end: int) -> str:
    return f"{format_year(start)} – {format_year(end)}"
