"""
Pagination controls
===================

Page-number sequence for the pager:

- 7 pages or fewer: every page.
- Otherwise: first and last page always, a window of 3 pages around the
  current one (clamped to [2, totalPages - 1]), and one gap marker wherever
  pages are skipped.

Gap markers are `None`; numbers are strictly increasing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

GAP = None
MAX_UNCOLLAPSED = 7
WINDOW = 3


def page_sequence(current_page: int, total_pages: int) -> List[Optional[int]]:
    if total_pages <= 0:
        return []
    if total_pages <= MAX_UNCOLLAPSED:
        return list(range(1, total_pages + 1))

    current = min(max(1, current_page), total_pages)
    last_inner = total_pages - 1

    start = max(2, current - 1)
    end = min(last_inner, current + 1)
    # keep the window WINDOW wide when it hits either edge
    if start == 2:
        end = min(last_inner, start + WINDOW - 1)
    if end == last_inner:
        start = max(2, end - WINDOW + 1)

    pages: List[Optional[int]] = [1]
    if start > 2:
        pages.append(GAP)
    pages.extend(range(start, end + 1))
    if end < last_inner:
        pages.append(GAP)
    pages.append(total_pages)
    return pages


@dataclass
class PaginationModel:
    current_page: int = 1
    total_pages: int = 0
    items: List[Optional[int]] = field(default_factory=list)

    @property
    def visible(self) -> bool:
        """A single page (or none) renders no pager at all."""
        return self.total_pages > 1

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def build_pagination(current_page: int, total_pages: int) -> PaginationModel:
    return PaginationModel(
        current_page=current_page,
        total_pages=total_pages,
        items=page_sequence(current_page, total_pages),
    )
