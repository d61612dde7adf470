from __future__ import annotations

import math
from typing import List, Sequence, TypeVar

from .datamodels import Page

T = TypeVar("T")


def total_pages(count: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return max(1, math.ceil(count / page_size))


def clamp_page(requested: int, total: int) -> int:
    if total <= 0:
        return 1
    return max(1, min(total, requested))


def paginate(items: Sequence[T], page_size: int, requested_page: int) -> Page[T]:
    """Slice ``items`` into the requested page.

    The page number is clamped into ``[1, total_pages]``, so a page that was
    valid before the result set shrank lands on the last remaining page.
    """
    total = total_pages(len(items), page_size)
    current = clamp_page(requested_page, total)
    start = (current - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        total_pages=total,
        current_page=current,
    )


def visible_page_numbers(total: int, max_visible: int) -> List[int]:
    """Numbered buttons to show: always the first ``max_visible`` pages."""
    return list(range(1, min(total, max_visible) + 1))


def has_previous(page: int) -> bool:
    return page > 1


def has_next(page: int, total: int) -> bool:
    return page < total
