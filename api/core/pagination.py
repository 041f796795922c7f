"""
Page/size handling for list endpoints.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .db import MAX_BIGINT

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_SIZE = 10


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    size: int = DEFAULT_SIZE

    @property
    def offset(self) -> int:
        # LIMIT/OFFSET are bigint arguments.
        return min((self.page - 1) * self.size, MAX_BIGINT)

    @property
    def limit(self) -> int:
        return self.size


@dataclass(frozen=True)
class PageResult(Generic[T]):
    items: list[T]
    total_count: int
    total_pages: int
    current_page: int
    size: int


def _parse_positive(raw: Any, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    # Zero and negative inputs are clamped so the offset never goes below 0;
    # values past bigint are clamped so they can still be bound.
    return min(max(value, 1), MAX_BIGINT)


def paginate(page: Any = None, size: Any = None) -> PageRequest:
    """
    Parse raw page/size query values.

    Missing or non-numeric values fall back to page=1, size=10. There is no
    upper bound on size beyond what a bigint can hold.
    """
    return PageRequest(
        page=_parse_positive(page, DEFAULT_PAGE),
        size=_parse_positive(size, DEFAULT_SIZE),
    )


def total_pages(total_count: int, size: int) -> int:
    if total_count <= 0:
        return 0
    return math.ceil(total_count / size)


def page_result(items: list[T], total_count: int, page: PageRequest) -> PageResult[T]:
    return PageResult(
        items=items,
        total_count=total_count,
        total_pages=total_pages(total_count, page.size),
        current_page=page.page,
        size=page.size,
    )
