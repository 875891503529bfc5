"""Client-side paging over an already-fetched collection."""
from __future__ import annotations

import math
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")


def page_count(total: int, page_size: int) -> int:
    """ceil(total / page_size), never less than 1."""
    return max(1, math.ceil(total / page_size))


class Paginator(Generic[T]):
    """
    Visible window of `page_size` items over a collection.

    Pages are 1-indexed. Any requested page is clamped into
    [1, page_count()]; nothing here raises for an out-of-range page.
    """

    def __init__(self, page_size: int, items: Sequence[T] = ()):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        self._items: Sequence[T] = items
        self.page = 1

    @property
    def items(self) -> Sequence[T]:
        return self._items

    @items.setter
    def items(self, items: Sequence[T]) -> None:
        # The current page may no longer exist after a refetch
        self._items = items
        self.page = min(self.page, self.page_count())

    def page_count(self) -> int:
        return page_count(len(self._items), self.page_size)

    def visible_page(self) -> list[T]:
        start = (self.page - 1) * self.page_size
        if start >= len(self._items):
            return []
        return list(self._items[start:start + self.page_size])

    def go_to(self, page: int) -> int:
        self.page = min(max(page, 1), self.page_count())
        return self.page

    def next_page(self) -> int:
        return self.go_to(self.page + 1)

    def previous_page(self) -> int:
        return self.go_to(self.page - 1)

    def reset(self) -> None:
        self.page = 1

    def page_numbers(self) -> list[int]:
        return list(range(1, self.page_count() + 1))

    def has_pages(self) -> bool:
        return self.page_count() > 1
