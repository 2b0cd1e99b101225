"""In-process providers for demos and tests."""

from __future__ import annotations

from typing import Iterable

from rx_schemas.catalog import SearchResultItem


class StaticSearchProvider:
    """Case-insensitive substring match over a fixed list of items."""

    def __init__(self, items: Iterable[SearchResultItem], limit: int | None = None):
        self._items = list(items)
        self._limit = limit

    async def search(self, query: str) -> list[SearchResultItem]:
        needle = query.strip().lower()
        if not needle:
            return []
        found = [item for item in self._items if needle in item.display_label().lower()]
        return found[: self._limit] if self._limit else found


__all__ = ["StaticSearchProvider"]
