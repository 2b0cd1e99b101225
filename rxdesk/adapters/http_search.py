"""Search and catalog lookups against the clinic API."""

from __future__ import annotations

from typing import Any, Callable, Mapping

import httpx

from rx_schemas.catalog import SearchResultItem
from rx_schemas.vitals import VitalDefinition
from rxdesk.adapters.http_base import HttpAdapter
from rxdesk.common.exceptions import NetworkError
from rxdesk.infra.http import RetryPolicy

ItemParser = Callable[[Mapping[str, Any]], SearchResultItem]


def parse_medicine(raw: Mapping[str, Any]) -> SearchResultItem:
    """`{"name", "saltQuantity", "type"}` → item keyed by medicine name."""
    name = str(raw.get("name") or "").strip()
    return SearchResultItem(
        identity=name,
        label=name,
        attributes={
            "salt_quantity": raw.get("saltQuantity") or "",
            "type": raw.get("type") or "",
        },
    )


def parse_lab_item(raw: Mapping[str, Any]) -> SearchResultItem:
    """`{"uid", "name"}` → item keyed by uid."""
    return SearchResultItem(identity=str(raw.get("uid") or ""), label=str(raw.get("name") or ""))


def _rows(data: Any, operation: str, key: str | None = None) -> list[Mapping[str, Any]]:
    if key is not None and isinstance(data, Mapping):
        data = data.get(key)
    if data is None:
        return []
    if not isinstance(data, list):
        raise NetworkError(f"{operation}: unexpected response shape", operation=operation)
    return [row for row in data if isinstance(row, Mapping)]


class HttpSearchProvider(HttpAdapter):
    """SearchProvider over a `GET <path>?<param>=<query>` endpoint."""

    def __init__(
        self,
        base_url: str,
        path: str = "/medicine/list",
        *,
        parse: ItemParser = parse_medicine,
        query_param: str = "search",
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        read_timeout_s: float = 15.0,
    ) -> None:
        # Lookups are superseded quickly; one retry is plenty.
        super().__init__(
            base_url,
            token=token,
            client=client,
            read_timeout_s=read_timeout_s,
            policy=RetryPolicy(max_retries=2),
        )
        self._path = path
        self._parse = parse
        self._query_param = query_param

    async def search(self, query: str) -> list[SearchResultItem]:
        data = await self._request("GET", self._path, "search", params={self._query_param: query})
        items = [self._parse(row) for row in _rows(data, "search")]
        return [item for item in items if item.identity]


class HttpCatalogSource(HttpAdapter):
    """Fixed lists loaded once per form: lab tests and vital definitions."""

    def __init__(
        self,
        base_url: str,
        *,
        lab_tests_path: str = "/lab/list",
        vitals_path: str = "/vital/list",
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(base_url, token=token, client=client)
        self._lab_tests_path = lab_tests_path
        self._vitals_path = vitals_path

    async def lab_tests(self) -> list[SearchResultItem]:
        data = await self._request("GET", self._lab_tests_path, "lab_tests")
        return [item for item in map(parse_lab_item, _rows(data, "lab_tests")) if item.identity]

    async def vitals(self) -> list[VitalDefinition]:
        data = await self._request("GET", self._vitals_path, "vitals")
        out: list[VitalDefinition] = []
        for row in _rows(data, "vitals", key="vital"):
            try:
                out.append(VitalDefinition.model_validate(row))
            except ValueError:
                # pydantic.ValidationError subclasses ValueError; skip malformed rows
                continue
        return out


__all__ = ["HttpSearchProvider", "HttpCatalogSource", "parse_medicine", "parse_lab_item", "ItemParser"]
