"""Shared fixtures for rxdesk tests."""

from __future__ import annotations

import asyncio
from typing import Callable, Sequence

import pytest

from observability.metrics import InMemoryMetricsClient, reset_metrics_client, set_metrics_client
from rx_schemas.catalog import SearchResultItem
from rxdesk.common.exceptions import NetworkError

# Short enough to keep the suite fast, long enough to coalesce keystrokes.
DEBOUNCE_S = 0.05


def medicine(name: str, salt: str = "", kind: str = "Tablet") -> SearchResultItem:
    return SearchResultItem(identity=name, label=name, attributes={"salt_quantity": salt, "type": kind})


MEDICINES = [
    medicine("Paracetamol", "500mg"),
    medicine("Paracip", "650mg"),
    medicine("Pantoprazole", "40mg"),
    medicine("Amoxicillin", "250mg", "Capsule"),
]


class FakeSearchProvider:
    """Scripted provider.

    Every call is recorded. A query listed in `gates` blocks until its event
    is set, so tests control the order responses arrive in.
    """

    def __init__(self, items: Sequence[SearchResultItem] = MEDICINES):
        self.items = list(items)
        self.calls: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.failures: dict[str, Exception] = {}

    def gate(self, query: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[query] = event
        return event

    def fail(self, query: str, exc: Exception | None = None) -> None:
        self.failures[query] = exc or NetworkError("search unavailable", operation="search", status_code=503)

    async def search(self, query: str) -> list[SearchResultItem]:
        self.calls.append(query)
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        if query in self.failures:
            raise self.failures[query]
        needle = query.lower()
        return [i for i in self.items if needle in i.label.lower()]


async def wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Poll the event loop until `predicate()` holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.005)


@pytest.fixture
def metrics():
    client = InMemoryMetricsClient()
    set_metrics_client(client)
    yield client
    reset_metrics_client()


@pytest.fixture
def provider():
    return FakeSearchProvider()
