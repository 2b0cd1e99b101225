"""Timing utilities for performance measurement."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Generator

from .metrics import MetricsClient, get_metrics_client


class TimingContext:
    """Context manager for timing code blocks."""

    def __init__(
        self,
        name: str,
        tags: dict[str, str] | None = None,
        client: MetricsClient | None = None,
    ):
        self.name = name
        self.tags = tags or {}
        self.client = client
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self) -> "TimingContext":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.elapsed_ms = (time.perf_counter() - self.start_time) * 1000
        client = self.client or get_metrics_client()
        tags = dict(self.tags)
        if exc_type is not None:
            tags["outcome"] = "error"
        client.timing(self.name, self.elapsed_ms, tags)


@contextmanager
def timed(
    name: str, tags: dict[str, str] | None = None, client: MetricsClient | None = None
) -> Generator[TimingContext, None, None]:
    """Context manager for timing code blocks.

    Works across awaits, so it can wrap a provider call:
        with timed("search.latency"):
            results = await provider.search(query)
    """
    ctx = TimingContext(name, tags, client)
    with ctx:
        yield ctx
