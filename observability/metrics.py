"""Metrics client abstraction and implementations.

This module provides:
- MetricsClient: Abstract base class for metrics emission
- NullMetricsClient: No-op implementation (default)
- StdoutMetricsClient: JSON output for debugging
- InMemoryMetricsClient: In-process counters/timings, handy in tests

To enable in-process metrics:
    from observability.metrics import set_metrics_client, InMemoryMetricsClient
    set_metrics_client(InMemoryMetricsClient())
"""

from __future__ import annotations

import json
import os
import sys
from abc import ABC, abstractmethod
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any


class MetricsClient(ABC):
    """Abstract base class for metrics emission."""

    @abstractmethod
    def incr(self, name: str, tags: dict[str, str] | None = None, value: int = 1) -> None:
        """Increment a counter metric."""
        ...

    @abstractmethod
    def timing(self, name: str, value_ms: float, tags: dict[str, str] | None = None) -> None:
        """Record a timing value in milliseconds."""
        ...


class StdoutMetricsClient(MetricsClient):
    """Emit metrics as JSON to stderr for development/debugging."""

    def __init__(self, prefix: str = "rxdesk"):
        self.prefix = prefix

    def _emit(self, metric_type: str, name: str, value: Any, tags: dict[str, str] | None) -> None:
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "type": metric_type,
            "metric": f"{self.prefix}.{name}",
            "value": value,
            "tags": tags or {},
        }
        print(json.dumps(record), file=sys.stderr)

    def incr(self, name: str, tags: dict[str, str] | None = None, value: int = 1) -> None:
        self._emit("counter", name, value, tags)

    def timing(self, name: str, value_ms: float, tags: dict[str, str] | None = None) -> None:
        self._emit("timing", name, value_ms, tags)


class NullMetricsClient(MetricsClient):
    """No-op metrics client for when metrics are disabled."""

    def incr(self, name: str, tags: dict[str, str] | None = None, value: int = 1) -> None:
        pass

    def timing(self, name: str, value_ms: float, tags: dict[str, str] | None = None) -> None:
        pass


def _tags_key(tags: dict[str, str] | None) -> tuple[tuple[str, str], ...]:
    return tuple(sorted((tags or {}).items()))


class InMemoryMetricsClient(MetricsClient):
    """Accumulates counters and timings in process.

    All workflow mutations happen on one event loop, so no locking is done.
    """

    def __init__(self) -> None:
        self.counters: dict[str, dict[tuple[tuple[str, str], ...], int]] = defaultdict(
            lambda: defaultdict(int)
        )
        self.timings: dict[str, list[float]] = defaultdict(list)

    def incr(self, name: str, tags: dict[str, str] | None = None, value: int = 1) -> None:
        self.counters[name][_tags_key(tags)] += value

    def timing(self, name: str, value_ms: float, tags: dict[str, str] | None = None) -> None:
        self.timings[name].append(value_ms)

    def count(self, name: str, tags: dict[str, str] | None = None) -> int:
        """Counter value; without tags, the sum over every tag set."""
        series = self.counters.get(name, {})
        if tags is None:
            return sum(series.values())
        return series.get(_tags_key(tags), 0)

    def reset(self) -> None:
        self.counters.clear()
        self.timings.clear()


# Global singleton
_metrics_client: MetricsClient | None = None


def get_metrics_client() -> MetricsClient:
    """Get the global metrics client, initializing if needed.

    The client type is determined by the METRICS_BACKEND environment variable:
    - "memory": InMemoryMetricsClient
    - "stdout": StdoutMetricsClient (for debugging)
    - "null" or not set: NullMetricsClient (no-op, default)
    """
    global _metrics_client
    if _metrics_client is None:
        backend = os.getenv("METRICS_BACKEND", "null").lower()
        if backend == "memory":
            _metrics_client = InMemoryMetricsClient()
        elif backend == "stdout":
            _metrics_client = StdoutMetricsClient()
        else:
            _metrics_client = NullMetricsClient()
    return _metrics_client


def set_metrics_client(client: MetricsClient) -> None:
    """Set the global metrics client."""
    global _metrics_client
    _metrics_client = client


def reset_metrics_client() -> None:
    """Reset the global metrics client to None.

    The next call to get_metrics_client() will re-initialize based on env vars.
    """
    global _metrics_client
    _metrics_client = None
