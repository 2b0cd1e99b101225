"""Debounced search with stale-response discard.

All state changes happen on the running asyncio loop:

- every `set_query` cancels the pending debounce task before scheduling a
  new one, so at most one debounce is pending
- each lookup carries a token from a monotonic counter; only the response
  for the most recently issued token is applied (last-issued-wins)
- `reset`/`close` invalidate the current token so late responses are dropped
"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, replace
from typing import Callable, Protocol, Sequence, runtime_checkable

from config.settings import SearchSettings
from observability.metrics import MetricsClient, get_metrics_client
from observability.timing import timed
from rx_schemas.catalog import SearchResultItem
from rxdesk.common.exceptions import NetworkError
from rxdesk.common.logger import get_logger

logger = get_logger("rxdesk.acquisition.search")


@runtime_checkable
class SearchProvider(Protocol):
    """Remote lookup used by SearchController."""

    async def search(self, query: str) -> Sequence[SearchResultItem]:
        """Return matches for `query` (possibly empty)."""


@dataclass(frozen=True)
class SearchState:
    query: str = ""
    results: tuple[SearchResultItem, ...] = ()
    busy: bool = False
    error: bool = False
    error_message: str | None = None


SearchListener = Callable[[SearchState], None]


class SearchController:
    """Debounces a free-text query against an async SearchProvider."""

    def __init__(
        self,
        provider: SearchProvider,
        *,
        settings: SearchSettings | None = None,
        debounce_s: float | None = None,
        timeout_s: float | None = None,
        metrics: MetricsClient | None = None,
        name: str = "search",
    ) -> None:
        settings = settings or SearchSettings()
        self._provider = provider
        self._debounce_s = settings.debounce_s if debounce_s is None else debounce_s
        self._timeout_s = settings.timeout_s if timeout_s is None else timeout_s
        self._metrics = metrics
        self._name = name

        self._state = SearchState()
        self._listeners: list[SearchListener] = []
        self._tokens = itertools.count(1)
        self._latest_token = 0
        self._timer: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[None]] = set()
        self._last_error: NetworkError | None = None

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def results(self) -> tuple[SearchResultItem, ...]:
        return self._state.results

    @property
    def busy(self) -> bool:
        return self._state.busy

    @property
    def error(self) -> bool:
        return self._state.error

    @property
    def last_error(self) -> NetworkError | None:
        return self._last_error

    @property
    def debounce_pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def subscribe(self, listener: SearchListener) -> Callable[[], None]:
        """Call `listener` with every new state. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self, state: SearchState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    @property
    def _metrics_client(self) -> MetricsClient:
        return self._metrics or get_metrics_client()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def set_query(self, text: str) -> None:
        """Record a keystroke. Must be called from the event loop thread."""
        self._cancel_timer()
        query = (text or "").strip()

        if not query:
            self._invalidate()
            self._last_error = None
            self._publish(SearchState(query=text or ""))
            return

        self._state = replace(self._state, query=text)
        loop = asyncio.get_running_loop()
        self._timer = loop.create_task(self._debounce(query))

    def reset(self) -> None:
        """Back to idle: no timer, no accepted in-flight response, no results."""
        self._cancel_timer()
        self._invalidate()
        self._last_error = None
        self._publish(SearchState())

    def close(self) -> None:
        """Reset and cancel in-flight lookups (owning surface unmounted)."""
        self.reset()
        for task in list(self._inflight):
            task.cancel()

    async def drain(self) -> None:
        """Wait until no debounce is pending and no lookup is in flight."""
        while True:
            pending = list(self._inflight)
            if self._timer is not None and not self._timer.done():
                pending.append(self._timer)
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    def _invalidate(self) -> None:
        # A fresh token that no request carries; every in-flight response goes stale.
        self._latest_token = next(self._tokens)

    async def _debounce(self, query: str) -> None:
        await asyncio.sleep(self._debounce_s)
        self._timer = None
        self._issue(query)

    def _issue(self, query: str) -> None:
        token = next(self._tokens)
        self._latest_token = token
        self._metrics_client.incr("search.requests", {"controller": self._name})
        logger.debug("%s: issuing lookup token=%d", self._name, token)
        self._publish(replace(self._state, busy=True, error=False, error_message=None))

        task = asyncio.get_running_loop().create_task(self._lookup(token, query))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _lookup(self, token: int, query: str) -> None:
        try:
            with timed("search.latency", {"controller": self._name}, client=self._metrics_client):
                found = await asyncio.wait_for(self._provider.search(query), timeout=self._timeout_s)
        except asyncio.CancelledError:
            raise
        except asyncio.TimeoutError:
            self._fail(token, NetworkError(f"Search timed out after {self._timeout_s:g}s", operation="search"))
            return
        except NetworkError as exc:
            self._fail(token, exc)
            return
        except Exception as exc:  # noqa: BLE001 - lookup failures degrade to an empty result
            self._fail(token, NetworkError(f"Search failed: {exc}", operation="search"))
            return

        if token != self._latest_token:
            self._metrics_client.incr("search.stale_discarded", {"controller": self._name})
            logger.debug("%s: discarded stale response token=%d", self._name, token)
            return

        self._last_error = None
        self._publish(replace(self._state, results=tuple(found), busy=False, error=False, error_message=None))

    def _fail(self, token: int, exc: NetworkError) -> None:
        if token != self._latest_token:
            self._metrics_client.incr("search.stale_discarded", {"controller": self._name})
            return
        self._metrics_client.incr("search.errors", {"controller": self._name})
        logger.warning("%s: lookup failed: %s", self._name, exc)
        self._last_error = exc
        self._publish(replace(self._state, results=(), busy=False, error=True, error_message=str(exc)))


__all__ = ["SearchController", "SearchProvider", "SearchState", "SearchListener"]
