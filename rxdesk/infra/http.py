"""Async HTTP utilities for provider adapters.

Wraps outbound calls with:
- an asyncio semaphore for concurrency limiting
- exponential backoff with jitter on 429 / transient 5xx
- a hard time budget (`HTTP_BUDGET_S`)
"""

from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from rxdesk.infra.retry import backoff_delay, retry_after_seconds
from rxdesk.infra.settings import get_infra_settings


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    retry_on_statuses: tuple[int, ...] = (429,)


async def send_with_retries(
    *,
    client: httpx.AsyncClient,
    method: str,
    url: str,
    sem: asyncio.Semaphore,
    params: Mapping[str, str] | None = None,
    json_body: Any = None,
    headers: Mapping[str, str] | None = None,
    policy: RetryPolicy | None = None,
) -> httpx.Response:
    """Send a request, retrying transient failures inside the time budget.

    Non-retriable responses are returned as-is; the caller decides what a
    4xx means. Transport errors are re-raised once retries are exhausted.
    """
    policy = policy or RetryPolicy()
    settings = get_infra_settings()
    deadline = time.monotonic() + float(settings.http_budget_s)

    last_exc: Exception | None = None
    resp: httpx.Response | None = None
    attempt = 0
    while True:
        attempt += 1
        try:
            async with sem:
                resp = await client.request(
                    method,
                    url,
                    params=dict(params) if params else None,
                    json=json_body,
                    headers=dict(headers or {}),
                )
        except (httpx.TransportError, httpx.TimeoutException) as exc:
            last_exc = exc
            retry_after = None
        else:
            last_exc = None
            status_code = resp.status_code
            if status_code < 400:
                return resp

            retry_after = retry_after_seconds(resp.headers)
            should_retry = status_code in policy.retry_on_statuses or 500 <= status_code <= 599
            if not should_retry:
                return resp

        remaining = max(0.0, deadline - time.monotonic())
        if attempt >= policy.max_retries or remaining <= 0:
            if last_exc is not None:
                raise last_exc
            assert resp is not None
            return resp

        sleep_s = retry_after if retry_after is not None else backoff_delay(attempt - 1)
        # Add small jitter even if Retry-After is provided.
        jitter = random.uniform(0.0, 0.25)
        await asyncio.sleep(min(sleep_s + jitter, remaining))


__all__ = ["RetryPolicy", "send_with_retries"]
