"""Shared plumbing for the clinic API adapters.

Every endpoint answers with the envelope
`{"success": bool, "httpStatus": int, "message": str, "data": ...}`.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping

import httpx

from rxdesk.common.exceptions import NetworkError, ValidationError
from rxdesk.common.logger import get_logger
from rxdesk.infra.http import RetryPolicy, send_with_retries
from rxdesk.infra.settings import get_infra_settings

logger = get_logger("rxdesk.adapters.http")

REJECTION_STATUSES = (400, 409, 422)


def build_client(base_url: str, read_timeout_s: float) -> httpx.AsyncClient:
    settings = get_infra_settings()
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(
            connect=settings.http_connect_timeout_s,
            read=read_timeout_s,
            write=30.0,
            pool=30.0,
        ),
    )


def _message(body: Any, default: str) -> str:
    if isinstance(body, Mapping):
        msg = body.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg.strip()
    return default


def unwrap_envelope(resp: httpx.Response, operation: str) -> Any:
    """Return `data` from a successful envelope.

    Raises ValidationError when the server rejects the request and
    NetworkError for every other failure.
    """
    try:
        body = resp.json()
    except ValueError:
        body = None

    if resp.status_code >= 400:
        message = _message(body, f"{operation} failed with HTTP {resp.status_code}")
        if resp.status_code in REJECTION_STATUSES:
            raise ValidationError(message)
        raise NetworkError(message, operation=operation, status_code=resp.status_code)

    if not isinstance(body, Mapping):
        raise NetworkError(f"{operation}: response is not a JSON object", operation=operation, status_code=resp.status_code)
    if not body.get("success", False):
        raise ValidationError(_message(body, f"{operation} was not accepted"))
    return body.get("data")


class HttpAdapter:
    """Holds the client, auth header and concurrency limit for one API."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        read_timeout_s: float = 30.0,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._client = client or build_client(base_url, read_timeout_s)
        self._owns_client = client is None
        self._token = token
        self._policy = policy or RetryPolicy()
        self._sem = asyncio.Semaphore(get_infra_settings().http_concurrency)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
    ) -> Any:
        try:
            resp = await send_with_retries(
                client=self._client,
                method=method,
                url=path,
                sem=self._sem,
                params=params,
                json_body=json_body,
                headers=self._headers(),
                policy=self._policy,
            )
        except (httpx.TransportError, httpx.TimeoutException) as exc:
            logger.warning("%s: transport error: %s", operation, type(exc).__name__)
            raise NetworkError(f"{operation} failed: {type(exc).__name__}", operation=operation) from exc
        return unwrap_envelope(resp, operation)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["HttpAdapter", "build_client", "unwrap_envelope", "REJECTION_STATUSES"]
