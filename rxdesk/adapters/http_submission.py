"""Submission over the clinic API."""

from __future__ import annotations

from typing import Any, Mapping

import httpx
from pydantic import BaseModel

from config.settings import SubmissionSettings
from rx_schemas.payloads import ArtifactReference
from rxdesk.adapters.http_base import HttpAdapter
from rxdesk.common.logger import get_logger
from rxdesk.infra.http import RetryPolicy

logger = get_logger("rxdesk.adapters.http_submission")


def parse_artifact(data: Any) -> ArtifactReference:
    """`{"prescription_uid", "pdf_url"}` (or any `uid`/`url`) → ArtifactReference."""
    if not isinstance(data, Mapping):
        return ArtifactReference()
    reference = data.get("prescription_uid") or data.get("uid") or data.get("id") or ""
    url = data.get("pdf_url") or data.get("url") or None
    return ArtifactReference(reference_id=str(reference), url=url)


class HttpSubmissionProvider(HttpAdapter):
    """POSTs the payload's wire form to `path`.

    Read timeout and retry count come from SubmissionSettings unless given.
    """

    def __init__(
        self,
        base_url: str,
        path: str = "/prescription/create",
        *,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        settings: SubmissionSettings | None = None,
        read_timeout_s: float | None = None,
        max_retries: int | None = None,
    ) -> None:
        settings = settings or SubmissionSettings()
        super().__init__(
            base_url,
            token=token,
            client=client,
            read_timeout_s=settings.timeout_s if read_timeout_s is None else read_timeout_s,
            policy=RetryPolicy(max_retries=settings.max_retries if max_retries is None else max_retries),
        )
        self._path = path

    async def commit(self, payload: BaseModel) -> ArtifactReference:
        to_wire = getattr(payload, "to_wire", None)
        body = to_wire() if callable(to_wire) else payload.model_dump(by_alias=True)
        data = await self._request("POST", self._path, "submit", json_body=body)
        artifact = parse_artifact(data)
        logger.debug("submission accepted, reference=%s", artifact.reference_id or "-")
        return artifact


__all__ = ["HttpSubmissionProvider", "parse_artifact"]
