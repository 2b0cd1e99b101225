"""Assemble-and-submit coordination for a form."""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, runtime_checkable

from pydantic import BaseModel

from config.settings import SubmissionSettings
from observability.metrics import MetricsClient, get_metrics_client
from observability.timing import timed
from rx_schemas.payloads import ArtifactReference
from rxdesk.common.exceptions import NetworkError, ValidationError
from rxdesk.common.logger import get_logger
from rxdesk.payload.assembler import PayloadAssembler

logger = get_logger("rxdesk.payload.submission")


@runtime_checkable
class SubmissionProvider(Protocol):
    """Accepts an assembled payload and returns a reference to the artifact."""

    async def commit(self, payload: BaseModel) -> ArtifactReference:
        """Submit `payload`; raise NetworkError or ValidationError on failure."""


@dataclass(frozen=True)
class SubmissionState:
    busy: bool = False
    error: Optional[str] = None
    field_errors: dict[str, str] = field(default_factory=dict)
    retriable: bool = False
    artifact: Optional[ArtifactReference] = None


class SubmissionCoordinator:
    """Runs assemble → submit once at a time; resets the form on success."""

    def __init__(
        self,
        assembler: PayloadAssembler,
        provider: SubmissionProvider,
        *,
        on_success: Callable[[ArtifactReference], None] | None = None,
        settings: SubmissionSettings | None = None,
        timeout_s: float | None = None,
        metrics: MetricsClient | None = None,
        name: str = "submission",
    ) -> None:
        settings = settings or SubmissionSettings()
        self._assembler = assembler
        self._provider = provider
        self._on_success = on_success
        self._timeout_s = settings.timeout_s if timeout_s is None else timeout_s
        self._metrics = metrics
        self._name = name
        self._tokens = itertools.count(1)
        self._token = 0
        self._state = SubmissionState()

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state.busy

    @property
    def _metrics_client(self) -> MetricsClient:
        return self._metrics or get_metrics_client()

    async def submit(self) -> ArtifactReference | None:
        if self._state.busy:
            return None

        try:
            payload = self._assembler.assemble()
        except ValidationError as exc:
            self._fail(exc, retriable=False, field_errors=exc.field_errors, reason="validation")
            return None

        token = next(self._tokens)
        self._token = token
        self._state = SubmissionState(busy=True, artifact=self._state.artifact)
        tags = {"form": self._name}

        try:
            with timed("submission.latency", tags, client=self._metrics_client):
                artifact = await asyncio.wait_for(self._provider.commit(payload), timeout=self._timeout_s)
        except asyncio.TimeoutError:
            if token == self._token:
                exc = NetworkError(f"Submission timed out after {self._timeout_s:g}s", operation="submit")
                self._fail(exc, retriable=True, reason="timeout")
            return None
        except NetworkError as exc:
            if token == self._token:
                self._fail(exc, retriable=True, reason="network")
            return None
        except ValidationError as exc:
            if token == self._token:
                self._fail(exc, retriable=False, field_errors=exc.field_errors, reason="rejected")
            return None
        except asyncio.CancelledError:
            if token == self._token:
                self._state = SubmissionState(artifact=self._state.artifact)
            raise
        except Exception as exc:  # noqa: BLE001 - unexpected provider failures stay retriable
            if token == self._token:
                self._fail(NetworkError(f"Submission failed: {exc}", operation="submit"), retriable=True, reason="error")
            return None

        if token != self._token:
            logger.debug("%s: discarded late completion", self._name)
            return None

        self._state = SubmissionState(artifact=artifact)
        self._metrics_client.incr("submission.succeeded", tags)
        logger.info("%s: submitted, reference=%s", self._name, artifact.reference_id or "-")
        if self._on_success is not None:
            self._on_success(artifact)
        return artifact

    def close(self) -> None:
        """Form unmounted: a pending completion is ignored."""
        self._token = next(self._tokens)
        self._state = SubmissionState()

    def _fail(
        self,
        exc: Exception,
        *,
        retriable: bool,
        reason: str,
        field_errors: dict[str, str] | None = None,
    ) -> None:
        self._state = SubmissionState(
            error=str(exc),
            field_errors=dict(field_errors or {}),
            retriable=retriable,
        )
        self._metrics_client.incr("submission.failed", {"form": self._name, "reason": reason})
        logger.warning("%s: submission failed (%s): %s", self._name, reason, exc)


__all__ = ["SubmissionCoordinator", "SubmissionProvider", "SubmissionState"]
