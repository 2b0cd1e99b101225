"""Tests for SubmissionCoordinator."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest
from pydantic import BaseModel

from rx_schemas.payloads import ArtifactReference
from rxdesk.common.exceptions import NetworkError, ValidationError
from rxdesk.payload.submission import SubmissionCoordinator, SubmissionProvider


class Payload(BaseModel):
    value: str = "x"


def assembler(payload: BaseModel | None = None, error: Exception | None = None) -> Mock:
    mock = Mock()
    if error is not None:
        mock.assemble.side_effect = error
    else:
        mock.assemble.return_value = payload or Payload()
    return mock


class GatedSubmission:
    def __init__(self):
        self.release = asyncio.Event()
        self.calls = 0

    async def commit(self, payload: BaseModel) -> ArtifactReference:
        self.calls += 1
        await self.release.wait()
        return ArtifactReference(reference_id="RX-1")


@pytest.mark.asyncio
class TestSubmissionCoordinator:
    async def test_success_returns_artifact_and_resets_form(self, metrics):
        provider = AsyncMock()
        provider.commit.return_value = ArtifactReference(reference_id="RX-9", url="https://files/rx9.pdf")
        on_success = Mock()
        coordinator = SubmissionCoordinator(assembler(), provider, on_success=on_success, metrics=metrics)

        artifact = await coordinator.submit()

        assert artifact.url == "https://files/rx9.pdf"
        on_success.assert_called_once_with(artifact)
        assert coordinator.state.artifact == artifact
        assert coordinator.busy is False
        assert metrics.count("submission.succeeded") == 1
        assert len(metrics.timings["submission.latency"]) == 1

    async def test_validation_error_skips_provider(self, metrics):
        provider = AsyncMock()
        error = ValidationError("missing", {"patient_id": "required"})
        coordinator = SubmissionCoordinator(assembler(error=error), provider, metrics=metrics)

        assert await coordinator.submit() is None

        provider.commit.assert_not_called()
        assert coordinator.state.field_errors == {"patient_id": "required"}
        assert coordinator.state.retriable is False
        assert metrics.count("submission.failed", {"form": "submission", "reason": "validation"}) == 1

    async def test_network_error_is_retriable_and_keeps_form(self):
        provider = AsyncMock()
        provider.commit.side_effect = NetworkError("503", operation="submit", status_code=503)
        on_success = Mock()
        coordinator = SubmissionCoordinator(assembler(), provider, on_success=on_success)

        assert await coordinator.submit() is None

        assert coordinator.state.error == "503"
        assert coordinator.state.retriable is True
        on_success.assert_not_called()

    async def test_server_rejection_is_not_retriable(self):
        provider = AsyncMock()
        provider.commit.side_effect = ValidationError("Invalid clinic", {"clinic_id": "unknown"})
        coordinator = SubmissionCoordinator(assembler(), provider)

        assert await coordinator.submit() is None
        assert coordinator.state.retriable is False
        assert coordinator.state.field_errors == {"clinic_id": "unknown"}

    async def test_unexpected_provider_error_is_retriable(self, metrics):
        provider = AsyncMock()
        provider.commit.side_effect = [KeyError("pdf_url"), ArtifactReference(reference_id="RX-5")]
        coordinator = SubmissionCoordinator(assembler(), provider, metrics=metrics)

        assert await coordinator.submit() is None
        assert coordinator.busy is False
        assert coordinator.state.retriable is True
        assert "pdf_url" in coordinator.state.error
        assert metrics.count("submission.failed", {"form": "submission", "reason": "error"}) == 1

        assert (await coordinator.submit()).reference_id == "RX-5"

    async def test_timeout(self):
        provider = GatedSubmission()
        coordinator = SubmissionCoordinator(assembler(), provider, timeout_s=0.05)

        assert await coordinator.submit() is None
        assert coordinator.state.retriable is True
        assert "timed out" in coordinator.state.error

    async def test_second_submit_while_busy_is_ignored(self):
        provider = GatedSubmission()
        coordinator = SubmissionCoordinator(assembler(), provider)

        first = asyncio.create_task(coordinator.submit())
        await asyncio.sleep(0)
        assert coordinator.busy is True
        assert await coordinator.submit() is None

        provider.release.set()
        assert (await first).reference_id == "RX-1"
        assert provider.calls == 1

    async def test_completion_after_close_is_discarded(self):
        provider = GatedSubmission()
        on_success = Mock()
        coordinator = SubmissionCoordinator(assembler(), provider, on_success=on_success)

        pending = asyncio.create_task(coordinator.submit())
        await asyncio.sleep(0)
        coordinator.close()
        provider.release.set()

        assert await pending is None
        on_success.assert_not_called()
        assert coordinator.state.artifact is None

    async def test_gated_provider_satisfies_protocol(self):
        assert isinstance(GatedSubmission(), SubmissionProvider)
