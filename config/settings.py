"""Configuration settings using pydantic-settings."""

from __future__ import annotations

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings


class SearchSettings(BaseSettings):
    """Settings for debounced search controllers."""

    # Delay between the last keystroke and the lookup
    debounce_ms: int = 1500
    # Bound on a single lookup; expiry is handled as a network failure
    timeout_s: float = 15.0

    model_config = {"env_prefix": "RXDESK_SEARCH_"}

    @field_validator("debounce_ms")
    @classmethod
    def _non_negative_debounce(cls, value: int) -> int:
        if value < 0:
            raise ValueError("debounce_ms must be >= 0")
        return value

    @property
    def debounce_s(self) -> float:
        return self.debounce_ms / 1000.0


class WorkflowSettings(BaseSettings):
    """Settings for commit/merge behavior."""

    # reject: ConflictError on an identity already committed; upsert: replace in place
    duplicate_policy: Literal["reject", "upsert"] = "reject"

    model_config = {"env_prefix": "RXDESK_WORKFLOW_"}


class EntitySettings(BaseSettings):
    """Settings for the entity creation bridge."""

    timeout_s: float = 15.0

    model_config = {"env_prefix": "RXDESK_ENTITY_"}


class SubmissionSettings(BaseSettings):
    """Settings for payload submission."""

    timeout_s: float = 60.0
    max_retries: int = 3

    model_config = {"env_prefix": "RXDESK_SUBMIT_"}
