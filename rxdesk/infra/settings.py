"""Infrastructure/runtime settings (env-driven).

Transport tunables for the HTTP adapters live here so they can be toggled
quickly via environment variables without touching workflow settings.
Each tunable reads a short name first and an ``RXDESK_`` prefixed one second.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TypeVar

from rxdesk.common.logger import get_logger

logger = get_logger("rxdesk.infra.settings")

_N = TypeVar("_N", int, float)


def _env_number(name: str, default: _N) -> _N:
    """Value of `name` (or ``RXDESK_<name>``) cast like `default`; unparseable values are skipped."""
    cast = type(default)
    for key in (name, f"RXDESK_{name}"):
        raw = os.getenv(key, "").strip()
        if not raw:
            continue
        try:
            return cast(raw)
        except ValueError:
            logger.warning("ignoring %s=%r, expected %s", key, raw, cast.__name__)
    return default


@dataclass(frozen=True)
class InfraSettings:
    """Runtime toggles for outbound HTTP calls."""

    http_concurrency: int = 4
    http_budget_s: float = 60.0
    http_connect_timeout_s: float = 5.0

    @classmethod
    def from_env(cls) -> "InfraSettings":
        return cls(
            http_concurrency=max(1, _env_number("HTTP_CONCURRENCY", cls.http_concurrency)),
            http_budget_s=_env_number("HTTP_BUDGET_S", cls.http_budget_s),
            http_connect_timeout_s=_env_number("HTTP_CONNECT_TIMEOUT_S", cls.http_connect_timeout_s),
        )


@lru_cache(maxsize=1)
def get_infra_settings() -> InfraSettings:
    return InfraSettings.from_env()


__all__ = ["InfraSettings", "get_infra_settings"]
