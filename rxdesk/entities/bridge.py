"""Create a referenced entity from inside a parent form and select it.

The bridge is opened with a SelectionContext naming the select field that
receives the new option. On success the option is appended to that field's
OptionsSet and selected in the same synchronous step, then the surface
closes. A completion that arrives after the surface was closed or re-opened
is dropped.
"""

from __future__ import annotations

import asyncio
import itertools
from typing import Any, Mapping

from config.settings import EntitySettings
from observability.metrics import MetricsClient, get_metrics_client
from rx_schemas.catalog import ReferencedEntityOption
from rxdesk.common.exceptions import NetworkError, ValidationError
from rxdesk.common.logger import get_logger
from rxdesk.entities.contexts import SelectionContext, parse_context
from rxdesk.entities.options import SelectField
from rxdesk.entities.providers import EntityCreationProvider, LocalEntityCreationProvider

logger = get_logger("rxdesk.entities.bridge")


class EntityCreationBridge:
    def __init__(
        self,
        fields: Mapping[str, SelectField],
        provider: EntityCreationProvider | None = None,
        *,
        settings: EntitySettings | None = None,
        timeout_s: float | None = None,
        metrics: MetricsClient | None = None,
    ) -> None:
        settings = settings or EntitySettings()
        self._fields = dict(fields)
        self._provider = provider or LocalEntityCreationProvider()
        self._timeout_s = settings.timeout_s if timeout_s is None else timeout_s
        self._metrics = metrics

        self._generations = itertools.count(1)
        self._generation = 0
        self._context: SelectionContext | None = None
        self._busy = False
        self._error: str | None = None
        self._field_errors: dict[str, str] = {}

    # state

    @property
    def context(self) -> SelectionContext | None:
        return self._context

    @property
    def is_open(self) -> bool:
        return self._context is not None

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def field_errors(self) -> dict[str, str]:
        return dict(self._field_errors)

    @property
    def _metrics_client(self) -> MetricsClient:
        return self._metrics or get_metrics_client()

    # commands

    def open(self, context: SelectionContext | Mapping[str, Any]) -> None:
        ctx = parse_context(context)  # type: ignore[arg-type]
        if ctx.target_field not in self._fields:
            raise ValidationError(
                f"No select field named {ctx.target_field!r}",
                field_errors={"target_field": "unknown field"},
            )
        self._generation = next(self._generations)
        self._context = ctx
        self._busy = False
        self._clear_errors()
        logger.debug("entity creation opened for %s", ctx.kind)

    def close(self) -> None:
        self._generation = next(self._generations)
        self._context = None
        self._busy = False
        self._clear_errors()

    async def submit(self, raw_fields: Mapping[str, Any]) -> ReferencedEntityOption | None:
        """Validate, create and select. Returns the new option, or None on failure."""
        context = self._context
        if context is None:
            raise RuntimeError("submit() called while the entity form is closed")
        if self._busy:
            return None

        try:
            fields = context.validate_fields(raw_fields)
        except ValidationError as exc:
            self._reject(exc, exc.field_errors)
            return None

        generation = self._generation
        self._busy = True
        self._clear_errors()
        try:
            identity = await asyncio.wait_for(
                self._provider.create_entity(context, fields),
                timeout=self._timeout_s,
            )
        except asyncio.CancelledError:
            raise
        except ValidationError as exc:
            if generation == self._generation:
                self._reject(exc, exc.field_errors)
            return None
        except asyncio.TimeoutError:
            if generation == self._generation:
                self._reject(
                    NetworkError(f"Creation timed out after {self._timeout_s:g}s", operation="create_entity"),
                    {},
                )
            return None
        except NetworkError as exc:
            if generation == self._generation:
                self._reject(exc, {})
            return None
        except Exception as exc:  # noqa: BLE001 - provider failures stay inline on the open form
            if generation == self._generation:
                self._reject(NetworkError(f"Creation failed: {exc}", operation="create_entity"), {})
            return None
        finally:
            if generation == self._generation:
                self._busy = False

        if generation != self._generation:
            logger.debug("discarded late %s creation", context.kind)
            return None

        option = ReferencedEntityOption(id=identity, label=context.label_for(fields))
        target = self._fields[context.target_field]
        target.options.append(option)
        target.select(option.id)

        self._metrics_client.incr("entities.created", {"kind": context.kind})
        logger.info("created %s %s for %s", context.kind, option.id, context.target_field)
        self.close()
        return option

    def _reject(self, exc: Exception, field_errors: Mapping[str, str]) -> None:
        self._error = str(exc)
        self._field_errors = dict(field_errors)
        kind = self._context.kind if self._context is not None else "unknown"
        self._metrics_client.incr("entities.rejected", {"kind": kind})
        logger.warning("entity creation failed for %s: %s", kind, exc)

    def _clear_errors(self) -> None:
        self._error = None
        self._field_errors = {}


__all__ = ["EntityCreationBridge"]
