"""Entity creation providers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable
from uuid import uuid4

from pydantic import BaseModel

from rxdesk.common.logger import get_logger

if TYPE_CHECKING:
    from rxdesk.entities.contexts import SelectionContext

logger = get_logger("rxdesk.entities.providers")


@runtime_checkable
class EntityCreationProvider(Protocol):
    """Abstraction for creating a referenced entity and returning its identity."""

    async def create_entity(self, context: SelectionContext, fields: BaseModel) -> str:
        """Persist (or register) the entity; raise ValidationError or NetworkError."""


class LocalEntityCreationProvider:
    """Generates synthetic identities; nothing is persisted."""

    def __init__(self) -> None:
        self.created: list[tuple[str, str]] = []

    async def create_entity(self, context: SelectionContext, fields: BaseModel) -> str:
        identity = f"{context.kind}-{uuid4().hex[:12]}"
        self.created.append((context.kind, identity))
        logger.debug("local entity %s created", identity)
        return identity


__all__ = ["EntityCreationProvider", "LocalEntityCreationProvider"]
