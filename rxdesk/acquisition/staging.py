"""Staging set: candidates picked from search results, pending commit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from rx_schemas.catalog import SearchResultItem
from rxdesk.acquisition.fields import OverlaySchema
from rxdesk.acquisition.overlay import OverlayEditor
from rxdesk.common.exceptions import ValidationError
from rxdesk.common.logger import get_logger

logger = get_logger("rxdesk.acquisition.staging")


@dataclass
class StagedCandidate:
    item: SearchResultItem
    selected: bool = True
    overrides: dict[str, Any] = field(default_factory=dict)

    @property
    def identity(self) -> str:
        return self.item.identity

    def effective_overrides(self) -> dict[str, Any]:
        """Overrides only count while the candidate is selected."""
        return dict(self.overrides) if self.selected else {}


class StagingSet:
    """Holds staged candidates in selection order.

    Candidates are keyed by identity. Toggling off destroys the candidate
    together with its overrides, so a toggle-on/toggle-off pair leaves the
    set exactly as it was.
    """

    def __init__(self, schema: OverlaySchema | None = None, overlay: OverlayEditor | None = None):
        self._schema = schema or OverlaySchema()
        self._overlay = overlay or OverlayEditor()
        self._candidates: dict[str, StagedCandidate] = {}
        self._offered: dict[str, SearchResultItem] = {}

    @property
    def overlay(self) -> OverlayEditor:
        return self._overlay

    @property
    def candidates(self) -> list[StagedCandidate]:
        return list(self._candidates.values())

    def selected(self) -> list[StagedCandidate]:
        return [c for c in self._candidates.values() if c.selected]

    def __len__(self) -> int:
        return len(self._candidates)

    def __contains__(self, identity: object) -> bool:
        return identity in self._candidates

    def get(self, identity: str) -> StagedCandidate | None:
        return self._candidates.get(identity)

    def offer(self, items: Iterable[SearchResultItem]) -> None:
        """Replace the items the user can currently toggle.

        Only the latest result list is offered. Staged candidates keep their
        own copy of the item, so they survive a search that no longer returns
        them and can still be toggled off.
        """
        self._offered = {item.identity: item for item in items}

    def toggle(self, identity: str) -> bool:
        """Flip selection; returns the new selected state."""
        if identity in self._candidates:
            self.deselect(identity)
            return False
        self.select(identity)
        return True

    def select(self, identity: str) -> StagedCandidate:
        """Stage `identity` and open its overlay. Idempotent."""
        existing = self._candidates.get(identity)
        if existing is not None:
            return existing

        item = self._offered.get(identity)
        if item is None:
            raise ValidationError(
                f"{identity!r} is not among the offered results",
                field_errors={"identity": "unknown"},
            )
        candidate = StagedCandidate(item=item)
        self._candidates[identity] = candidate
        self._overlay.expand(identity)
        logger.debug("staged %s (%d staged)", identity, len(self._candidates))
        return candidate

    def deselect(self, identity: str) -> None:
        """Unstage `identity`, dropping its overrides. Idempotent."""
        candidate = self._candidates.pop(identity, None)
        if candidate is None:
            return
        candidate.selected = False
        candidate.overrides.clear()
        self._overlay.release(identity)
        logger.debug("unstaged %s", identity)

    def set_override(self, identity: str, field_name: str, value: Any) -> None:
        candidate = self._candidates.get(identity)
        if candidate is None or not candidate.selected:
            raise ValidationError(
                f"{identity!r} is not staged",
                field_errors={"identity": "not staged"},
            )
        coerced = self._schema.coerce(field_name, value)
        if coerced is None:
            candidate.overrides.pop(field_name, None)
        else:
            candidate.overrides[field_name] = coerced

    def clear(self) -> None:
        """Drop every candidate and offered item."""
        target = self._overlay.target
        if target is not None and target in self._candidates:
            self._overlay.collapse()
        self._candidates.clear()
        self._offered.clear()


__all__ = ["StagedCandidate", "StagingSet"]
