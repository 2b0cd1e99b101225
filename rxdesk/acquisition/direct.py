"""Selection from a fixed catalog, committed on click.

Investigation types on a diagnostic bill and lab tests on a prescription
have no search step: toggling a catalog entry adds or removes it from the
owning collection directly, and per-item data is edited in place.
"""

from __future__ import annotations

from typing import Any, Iterable

from config.settings import WorkflowSettings
from observability.metrics import MetricsClient
from rx_schemas.catalog import CommittedItem, SearchResultItem
from rxdesk.acquisition.collection import CommitMerge, OwningCollection
from rxdesk.acquisition.fields import OverlaySchema
from rxdesk.acquisition.overlay import OverlayEditor
from rxdesk.common.exceptions import ValidationError


class DirectSelection:
    def __init__(
        self,
        catalog: Iterable[SearchResultItem],
        *,
        schema: OverlaySchema | None = None,
        settings: WorkflowSettings | None = None,
        metrics: MetricsClient | None = None,
        name: str = "selection",
    ) -> None:
        self.name = name
        self.catalog: dict[str, SearchResultItem] = {item.identity: item for item in catalog}
        self.schema = schema or OverlaySchema()
        self.overlay = OverlayEditor()
        self.collection = OwningCollection()
        # Toggling never re-adds a present identity, so the reject policy never fires here.
        self.merge = CommitMerge(
            self.collection,
            overlay=self.overlay,
            schema=self.schema,
            settings=settings,
            duplicate_policy="reject",
            metrics=metrics,
            name=name,
        )

    def set_catalog(self, catalog: Iterable[SearchResultItem]) -> None:
        """Replace the catalog (e.g. once the list has been fetched)."""
        self.catalog = {item.identity: item for item in catalog}

    def toggle(self, identity: str) -> bool:
        """Add or remove `identity`; True when it is now selected."""
        if identity in self.collection:
            self.merge.remove(identity)
            return False
        item = self.catalog.get(identity)
        if item is None:
            raise ValidationError(f"Unknown {self.name} entry: {identity}", field_errors={"identity": "unknown"})
        self.merge.add(item)
        if self.schema.fields:
            self.overlay.expand(identity)
        return True

    def is_selected(self, identity: str) -> bool:
        return identity in self.collection

    @property
    def selected_ids(self) -> list[str]:
        return self.collection.identities

    @property
    def items(self) -> tuple[CommittedItem, ...]:
        return self.collection.items

    def update(self, identity: str, field_name: str, value: Any) -> CommittedItem:
        return self.merge.update(identity, field_name, value)

    def configure(self, identity: str) -> bool:
        return self.overlay.toggle(identity).target == identity

    def clear(self) -> None:
        self.merge.clear()


__all__ = ["DirectSelection"]
