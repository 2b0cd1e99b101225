"""Search → stage → configure → commit, wired together for one list."""

from __future__ import annotations

from typing import Any

from config.settings import SearchSettings, WorkflowSettings
from observability.metrics import MetricsClient
from rx_schemas.catalog import CommittedItem
from rxdesk.acquisition.collection import CommitMerge, DuplicatePolicy, OwningCollection
from rxdesk.acquisition.fields import OverlaySchema
from rxdesk.acquisition.overlay import OverlayEditor
from rxdesk.acquisition.search import SearchController, SearchProvider, SearchState
from rxdesk.acquisition.staging import StagedCandidate, StagingSet
from rxdesk.common.logger import get_logger

logger = get_logger("rxdesk.acquisition.workflow")


class AcquisitionWorkflow:
    """The "add items" surface of one owning collection.

    Search results feed the staging set; one overlay editor serves both the
    staged candidates and the committed items.
    """

    def __init__(
        self,
        provider: SearchProvider,
        *,
        schema: OverlaySchema | None = None,
        collection: OwningCollection | None = None,
        search_settings: SearchSettings | None = None,
        settings: WorkflowSettings | None = None,
        duplicate_policy: DuplicatePolicy | None = None,
        debounce_s: float | None = None,
        metrics: MetricsClient | None = None,
        name: str = "items",
    ) -> None:
        self.name = name
        self.schema = schema or OverlaySchema()
        self.overlay = OverlayEditor()
        self.search = SearchController(
            provider,
            settings=search_settings,
            debounce_s=debounce_s,
            metrics=metrics,
            name=name,
        )
        self.staging = StagingSet(self.schema, self.overlay)
        self.collection = collection if collection is not None else OwningCollection()
        self.merge = CommitMerge(
            self.collection,
            staging=self.staging,
            overlay=self.overlay,
            schema=self.schema,
            search=self.search,
            settings=settings,
            duplicate_policy=duplicate_policy,
            metrics=metrics,
            name=name,
        )
        self.search.subscribe(self._on_search_state)
        self._open = False

    def _on_search_state(self, state: SearchState) -> None:
        self.staging.offer(state.results)

    # surface lifecycle

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        self._open = True
        logger.debug("%s: add surface opened", self.name)

    def close(self) -> None:
        """Dismiss the surface: query, results and staged candidates are dropped."""
        self.search.reset()
        self.staging.clear()
        self._open = False
        logger.debug("%s: add surface closed", self.name)

    def dispose(self) -> None:
        """Owning form unmounted: also cancel in-flight lookups."""
        self.search.close()
        self.staging.clear()
        self._open = False

    # staging surface

    def set_query(self, text: str) -> None:
        self.search.set_query(text)

    def toggle(self, identity: str) -> bool:
        return self.staging.toggle(identity)

    def set_override(self, identity: str, field_name: str, value: Any) -> None:
        self.staging.set_override(identity, field_name, value)

    @property
    def candidates(self) -> list[StagedCandidate]:
        return self.staging.candidates

    def commit(self) -> list[CommittedItem]:
        committed = self.merge.commit()
        self._open = False
        return committed

    # committed surface

    @property
    def items(self) -> tuple[CommittedItem, ...]:
        return self.collection.items

    def configure(self, identity: str) -> bool:
        """Toggle the overlay of a committed item; True when now expanded."""
        return self.overlay.toggle(identity).target == identity

    def update(self, identity: str, field_name: str, value: Any) -> CommittedItem:
        return self.merge.update(identity, field_name, value)

    def remove(self, identity: str) -> bool:
        return self.merge.remove(identity)


__all__ = ["AcquisitionWorkflow"]
