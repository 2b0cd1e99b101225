"""Owning collection and the commit/merge step.

- CommittedItems are created only by commit or direct add
- Identities are unique within a collection; duplicates are rejected or
  replace the existing entry in place, depending on the duplicate policy
- Insertion order is preserved and is what the user sees
- Overlay edits on committed items mutate them directly
"""

from __future__ import annotations

from typing import Any, Iterator, Literal, Mapping

from config.settings import WorkflowSettings
from observability.metrics import MetricsClient, get_metrics_client
from rx_schemas.catalog import CommittedItem, SearchResultItem
from rxdesk.acquisition.fields import OverlaySchema
from rxdesk.acquisition.overlay import OverlayEditor
from rxdesk.acquisition.search import SearchController
from rxdesk.acquisition.staging import StagingSet
from rxdesk.common.exceptions import ConflictError, ValidationError
from rxdesk.common.logger import get_logger

logger = get_logger("rxdesk.acquisition.collection")

DuplicatePolicy = Literal["reject", "upsert"]


class OwningCollection:
    """Ordered sequence of CommittedItem."""

    def __init__(self, items: list[CommittedItem] | None = None):
        self._items: list[CommittedItem] = []
        for item in items or []:
            if self.index_of(item.identity) is not None:
                raise ConflictError(f"Duplicate identity {item.identity!r}", [item.identity])
            self._items.append(item)

    def __iter__(self) -> Iterator[CommittedItem]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, identity: object) -> bool:
        return self.index_of(identity) is not None  # type: ignore[arg-type]

    @property
    def items(self) -> tuple[CommittedItem, ...]:
        return tuple(self._items)

    @property
    def identities(self) -> list[str]:
        return [item.identity for item in self._items]

    def index_of(self, identity: str) -> int | None:
        for idx, item in enumerate(self._items):
            if item.identity == identity:
                return idx
        return None

    def get(self, identity: str) -> CommittedItem | None:
        idx = self.index_of(identity)
        return None if idx is None else self._items[idx]

    def rows(self) -> list[dict[str, Any]]:
        return [item.as_row() for item in self._items]

    def _append(self, item: CommittedItem) -> None:
        self._items.append(item)

    def _replace(self, index: int, item: CommittedItem) -> None:
        self._items[index] = item

    def _remove_at(self, index: int) -> CommittedItem:
        return self._items.pop(index)

    def _clear(self) -> None:
        self._items.clear()


class CommitMerge:
    """Folds staged candidates into an OwningCollection.

    The StagingSet, OverlayEditor and (optional) SearchController must be the
    ones of the same list; the editor is shared between staged and committed
    items.
    """

    def __init__(
        self,
        collection: OwningCollection,
        *,
        staging: StagingSet | None = None,
        overlay: OverlayEditor | None = None,
        schema: OverlaySchema | None = None,
        search: SearchController | None = None,
        settings: WorkflowSettings | None = None,
        duplicate_policy: DuplicatePolicy | None = None,
        metrics: MetricsClient | None = None,
        name: str = "items",
    ) -> None:
        self._collection = collection
        self._overlay = overlay or (staging.overlay if staging is not None else OverlayEditor())
        self._staging = staging
        self._schema = schema or OverlaySchema()
        self._search = search
        settings = settings or WorkflowSettings()
        self._policy: DuplicatePolicy = duplicate_policy or settings.duplicate_policy
        self._metrics = metrics
        self._name = name

    @property
    def collection(self) -> OwningCollection:
        return self._collection

    @property
    def duplicate_policy(self) -> DuplicatePolicy:
        return self._policy

    @property
    def _metrics_client(self) -> MetricsClient:
        return self._metrics or get_metrics_client()

    def _build(self, item: SearchResultItem, overrides: Mapping[str, Any]) -> CommittedItem:
        return CommittedItem(
            identity=item.identity,
            label=item.label,
            attributes=self._schema.merge(item.attributes, overrides),
        )

    def _check_conflicts(self, identities: list[str]) -> None:
        if self._policy != "reject":
            return
        clashes = [identity for identity in identities if identity in self._collection]
        if clashes:
            self._metrics_client.incr("acquisition.conflicts", {"list": self._name})
            raise ConflictError(
                f"Already added: {', '.join(clashes)}",
                identities=clashes,
            )

    def _place(self, committed: CommittedItem) -> None:
        idx = self._collection.index_of(committed.identity)
        if idx is None:
            self._collection._append(committed)
        else:
            # upsert keeps the original position
            self._collection._replace(idx, committed)

    def commit(self) -> list[CommittedItem]:
        """Append every selected candidate, in selection order.

        With the reject policy nothing changes when any identity is already
        committed; the staged candidates stay put so the user can deselect.
        """
        if self._staging is None:
            raise RuntimeError("commit() needs a StagingSet")

        selected = self._staging.selected()
        self._check_conflicts([c.identity for c in selected])

        committed = [self._build(c.item, c.effective_overrides()) for c in selected]
        for item in committed:
            self._place(item)

        self._staging.clear()
        if self._search is not None:
            self._search.reset()

        if committed:
            self._metrics_client.incr("acquisition.committed", {"list": self._name}, value=len(committed))
        logger.info("%s: committed %d item(s), %d total", self._name, len(committed), len(self._collection))
        return committed

    def add(self, item: SearchResultItem, overrides: Mapping[str, Any] | None = None) -> CommittedItem:
        """Direct manual add, bypassing staging."""
        self._check_conflicts([item.identity])
        committed = self._build(item, self._schema.coerce_many(overrides or {}))
        self._place(committed)
        return committed

    def remove(self, identity: str) -> bool:
        """Remove the matching item. Unknown identities are a no-op."""
        idx = self._collection.index_of(identity)
        if idx is None:
            return False
        self._collection._remove_at(idx)
        self._overlay.release(identity)
        logger.debug("%s: removed %s", self._name, identity)
        return True

    def update(self, identity: str, field_name: str, value: Any) -> CommittedItem:
        """Edit-in-place on a committed item."""
        item = self._collection.get(identity)
        if item is None:
            raise ValidationError(
                f"{identity!r} is not in the list",
                field_errors={"identity": "not committed"},
            )
        coerced = self._schema.coerce(field_name, value)
        if coerced is None:
            declared = self._schema.get(field_name)
            item.attributes[field_name] = declared.default if declared is not None and declared.default is not None else ""
        else:
            item.attributes[field_name] = coerced
        return item

    def clear(self) -> None:
        target = self._overlay.target
        if target is not None and target in self._collection:
            self._overlay.collapse()
        self._collection._clear()


__all__ = ["OwningCollection", "CommitMerge", "DuplicatePolicy"]
