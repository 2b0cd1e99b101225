"""Case details of a diagnostic bill."""

from __future__ import annotations

from typing import Iterable

from observability.metrics import MetricsClient
from rx_schemas.catalog import ReferencedEntityOption
from rxdesk.acquisition.direct import DirectSelection
from rxdesk.acquisition.presets import investigation_selection
from rxdesk.entities.bridge import EntityCreationBridge
from rxdesk.entities.options import SelectField
from rxdesk.entities.providers import EntityCreationProvider
from rxdesk.session import SessionContext

MAIN_CENTRE = ReferencedEntityOption(id="main", label="Main")


class CaseDetailsForm:
    def __init__(
        self,
        session: SessionContext,
        *,
        referrers: Iterable[ReferencedEntityOption] | None = None,
        collection_centres: Iterable[ReferencedEntityOption] | None = None,
        collection_agents: Iterable[ReferencedEntityOption] | None = None,
        catalog_items: Iterable[ReferencedEntityOption] | None = None,
        entity_provider: EntityCreationProvider | None = None,
        entity_timeout_s: float | None = None,
        metrics: MetricsClient | None = None,
    ) -> None:
        self.session = session
        self.referred_by = SelectField("referred_by", referrers, required=True)
        self.collection_centre = SelectField(
            "collection_centre",
            list(collection_centres) if collection_centres is not None else [MAIN_CENTRE],
            required=True,
        )
        self.sample_collection_agent = SelectField("sample_collection_agent", collection_agents)
        self.catalog_item = SelectField("catalog_item", catalog_items)
        self.investigations: DirectSelection = investigation_selection(metrics=metrics)
        self.entities = EntityCreationBridge(
            self.select_fields,
            entity_provider,
            timeout_s=entity_timeout_s,
            metrics=metrics,
        )

    @property
    def select_fields(self) -> dict[str, SelectField]:
        return {
            f.name: f
            for f in (self.referred_by, self.collection_centre, self.sample_collection_agent, self.catalog_item)
        }

    def select(self, field_name: str, value: str | None) -> None:
        self.select_fields[field_name].select(value)

    def reset(self) -> None:
        """Clear selections; created options stay available."""
        self.entities.close()
        for f in self.select_fields.values():
            f.clear()
        self.investigations.clear()


__all__ = ["CaseDetailsForm", "MAIN_CENTRE"]
