"""Catalog item models.

These models track items through the search → stage → commit lifecycle.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SearchResultItem(BaseModel):
    """Immutable item returned by a search provider or a fixed catalog."""

    identity: str
    label: str = ""
    attributes: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def display_label(self) -> str:
        return self.label or self.identity


class CommittedItem(BaseModel):
    """Member of an owning collection.

    Attributes hold the merge of schema defaults, base attributes and the
    overlay values captured at commit time. Edit-in-place mutates them.
    """

    identity: str
    label: str = ""
    attributes: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": False}

    def as_row(self) -> dict[str, Any]:
        """Flatten to a single dict (`id`, `label`, then attributes)."""
        return {"id": self.identity, "label": self.label, **self.attributes}


class ReferencedEntityOption(BaseModel):
    """Selectable option produced by entity creation."""

    id: str
    label: str

    model_config = {"frozen": True}

    def to_select_option(self) -> dict[str, str]:
        return {"value": self.id, "label": self.label}
