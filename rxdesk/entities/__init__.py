"""In-form creation of referenced entities (referrers, agents, catalog entries)."""

from rxdesk.entities.bridge import EntityCreationBridge
from rxdesk.entities.contexts import (
    CatalogLink,
    CatalogLinkContext,
    CollectionAgentContext,
    ReferrerContext,
    SelectionContext,
    parse_context,
)
from rxdesk.entities.options import OptionsSet, SelectField
from rxdesk.entities.providers import EntityCreationProvider, LocalEntityCreationProvider

__all__ = [
    "EntityCreationBridge",
    "CatalogLink",
    "CatalogLinkContext",
    "CollectionAgentContext",
    "ReferrerContext",
    "SelectionContext",
    "parse_context",
    "OptionsSet",
    "SelectField",
    "EntityCreationProvider",
    "LocalEntityCreationProvider",
]
