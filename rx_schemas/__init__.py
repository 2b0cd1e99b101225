"""Public schema exports for rxdesk."""

from .catalog import CommittedItem, ReferencedEntityOption, SearchResultItem
from .payloads import (
    ArtifactReference,
    CaseDetailsPayload,
    InvestigationEntry,
    MedicineLine,
    PrescriptionPayload,
)
from .vitals import VitalDefinition, VitalStatus

__all__ = [
    "SearchResultItem",
    "CommittedItem",
    "ReferencedEntityOption",
    "MedicineLine",
    "PrescriptionPayload",
    "InvestigationEntry",
    "CaseDetailsPayload",
    "ArtifactReference",
    "VitalDefinition",
    "VitalStatus",
]
