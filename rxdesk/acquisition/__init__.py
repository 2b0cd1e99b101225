"""Search, stage, configure and commit items into an owning collection."""

from rxdesk.acquisition.collection import CommitMerge, DuplicatePolicy, OwningCollection
from rxdesk.acquisition.direct import DirectSelection
from rxdesk.acquisition.fields import OverlayField, OverlaySchema
from rxdesk.acquisition.overlay import COLLAPSED, OverlayEditor, OverlayState
from rxdesk.acquisition.search import SearchController, SearchProvider, SearchState
from rxdesk.acquisition.staging import StagedCandidate, StagingSet
from rxdesk.acquisition.workflow import AcquisitionWorkflow

__all__ = [
    "AcquisitionWorkflow",
    "COLLAPSED",
    "CommitMerge",
    "DirectSelection",
    "DuplicatePolicy",
    "OverlayEditor",
    "OverlayField",
    "OverlaySchema",
    "OverlayState",
    "OwningCollection",
    "SearchController",
    "SearchProvider",
    "SearchState",
    "StagedCandidate",
    "StagingSet",
]
