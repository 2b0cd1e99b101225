"""Provider implementations (HTTP and in-process)."""

from rxdesk.adapters.http_search import HttpCatalogSource, HttpSearchProvider, parse_lab_item, parse_medicine
from rxdesk.adapters.http_submission import HttpSubmissionProvider, parse_artifact
from rxdesk.adapters.local import StaticSearchProvider

__all__ = [
    "HttpCatalogSource",
    "HttpSearchProvider",
    "HttpSubmissionProvider",
    "StaticSearchProvider",
    "parse_artifact",
    "parse_lab_item",
    "parse_medicine",
]
