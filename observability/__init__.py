# Observability module
from .metrics import (
    InMemoryMetricsClient,
    MetricsClient,
    NullMetricsClient,
    StdoutMetricsClient,
    get_metrics_client,
    reset_metrics_client,
    set_metrics_client,
)
from .timing import timed, TimingContext

__all__ = [
    "MetricsClient",
    "NullMetricsClient",
    "StdoutMetricsClient",
    "InMemoryMetricsClient",
    "get_metrics_client",
    "set_metrics_client",
    "reset_metrics_client",
    "timed",
    "TimingContext",
]
