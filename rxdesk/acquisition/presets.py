"""Ready-made workflow configurations for the clinic forms."""

from __future__ import annotations

from observability.metrics import MetricsClient
from rx_schemas.catalog import SearchResultItem
from rxdesk.acquisition.direct import DirectSelection
from rxdesk.acquisition.fields import OverlayField, OverlaySchema
from rxdesk.acquisition.search import SearchProvider
from rxdesk.acquisition.workflow import AcquisitionWorkflow

INSTRUCTION_CHOICES: tuple[str, ...] = ("After food", "Before food", "Before bedtime", "As needed")

MEDICINE_OVERLAY = OverlaySchema.of(
    OverlayField("salt_quantity", label="Salt quantity"),
    OverlayField("duration", label="Duration"),
    OverlayField("dosage", label="Dosage"),
    OverlayField("instruction", label="Instruction", choices=INSTRUCTION_CHOICES),
)

INVESTIGATION_OVERLAY = OverlaySchema.of(
    OverlayField("investigations", label="Investigations"),
    OverlayField("paid", label="Paid", numeric=True, default=0.0),
    OverlayField("discount", label="Discount", numeric=True, default=0.0),
    OverlayField("sample_collected_at", label="Sample collected at"),
)

# (identity, label)
INVESTIGATION_TYPES: tuple[tuple[str, str], ...] = (
    ("lab", "LAB"),
    ("usg", "USG"),
    ("digital-xray", "DIGITAL XRAY"),
    ("xray", "XRAY"),
    ("outsource-lab", "OUTSOURCE LAB"),
    ("ecg", "ECG"),
    ("ct-scan", "CT SCAN"),
    ("mri", "MRI"),
    ("eps", "EPS"),
    ("opg", "OPG"),
    ("cardiology", "CARDIOLOGY"),
    ("eeg", "EEG"),
    ("mammography", "MAMMOGRAPHY"),
)


def investigation_catalog() -> list[SearchResultItem]:
    return [SearchResultItem(identity=uid, label=label) for uid, label in INVESTIGATION_TYPES]


def medicine_workflow(
    provider: SearchProvider,
    *,
    debounce_s: float | None = None,
    metrics: MetricsClient | None = None,
) -> AcquisitionWorkflow:
    """Search-and-stage workflow for the prescription's medicine list."""
    return AcquisitionWorkflow(
        provider,
        schema=MEDICINE_OVERLAY,
        debounce_s=debounce_s,
        metrics=metrics,
        name="medicines",
    )


def investigation_selection(metrics: MetricsClient | None = None) -> DirectSelection:
    """Investigation types with per-type billing data."""
    return DirectSelection(
        investigation_catalog(),
        schema=INVESTIGATION_OVERLAY,
        metrics=metrics,
        name="investigations",
    )


def lab_test_selection(
    catalog: list[SearchResultItem] | None = None,
    metrics: MetricsClient | None = None,
) -> DirectSelection:
    """Lab tests on a prescription. No per-item data."""
    return DirectSelection(catalog or [], metrics=metrics, name="lab_tests")


__all__ = [
    "INSTRUCTION_CHOICES",
    "MEDICINE_OVERLAY",
    "INVESTIGATION_OVERLAY",
    "INVESTIGATION_TYPES",
    "investigation_catalog",
    "medicine_workflow",
    "investigation_selection",
    "lab_test_selection",
]
