"""Plain-text live preview of a prescription form."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

from jinja2 import Environment, FileSystemLoader, select_autoescape

from rx_schemas.catalog import CommittedItem
from rxdesk.forms.prescription import PrescriptionForm
from rxdesk.forms.vitals import VitalReading

_TEMPLATE_ROOT = Path(__file__).parent / "templates"

_ENV = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_ROOT)),
    autoescape=select_autoescape(default=False),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)

STATUS_MARKERS = {"high": " (high)", "low": " (low)"}


def join_nonempty(values: Iterable[Any], sep: str = " | ") -> str:
    """Join values while skipping empty/None entries."""
    return sep.join(str(v) for v in values if v)


def medicine_line(item: CommittedItem) -> str:
    attrs = item.attributes
    name = item.label or item.identity
    salt = attrs.get("salt_quantity")
    head = f"{name} - {salt}" if salt else name
    return join_nonempty([head, attrs.get("dosage"), attrs.get("duration")])


def vital_line(reading: VitalReading) -> str:
    marker = STATUS_MARKERS.get(reading.status or "", "")
    return f"{reading.definition.name}: {reading.text}{marker}"


def preview_context(form: PrescriptionForm) -> dict[str, Any]:
    return {
        "patient_name": form.appointment.patient_name,
        "patient_id": form.appointment.patient_id,
        "symptoms": form.symptoms.strip(),
        "condition": form.condition.strip(),
        "info": form.info.strip(),
        "notes": form.notes.strip(),
        "medicines": [medicine_line(item) for item in form.medicines.items],
        "vitals": [vital_line(r) for r in form.vitals.entered()],
        "investigations": [item.label or item.identity for item in form.lab_tests.items],
    }


def render_prescription_preview(form: PrescriptionForm) -> str:
    template = _ENV.get_template("prescription_preview.jinja")
    return template.render(**preview_context(form))


__all__ = ["render_prescription_preview", "preview_context", "medicine_line", "vital_line", "join_nonempty"]
