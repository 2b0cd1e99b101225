"""Prescription form: free text, medicines, lab tests and vitals."""

from __future__ import annotations

from typing import Iterable

from observability.metrics import MetricsClient
from rx_schemas.catalog import SearchResultItem
from rx_schemas.vitals import VitalDefinition
from rxdesk.acquisition.direct import DirectSelection
from rxdesk.acquisition.presets import lab_test_selection, medicine_workflow
from rxdesk.acquisition.search import SearchProvider
from rxdesk.acquisition.workflow import AcquisitionWorkflow
from rxdesk.common.exceptions import ValidationError
from rxdesk.common.logger import get_logger
from rxdesk.forms.vitals import VitalsPanel
from rxdesk.session import AppointmentContext, SessionContext

logger = get_logger("rxdesk.forms.prescription")

TEXT_FIELDS: tuple[str, ...] = ("symptoms", "condition", "notes", "info")


class PrescriptionForm:
    def __init__(
        self,
        session: SessionContext,
        appointment: AppointmentContext,
        medicine_provider: SearchProvider,
        *,
        lab_tests: Iterable[SearchResultItem] | None = None,
        vitals: Iterable[VitalDefinition] | None = None,
        debounce_s: float | None = None,
        metrics: MetricsClient | None = None,
    ) -> None:
        self.session = session
        self.appointment = appointment
        self.medicines: AcquisitionWorkflow = medicine_workflow(
            medicine_provider, debounce_s=debounce_s, metrics=metrics
        )
        self.lab_tests: DirectSelection = lab_test_selection(list(lab_tests or []), metrics=metrics)
        self.vitals = VitalsPanel(vitals)
        self._text: dict[str, str] = {}
        self._reset_text()

    def _reset_text(self) -> None:
        self._text = {name: "" for name in TEXT_FIELDS}
        self._text["symptoms"] = self.appointment.symptoms or ""

    def set_text(self, field_name: str, value: str | None) -> None:
        if field_name not in self._text:
            raise ValidationError(f"Unknown field: {field_name}", field_errors={field_name: "unknown field"})
        self._text[field_name] = value or ""

    def text(self, field_name: str) -> str:
        return self._text.get(field_name, "")

    @property
    def symptoms(self) -> str:
        return self._text["symptoms"]

    @property
    def condition(self) -> str:
        return self._text["condition"]

    @property
    def notes(self) -> str:
        return self._text["notes"]

    @property
    def info(self) -> str:
        return self._text["info"]

    def reset(self) -> None:
        """Back to a fresh prescription for the same appointment."""
        self._reset_text()
        self.medicines.close()
        self.medicines.merge.clear()
        self.lab_tests.clear()
        self.vitals.clear()
        logger.debug("prescription form reset")

    def close(self) -> None:
        """Form unmounted."""
        self.medicines.dispose()


__all__ = ["PrescriptionForm", "TEXT_FIELDS"]
