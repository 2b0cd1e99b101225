"""Flatten form state into submission payloads.

Assemblers are pure: they read the form and never mutate it. Missing
required sibling fields raise ValidationError with per-field messages.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Mapping

from pydantic import BaseModel

from rx_schemas.catalog import CommittedItem
from rx_schemas.payloads import CaseDetailsPayload, InvestigationEntry, MedicineLine, PrescriptionPayload
from rxdesk.common.exceptions import ValidationError
from rxdesk.forms.case_details import CaseDetailsForm
from rxdesk.forms.prescription import PrescriptionForm


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _number(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(value)
    return number


def _require(errors: dict[str, str], values: Mapping[str, Any]) -> None:
    for name, value in values.items():
        if not _text(value):
            errors[name] = "required"


class PayloadAssembler(ABC):
    """Builds one normalized payload from an owning form."""

    @abstractmethod
    def assemble(self) -> BaseModel:
        ...


class PrescriptionAssembler(PayloadAssembler):
    def __init__(self, form: PrescriptionForm):
        self.form = form

    @staticmethod
    def medicine_line(item: CommittedItem) -> MedicineLine:
        attrs = item.attributes
        return MedicineLine(
            medicine_name=item.label or item.identity,
            salt_quantity=_text(attrs.get("salt_quantity")),
            medicine_type=_text(attrs.get("type")),
            duration=_text(attrs.get("duration")),
            dosage=_text(attrs.get("dosage")),
            instruction=_text(attrs.get("instruction")),
        )

    def assemble(self) -> PrescriptionPayload:
        form = self.form
        doctor_id = form.session.user_id
        patient_id = form.appointment.patient_id

        errors: dict[str, str] = {}
        _require(errors, {"doctor_id": doctor_id, "patient_id": patient_id})
        if errors:
            raise ValidationError("Prescription is missing: " + ", ".join(errors), field_errors=errors)

        return PrescriptionPayload(
            doctor_id=doctor_id,
            patient_id=patient_id,
            appointment_id=form.appointment.appointment_id,
            clinic_id=form.session.center_id,
            symptoms=form.symptoms,
            condition=form.condition,
            notes=form.notes,
            info=form.info,
            lab_test_id=form.lab_tests.selected_ids,
            medicine=[self.medicine_line(item) for item in form.medicines.items],
            vitals=form.vitals.readings(),
        )


class CaseDetailsAssembler(PayloadAssembler):
    def __init__(self, form: CaseDetailsForm):
        self.form = form

    @staticmethod
    def investigation_entry(item: CommittedItem) -> InvestigationEntry:
        attrs = item.attributes
        try:
            paid = _number(attrs.get("paid"))
            discount = _number(attrs.get("discount"))
        except (TypeError, ValueError):
            raise ValidationError(
                f"{item.label or item.identity}: paid and discount must be numbers",
                field_errors={item.identity: "not a number"},
            ) from None
        return InvestigationEntry(
            type_id=item.identity,
            type_name=item.label,
            investigations=_text(attrs.get("investigations")),
            paid=paid,
            discount=discount,
            sample_collected_at=_text(attrs.get("sample_collected_at")) or None,
        )

    def assemble(self) -> CaseDetailsPayload:
        form = self.form
        errors: dict[str, str] = {}
        _require(
            errors,
            {
                "referred_by": form.referred_by.value,
                "collection_centre": form.collection_centre.value,
            },
        )
        if errors:
            raise ValidationError("Case details are missing: " + ", ".join(errors), field_errors=errors)

        return CaseDetailsPayload(
            referred_by=form.referred_by.value or "",
            collection_centre=form.collection_centre.value or "",
            sample_collection_agent=form.sample_collection_agent.value,
            center_id=form.session.center_id,
            investigations=[self.investigation_entry(item) for item in form.investigations.items],
        )


__all__ = ["PayloadAssembler", "PrescriptionAssembler", "CaseDetailsAssembler"]
