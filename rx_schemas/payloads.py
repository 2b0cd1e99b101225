"""Submission payload models.

Field aliases reproduce the wire keys the prescription service expects
(`medicineName`, `saltQuantity`, `medicinetype`). Dump with `by_alias=True`.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class MedicineLine(BaseModel):
    medicine_name: str = Field(alias="medicineName")
    salt_quantity: str = Field(default="", alias="saltQuantity")
    medicine_type: str = Field(default="", alias="medicinetype")
    duration: str = ""
    dosage: str = ""
    instruction: str = ""

    model_config = {"populate_by_name": True}


class PrescriptionPayload(BaseModel):
    """Flat prescription submission."""

    doctor_id: str
    patient_id: str
    appointment_id: str = ""
    clinic_id: str = ""

    symptoms: str = ""
    condition: str = ""
    notes: str = ""
    info: str = ""

    lab_test_id: List[str] = Field(default_factory=list)
    medicine: List[MedicineLine] = Field(default_factory=list)
    vitals: Dict[str, str] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class InvestigationEntry(BaseModel):
    type_id: str
    type_name: str = ""
    investigations: str = ""
    paid: float = 0.0
    discount: float = 0.0
    sample_collected_at: Optional[str] = None


class CaseDetailsPayload(BaseModel):
    """Flat case-details submission for a diagnostic bill."""

    referred_by: str
    collection_centre: str
    sample_collection_agent: Optional[str] = None
    center_id: str = ""
    investigations: List[InvestigationEntry] = Field(default_factory=list)

    def to_wire(self) -> dict:
        return self.model_dump()


class ArtifactReference(BaseModel):
    """Reference to a generated artifact (e.g. a prescription PDF)."""

    reference_id: str = ""
    url: Optional[str] = None
