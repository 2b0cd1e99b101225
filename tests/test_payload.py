"""Tests for forms and payload assembly."""

from __future__ import annotations

import pytest

from conftest import DEBOUNCE_S
from rx_schemas.catalog import ReferencedEntityOption, SearchResultItem
from rxdesk.common.exceptions import ValidationError
from rxdesk.forms.case_details import CaseDetailsForm
from rxdesk.forms.prescription import PrescriptionForm
from rxdesk.payload.assembler import CaseDetailsAssembler, PrescriptionAssembler
from rxdesk.session import AppointmentContext, SessionContext

SESSION = SessionContext(user_id="DOC-1", organization_id="ORG-1", center_id="CTR-9", display_name="Dr. Mehta")
APPOINTMENT = AppointmentContext(appointment_id="APT-7", patient_id="PAT-3", patient_name="R. Kumar", symptoms="fever")
LAB_TESTS = [
    SearchResultItem(identity="XRAY005", label="Chest X-Ray"),
    SearchResultItem(identity="XRAY008", label="Spine X-Ray"),
]


@pytest.fixture
def form(provider):
    form = PrescriptionForm(SESSION, APPOINTMENT, provider, lab_tests=LAB_TESTS, debounce_s=DEBOUNCE_S)
    yield form
    form.close()


async def add_medicine(form: PrescriptionForm, query: str, identity: str, **overrides) -> None:
    form.medicines.open()
    form.medicines.set_query(query)
    await form.medicines.search.drain()
    form.medicines.toggle(identity)
    for name, value in overrides.items():
        form.medicines.set_override(identity, name, value)
    form.medicines.commit()


class TestPrescriptionForm:
    def test_symptoms_start_from_appointment(self, form):
        assert form.symptoms == "fever"
        assert form.condition == ""

    def test_unknown_text_field(self, form):
        with pytest.raises(ValidationError):
            form.set_text("allergies", "none")

    @pytest.mark.asyncio
    async def test_reset_restores_a_fresh_prescription(self, form):
        form.set_text("symptoms", "fever, cough")
        form.set_text("notes", "rest")
        await add_medicine(form, "para", "Paracetamol")
        form.lab_tests.toggle("XRAY005")
        form.vitals.set_value("weight", "70")

        form.reset()

        assert form.symptoms == "fever"
        assert form.notes == ""
        assert form.medicines.items == ()
        assert form.lab_tests.selected_ids == []
        assert form.vitals.readings() == {}


@pytest.mark.asyncio
class TestPrescriptionAssembler:
    async def test_full_payload_uses_wire_keys(self, form):
        form.set_text("condition", "viral fever")
        form.set_text("notes", "plenty of fluids")
        form.set_text("info", "review in 3 days")
        await add_medicine(form, "para", "Paracetamol", dosage="1-0-1", duration="5 days", instruction="After food")
        await add_medicine(form, "amox", "Amoxicillin")
        form.lab_tests.toggle("XRAY008")
        form.lab_tests.toggle("XRAY005")
        form.vitals.set_value("weight", "70")
        form.vitals.set_value("spo2", "97")

        wire = PrescriptionAssembler(form).assemble().to_wire()

        assert wire["doctor_id"] == "DOC-1"
        assert wire["patient_id"] == "PAT-3"
        assert wire["appointment_id"] == "APT-7"
        assert wire["clinic_id"] == "CTR-9"
        assert wire["symptoms"] == "fever"
        assert wire["lab_test_id"] == ["XRAY008", "XRAY005"]
        assert wire["medicine"] == [
            {
                "medicineName": "Paracetamol",
                "saltQuantity": "500mg",
                "medicinetype": "Tablet",
                "duration": "5 days",
                "dosage": "1-0-1",
                "instruction": "After food",
            },
            {
                "medicineName": "Amoxicillin",
                "saltQuantity": "250mg",
                "medicinetype": "Capsule",
                "duration": "",
                "dosage": "",
                "instruction": "",
            },
        ]
        assert wire["vitals"] == {"weight": "70 kg", "spo2": "97 %"}

    async def test_assemble_does_not_mutate_the_form(self, form):
        await add_medicine(form, "para", "Paracetamol")
        before = form.medicines.collection.rows()
        PrescriptionAssembler(form).assemble()
        PrescriptionAssembler(form).assemble()
        assert form.medicines.collection.rows() == before

    async def test_missing_patient_and_doctor(self, provider):
        form = PrescriptionForm(SessionContext(), AppointmentContext(), provider)
        with pytest.raises(ValidationError) as exc_info:
            PrescriptionAssembler(form).assemble()
        assert exc_info.value.field_errors == {"doctor_id": "required", "patient_id": "required"}


class TestCaseDetailsAssembler:
    def make_form(self) -> CaseDetailsForm:
        return CaseDetailsForm(
            SESSION,
            referrers=[ReferencedEntityOption(id="ref-1", label="Dr. A Rao")],
            collection_agents=[ReferencedEntityOption(id="ag-1", label="Ravi")],
        )

    def test_required_select_fields(self):
        form = self.make_form()
        with pytest.raises(ValidationError) as exc_info:
            CaseDetailsAssembler(form).assemble()
        assert set(exc_info.value.field_errors) == {"referred_by", "collection_centre"}

    def test_payload_with_investigations(self):
        form = self.make_form()
        form.select("referred_by", "ref-1")
        form.select("collection_centre", "main")
        form.investigations.toggle("lab")
        form.investigations.update("lab", "investigations", "CBC")
        form.investigations.update("lab", "paid", "400")
        form.investigations.update("lab", "sample_collected_at", "2026-10-19T09:30")
        form.investigations.toggle("ecg")

        payload = CaseDetailsAssembler(form).assemble()

        assert payload.referred_by == "ref-1"
        assert payload.collection_centre == "main"
        assert payload.sample_collection_agent is None
        assert payload.center_id == "CTR-9"
        assert [(i.type_id, i.type_name) for i in payload.investigations] == [("lab", "LAB"), ("ecg", "ECG")]
        lab = payload.investigations[0]
        assert (lab.investigations, lab.paid, lab.discount) == ("CBC", 400.0, 0.0)
        assert lab.sample_collected_at == "2026-10-19T09:30"
        assert payload.investigations[1].sample_collected_at is None

    def test_non_finite_amount_is_rejected(self):
        form = self.make_form()
        form.select("referred_by", "ref-1")
        form.select("collection_centre", "main")
        form.investigations.toggle("lab")
        form.investigations.items[0].attributes["paid"] = "nan"

        with pytest.raises(ValidationError) as exc_info:
            CaseDetailsAssembler(form).assemble()
        assert exc_info.value.field_errors == {"lab": "not a number"}

    @pytest.mark.asyncio
    async def test_created_referrer_is_used_in_payload(self):
        form = self.make_form()
        form.entities.open({"kind": "referrer"})
        option = await form.entities.submit({"first_name": "Neha", "last_name": "Shah"})
        form.select("collection_centre", "main")

        payload = CaseDetailsAssembler(form).assemble()

        assert payload.referred_by == option.id
        assert form.referred_by.selected.label == "Dr. Neha Shah"

    def test_reset_keeps_created_options(self):
        form = self.make_form()
        form.select("referred_by", "ref-1")
        form.investigations.toggle("mri")
        form.reset()
        assert form.referred_by.value is None
        assert len(form.referred_by.options) == 1
        assert form.investigations.items == ()
