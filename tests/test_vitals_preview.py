"""Tests for vitals classification and the live preview."""

from __future__ import annotations

import pytest

from conftest import DEBOUNCE_S
from rx_schemas.catalog import SearchResultItem
from rx_schemas.vitals import VitalDefinition
from rxdesk.common.exceptions import ValidationError
from rxdesk.forms.prescription import PrescriptionForm
from rxdesk.forms.vitals import VitalsPanel
from rxdesk.preview.render import render_prescription_preview
from rxdesk.session import AppointmentContext, SessionContext

TEMPERATURE = VitalDefinition(key="temperature", name="Temperature", lower_limit="97", higher_limit="99.5", unit="°F")
PULSE = VitalDefinition(key="pulse_rate", name="Pulse rate", lower_limit=60, higher_limit=100, unit="bpm")


class TestVitalDefinition:
    def test_string_limits_are_parsed(self):
        assert TEMPERATURE.lower_limit == 97.0

    @pytest.mark.parametrize(
        "value,expected",
        [("98.6", "normal"), ("101", "high"), ("95.2", "low"), (" ", None), ("n/a", None), (99.5, "normal")],
    )
    def test_classify(self, value, expected):
        assert TEMPERATURE.classify(value) == expected


class TestVitalsPanel:
    def test_readings_in_definition_order(self):
        panel = VitalsPanel([TEMPERATURE, PULSE])
        panel.set_value("pulse_rate", "82")
        panel.set_value("temperature", "98.6")
        assert panel.readings() == {"temperature": "98.6 °F", "pulse_rate": "82 bpm"}

    def test_blank_value_removes_reading(self):
        panel = VitalsPanel([PULSE])
        panel.set_value("pulse_rate", "82")
        panel.set_value("pulse_rate", "")
        assert panel.readings() == {}
        assert panel.status("pulse_rate") is None

    def test_unknown_vital(self):
        with pytest.raises(ValidationError):
            VitalsPanel([PULSE]).set_value("glucose", "90")

    def test_new_definitions_drop_stale_values(self):
        panel = VitalsPanel([PULSE, TEMPERATURE])
        panel.set_value("pulse_rate", "120")
        panel.set_value("temperature", "98")
        panel.set_definitions([TEMPERATURE])
        assert panel.readings() == {"temperature": "98 °F"}


class TestPreview:
    def make_form(self, provider) -> PrescriptionForm:
        return PrescriptionForm(
            SessionContext(user_id="DOC-1"),
            AppointmentContext(patient_id="PAT-3", patient_name="R. Kumar"),
            provider,
            lab_tests=[SearchResultItem(identity="XRAY005", label="Chest X-Ray")],
            vitals=[TEMPERATURE, PULSE],
            debounce_s=DEBOUNCE_S,
        )

    def test_empty_form_shows_placeholders(self, provider):
        text = render_prescription_preview(self.make_form(provider))

        assert text.startswith("R. Kumar\nPID: PAT-3\n")
        for placeholder in (
            "No symptoms entered",
            "No diagnosis entered",
            "No medicines added",
            "No vitals added",
            "No investigations added",
            "No advice added",
        ):
            assert placeholder in text
        assert "Additional info" not in text

    @pytest.mark.asyncio
    async def test_filled_form(self, provider):
        form = self.make_form(provider)
        form.set_text("symptoms", "fever")
        form.set_text("info", "review in 3 days")
        form.medicines.set_query("para")
        await form.medicines.search.drain()
        form.medicines.toggle("Paracetamol")
        form.medicines.set_override("Paracetamol", "dosage", "1-0-1")
        form.medicines.commit()
        form.lab_tests.toggle("XRAY005")
        form.vitals.set_value("temperature", "101")
        form.vitals.set_value("pulse_rate", "72")

        text = render_prescription_preview(form)

        assert "Symptoms\nfever\n" in text
        assert "Additional info\nreview in 3 days\n" in text
        assert "- Paracetamol - 500mg | 1-0-1\n" in text
        assert "- Temperature: 101 °F (high)\n" in text
        assert "- Pulse rate: 72 bpm\n" in text
        assert "- Chest X-Ray\n" in text
        form.close()
