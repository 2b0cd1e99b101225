"""Tests for StagingSet, OverlayEditor and OverlaySchema."""

from __future__ import annotations

import pytest

from conftest import MEDICINES
from rxdesk.acquisition.fields import OverlayField, OverlaySchema
from rxdesk.acquisition.overlay import COLLAPSED, OverlayEditor
from rxdesk.acquisition.presets import INVESTIGATION_OVERLAY, MEDICINE_OVERLAY
from rxdesk.acquisition.staging import StagingSet
from rxdesk.common.exceptions import ValidationError


@pytest.fixture
def staging() -> StagingSet:
    staging = StagingSet(MEDICINE_OVERLAY, OverlayEditor())
    staging.offer(MEDICINES)
    return staging


class TestOverlayEditor:
    def test_starts_collapsed(self):
        assert OverlayEditor().state == COLLAPSED

    def test_expand_replaces_current_target(self):
        editor = OverlayEditor()
        editor.expand("a")
        editor.expand("b")
        assert editor.target == "b"
        assert editor.is_expanded("a") is False

    def test_toggle_same_target_collapses(self):
        editor = OverlayEditor()
        editor.toggle("a")
        assert editor.state.expanded
        editor.toggle("a")
        assert editor.state == COLLAPSED

    def test_toggle_other_target_switches(self):
        editor = OverlayEditor()
        editor.toggle("a")
        editor.toggle("b")
        assert editor.target == "b"

    def test_release_only_collapses_its_own_target(self):
        editor = OverlayEditor()
        editor.expand("a")
        editor.release("b")
        assert editor.target == "a"
        editor.release("a")
        assert editor.target is None


class TestOverlaySchema:
    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            MEDICINE_OVERLAY.coerce("colour", "red")
        assert "colour" in exc_info.value.field_errors

    def test_empty_schema_accepts_anything(self):
        assert OverlaySchema().coerce("colour", " red ") == "red"

    def test_blank_means_no_value(self):
        assert MEDICINE_OVERLAY.coerce("dosage", "   ") is None
        assert MEDICINE_OVERLAY.coerce("dosage", None) is None

    def test_closed_choices(self):
        assert MEDICINE_OVERLAY.coerce("instruction", "After food") == "After food"
        with pytest.raises(ValidationError):
            MEDICINE_OVERLAY.coerce("instruction", "With milk")

    def test_numeric_fields(self):
        assert INVESTIGATION_OVERLAY.coerce("paid", "150") == 150.0
        with pytest.raises(ValidationError):
            INVESTIGATION_OVERLAY.coerce("paid", "lots")
        with pytest.raises(ValidationError):
            INVESTIGATION_OVERLAY.coerce("discount", -5)

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf", float("nan"), True])
    def test_numeric_fields_reject_non_finite_and_bool(self, value):
        with pytest.raises(ValidationError) as exc_info:
            INVESTIGATION_OVERLAY.coerce("paid", value)
        assert exc_info.value.field_errors == {"paid": "not a number"}

    def test_merge_order_defaults_base_overrides(self):
        schema = OverlaySchema.of(OverlayField("dosage", default="1-0-1"), OverlayField("duration"))
        merged = schema.merge({"dosage": "0-0-1", "duration": "3 days"}, {"duration": "5 days"})
        assert merged == {"dosage": "0-0-1", "duration": "5 days"}
        assert schema.merge({}, {}) == {"dosage": "1-0-1"}


class TestStagingSet:
    def test_toggle_on_stages_and_expands_overlay(self, staging):
        assert staging.toggle("Paracetamol") is True
        assert "Paracetamol" in staging
        assert staging.overlay.target == "Paracetamol"

    def test_selection_order_is_preserved(self, staging):
        staging.toggle("Pantoprazole")
        staging.toggle("Paracetamol")
        assert [c.identity for c in staging.selected()] == ["Pantoprazole", "Paracetamol"]

    def test_toggle_pair_restores_state(self, staging):
        staging.toggle("Paracetamol")
        before = [(c.identity, dict(c.overrides)) for c in staging.candidates]

        staging.toggle("Paracip")
        staging.set_override("Paracip", "dosage", "1-0-1")
        staging.toggle("Paracip")

        assert [(c.identity, dict(c.overrides)) for c in staging.candidates] == before
        # the overlay does not return to its previous target
        assert staging.overlay.target is None

    def test_retoggle_starts_without_old_overrides(self, staging):
        staging.toggle("Paracetamol")
        staging.set_override("Paracetamol", "dosage", "1-0-1")
        staging.toggle("Paracetamol")
        staging.toggle("Paracetamol")
        assert staging.get("Paracetamol").overrides == {}

    def test_unknown_identity_rejected(self, staging):
        with pytest.raises(ValidationError):
            staging.toggle("Ibuprofen")
        assert len(staging) == 0

    def test_select_and_deselect_are_idempotent(self, staging):
        first = staging.select("Paracetamol")
        assert staging.select("Paracetamol") is first
        staging.deselect("Paracetamol")
        staging.deselect("Paracetamol")
        assert len(staging) == 0

    def test_override_requires_staged_candidate(self, staging):
        with pytest.raises(ValidationError):
            staging.set_override("Paracetamol", "dosage", "1-0-1")

    def test_invalid_override_leaves_candidate_unchanged(self, staging):
        staging.toggle("Paracetamol")
        with pytest.raises(ValidationError):
            staging.set_override("Paracetamol", "instruction", "Whenever")
        assert staging.get("Paracetamol").overrides == {}

    def test_blank_override_clears_it(self, staging):
        staging.toggle("Paracetamol")
        staging.set_override("Paracetamol", "salt_quantity", "650mg")
        staging.set_override("Paracetamol", "salt_quantity", "")
        assert "salt_quantity" not in staging.get("Paracetamol").overrides

    def test_candidates_survive_a_new_result_list(self, staging):
        staging.toggle("Paracetamol")
        staging.offer([])
        assert staging.get("Paracetamol").item.attributes["salt_quantity"] == "500mg"

    def test_only_latest_results_can_be_staged(self, staging):
        staging.toggle("Paracetamol")
        staging.offer([m for m in MEDICINES if m.identity == "Amoxicillin"])

        with pytest.raises(ValidationError):
            staging.toggle("Pantoprazole")
        assert staging.toggle("Paracetamol") is False
        assert staging.toggle("Amoxicillin") is True

    def test_deselect_keeps_overlay_on_other_target(self, staging):
        staging.toggle("Paracetamol")
        staging.toggle("Paracip")
        staging.toggle("Paracetamol")
        assert staging.overlay.target == "Paracip"

    def test_clear_drops_everything(self, staging):
        staging.toggle("Paracetamol")
        staging.clear()
        assert len(staging) == 0
        assert staging.overlay.target is None
        with pytest.raises(ValidationError):
            staging.toggle("Paracetamol")
