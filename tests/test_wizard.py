"""Tests for the four-step vehicle finder."""

import pytest

from tireshop.core.errors import WizardError
from tireshop.models.vehicle import VehicleSelection
from tireshop.services.client_storage import (
    VEHICLE_SELECTION_KEY,
    WIZARD_STEP_KEY,
    ClientScope,
    ClientStorage,
)
from tireshop.services.wizard import VehicleFinderWizard, WizardStep, can_advance

FULL = VehicleSelection(year="2020", make="Honda", model="Civic", trim="EX")


def _filled(storage=None) -> VehicleFinderWizard:
    wizard = VehicleFinderWizard(storage=storage)
    for field in ("year", "make", "model", "trim"):
        wizard.update(field, getattr(FULL, field))
    return wizard


# ---------------------------------------------------------------------------
# Step gate
# ---------------------------------------------------------------------------


class TestCanAdvance:
    """Each step opens only once its own field is filled in."""

    @pytest.mark.parametrize("step", list(WizardStep))
    def test_empty_draft_blocks_every_step(self, step):
        assert can_advance(step, VehicleSelection()) is False

    @pytest.mark.parametrize("step", list(WizardStep))
    def test_full_draft_opens_every_step(self, step):
        assert can_advance(step, FULL) is True

    def test_only_current_field_matters(self):
        draft = VehicleSelection(make="Honda")
        assert can_advance(WizardStep.YEAR, draft) is False
        assert can_advance(WizardStep.MAKE, draft) is True

    def test_labels(self):
        assert [s.label for s in WizardStep] == ["Year", "Make", "Model", "Trim"]


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


class TestNavigation:
    def test_starts_at_year(self):
        wizard = VehicleFinderWizard()
        assert wizard.step == WizardStep.YEAR
        assert wizard.can_proceed() is False

    def test_next_without_value_raises(self):
        wizard = VehicleFinderWizard()
        with pytest.raises(WizardError):
            wizard.next()
        assert wizard.step == WizardStep.YEAR

    def test_walk_to_results(self):
        wizard = VehicleFinderWizard()
        wizard.update("year", "2020")
        assert wizard.next() is None
        wizard.update("make", "Honda")
        assert wizard.next() is None
        wizard.update("model", "Civic")
        assert wizard.next() is None
        assert wizard.step == WizardStep.TRIM
        wizard.update("trim", "EX")
        assert wizard.next() == FULL
        assert wizard.step == WizardStep.TRIM

    def test_back_is_always_allowed(self):
        wizard = VehicleFinderWizard(draft=FULL, step=WizardStep.MODEL)
        wizard.back()
        assert wizard.step == WizardStep.MAKE

    def test_back_from_year_stays(self):
        wizard = VehicleFinderWizard()
        wizard.back()
        assert wizard.step == WizardStep.YEAR

    def test_unknown_field_rejected(self):
        with pytest.raises(WizardError):
            VehicleFinderWizard().update("color", "red")

    def test_progress_marks_completed_steps(self):
        wizard = VehicleFinderWizard(draft=VehicleSelection(year="2020", make="Honda"))
        assert [p.completed for p in wizard.progress()] == [True, True, False, False]


# ---------------------------------------------------------------------------
# Downstream clearing
# ---------------------------------------------------------------------------


class TestDependentFields:
    def test_changing_year_clears_make_and_model(self):
        wizard = _filled()
        wizard.update("year", "2019")
        assert wizard.draft == VehicleSelection(year="2019", trim="EX")

    def test_changing_make_clears_model(self):
        wizard = _filled()
        wizard.update("make", "Toyota")
        assert wizard.draft.model == ""
        assert wizard.draft.year == "2020"
        assert wizard.draft.trim == "EX"

    def test_same_value_keeps_downstream(self):
        wizard = _filled()
        wizard.update("year", "2020")
        assert wizard.draft == FULL

    def test_step_pulled_back_when_field_cleared(self):
        wizard = _filled()
        wizard.step = WizardStep.TRIM
        wizard.update("make", "Toyota")
        assert wizard.step == WizardStep.MODEL


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class TestRestore:
    def test_every_update_is_stored(self):
        storage = ClientScope(ClientStorage(), "abc")
        wizard = VehicleFinderWizard(storage=storage)
        wizard.update("year", "2020")
        assert storage.get(VEHICLE_SELECTION_KEY)["year"] == "2020"

    def test_restore_resumes_step(self):
        storage = ClientScope(ClientStorage(), "abc")
        wizard = _filled(storage)
        wizard.next()
        wizard.next()

        restored = VehicleFinderWizard.restore(storage)
        assert restored.draft == FULL
        assert restored.step == WizardStep.MODEL

    def test_restore_without_stored_step_lands_on_first_gap(self):
        storage = ClientScope(ClientStorage(), "abc")
        storage.set(VEHICLE_SELECTION_KEY, {"year": "2020", "make": "Honda"})
        assert VehicleFinderWizard.restore(storage).step == WizardStep.MODEL

    def test_unreachable_stored_step_ignored(self):
        storage = ClientScope(ClientStorage(), "abc")
        storage.set(VEHICLE_SELECTION_KEY, {"year": "2020"})
        storage.set(WIZARD_STEP_KEY, 4)
        assert VehicleFinderWizard.restore(storage).step == WizardStep.MAKE

    def test_clients_are_isolated(self):
        shared = ClientStorage()
        _filled(ClientScope(shared, "a"))
        other = VehicleFinderWizard.restore(ClientScope(shared, "b"))
        assert other.draft == VehicleSelection()

    def test_reset_clears_storage(self):
        storage = ClientScope(ClientStorage(), "abc")
        wizard = _filled(storage)
        wizard.reset()
        assert storage.get(VEHICLE_SELECTION_KEY) is None
        assert storage.get(WIZARD_STEP_KEY) is None
        assert wizard.step == WizardStep.YEAR
