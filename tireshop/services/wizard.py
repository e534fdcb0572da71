"""Vehicle finder: a four-step linear state machine over one draft record.

Steps run Year → Make → Model → Trim. A step can only be left forwards once
its field is filled in; going back is always allowed. Every field update is
mirrored into client storage so a reload does not lose progress.
"""

from enum import IntEnum
from typing import Optional

from pydantic import BaseModel

from tireshop.core.errors import WizardError
from tireshop.models.vehicle import VehicleSelection
from tireshop.services.client_storage import (
    VEHICLE_SELECTION_KEY,
    WIZARD_STEP_KEY,
    ClientScope,
)


class WizardStep(IntEnum):
    YEAR = 1
    MAKE = 2
    MODEL = 3
    TRIM = 4

    @property
    def label(self) -> str:
        return self.name.title()

    @property
    def field(self) -> str:
        return STEP_FIELDS[self]


STEP_FIELDS: dict[WizardStep, str] = {
    WizardStep.YEAR: "year",
    WizardStep.MAKE: "make",
    WizardStep.MODEL: "model",
    WizardStep.TRIM: "trim",
}

# Fields whose option lists depend on an upstream choice.
DEPENDENT_FIELDS: dict[str, tuple[str, ...]] = {
    "year": ("make", "model"),
    "make": ("model",),
    "model": (),
    "trim": (),
}


def can_advance(step: WizardStep, draft: VehicleSelection) -> bool:
    return getattr(draft, step.field) != ""


class StepProgress(BaseModel):
    number: int
    label: str
    completed: bool


class WizardState(BaseModel):
    step: int
    vehicle: VehicleSelection
    can_proceed: bool
    steps: list[StepProgress]


class VehicleFinderWizard:
    def __init__(
        self,
        storage: Optional[ClientScope] = None,
        draft: Optional[VehicleSelection] = None,
        step: WizardStep = WizardStep.YEAR,
    ) -> None:
        self.storage = storage
        self.draft = draft or VehicleSelection()
        self.step = step

    @classmethod
    def restore(cls, storage: ClientScope) -> "VehicleFinderWizard":
        """Resume from the stored draft.

        The stored step is kept when it is reachable with the stored draft;
        otherwise the wizard lands on the first unfinished step.
        """
        stored = storage.get(VEHICLE_SELECTION_KEY)
        draft = VehicleSelection.model_validate(stored) if isinstance(stored, dict) else None
        wizard = cls(storage=storage, draft=draft)

        reachable = wizard.first_incomplete_step()
        stored_step = storage.get(WIZARD_STEP_KEY)
        if isinstance(stored_step, int) and WizardStep.YEAR <= stored_step <= reachable:
            wizard.step = WizardStep(stored_step)
        else:
            wizard.step = reachable
        return wizard

    def _save_step(self) -> None:
        if self.storage is not None:
            self.storage.set(WIZARD_STEP_KEY, self.step.value)

    def reset(self) -> None:
        """Forget the draft once it has been turned into a quote or booking."""
        self.draft = VehicleSelection()
        self.step = WizardStep.YEAR
        if self.storage is not None:
            self.storage.remove(VEHICLE_SELECTION_KEY)
            self.storage.remove(WIZARD_STEP_KEY)

    def first_incomplete_step(self) -> WizardStep:
        for step in WizardStep:
            if not can_advance(step, self.draft):
                return step
        return WizardStep.TRIM

    def update(self, field: str, value: str) -> VehicleSelection:
        """Set one field, clear stale downstream fields, and persist the draft."""
        if field not in DEPENDENT_FIELDS:
            raise WizardError(f"Unknown vehicle field: {field}")

        value = (value or "").strip()
        changes = {field: value}
        if getattr(self.draft, field) != value:
            changes.update({dep: "" for dep in DEPENDENT_FIELDS[field]})
        self.draft = self.draft.model_copy(update=changes)

        if self.storage is not None:
            self.storage.set(VEHICLE_SELECTION_KEY, self.draft.model_dump())
        if self.step > self.first_incomplete_step():
            self.step = self.first_incomplete_step()
        self._save_step()
        return self.draft

    def can_proceed(self) -> bool:
        return can_advance(self.step, self.draft)

    def next(self) -> Optional[VehicleSelection]:
        """Advance one step.

        Returns the completed selection when leaving the last step (the
        hand-off to tire results), otherwise None.
        """
        if not self.can_proceed():
            raise WizardError(f"Select a {self.step.field} to continue")
        if self.step < WizardStep.TRIM:
            self.step = WizardStep(self.step + 1)
            self._save_step()
            return None
        return self.draft

    def back(self) -> None:
        if self.step > WizardStep.YEAR:
            self.step = WizardStep(self.step - 1)
            self._save_step()

    def progress(self) -> list[StepProgress]:
        return [
            StepProgress(number=s.value, label=s.label, completed=can_advance(s, self.draft))
            for s in WizardStep
        ]

    def state(self) -> WizardState:
        return WizardState(
            step=self.step.value,
            vehicle=self.draft,
            can_proceed=self.can_proceed(),
            steps=self.progress(),
        )
