"""Public routes: vehicle finder, tire results, quote and appointment requests."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from tireshop.api.deps import (
    get_appointment_repo,
    get_client_scope,
    get_nhtsa,
    get_notifier,
    get_optional_client_scope,
    get_quote_repo,
)
from tireshop.core.enums import AVAILABLE_SERVICES, TIME_SLOTS
from tireshop.models.appointment import Appointment, AppointmentRequestForm
from tireshop.models.quote import Quote, QuoteSubmission
from tireshop.models.submission import SubmissionResult
from tireshop.models.vehicle import OptionList, TireResult, VehicleSelection
from tireshop.services import appointments as appointment_service
from tireshop.services import quotes as quote_service
from tireshop.services.client_storage import ClientScope
from tireshop.services.nhtsa import NHTSAClient
from tireshop.services.notifications import Notifier
from tireshop.services.repository import AppointmentRepository, QuoteRepository
from tireshop.services.selectors import make_options, model_options, trim_options, year_options
from tireshop.services.tire_size import resolve_tire_size
from tireshop.services.wizard import VehicleFinderWizard, WizardState

router = APIRouter()


# ---------------------------------------------------------------------------
# Request / Response Models
# ---------------------------------------------------------------------------


class FieldUpdate(BaseModel):
    field: str
    value: str


class WizardAdvance(BaseModel):
    state: WizardState
    # Set when the last step was completed: the vehicle to show results for.
    completed: Optional[VehicleSelection] = None


class ServiceOption(BaseModel):
    id: str
    label: str


class AppointmentOptions(BaseModel):
    time_slots: list[str]
    services: list[ServiceOption]


# ---------------------------------------------------------------------------
# Step options
# ---------------------------------------------------------------------------


@router.get("/vehicles/years", response_model=OptionList)
async def list_years():
    return OptionList(options=year_options())


@router.get("/vehicles/makes", response_model=OptionList)
async def list_makes(
    year: str,
    nhtsa: Annotated[NHTSAClient, Depends(get_nhtsa)],
    search: Optional[str] = None,
):
    return await make_options(nhtsa, year, search)


@router.get("/vehicles/models", response_model=OptionList)
async def list_models(
    year: str,
    make: str,
    nhtsa: Annotated[NHTSAClient, Depends(get_nhtsa)],
    search: Optional[str] = None,
):
    return await model_options(nhtsa, year, make, search)


@router.get("/vehicles/trims", response_model=OptionList)
async def list_trims():
    return OptionList(options=trim_options())


# ---------------------------------------------------------------------------
# Vehicle finder wizard
# ---------------------------------------------------------------------------


@router.get("/wizard", response_model=WizardState)
async def get_wizard(storage: Annotated[ClientScope, Depends(get_client_scope)]):
    return VehicleFinderWizard.restore(storage).state()


@router.put("/wizard", response_model=WizardState)
async def update_wizard(
    update: FieldUpdate,
    storage: Annotated[ClientScope, Depends(get_client_scope)],
):
    wizard = VehicleFinderWizard.restore(storage)
    wizard.update(update.field, update.value)
    return wizard.state()


@router.post("/wizard/next", response_model=WizardAdvance)
async def advance_wizard(storage: Annotated[ClientScope, Depends(get_client_scope)]):
    wizard = VehicleFinderWizard.restore(storage)
    completed = wizard.next()
    return WizardAdvance(state=wizard.state(), completed=completed)


@router.post("/wizard/back", response_model=WizardState)
async def rewind_wizard(storage: Annotated[ClientScope, Depends(get_client_scope)]):
    wizard = VehicleFinderWizard.restore(storage)
    wizard.back()
    return wizard.state()


@router.delete("/wizard", response_model=WizardState)
async def reset_wizard(storage: Annotated[ClientScope, Depends(get_client_scope)]):
    wizard = VehicleFinderWizard.restore(storage)
    wizard.reset()
    return wizard.state()


# ---------------------------------------------------------------------------
# Tire results
# ---------------------------------------------------------------------------


@router.post("/tires/results", response_model=TireResult)
async def tire_results(
    vehicle: VehicleSelection,
    nhtsa: Annotated[NHTSAClient, Depends(get_nhtsa)],
):
    """Tire size and curated offers for a completed vehicle selection."""
    if not vehicle.is_complete:
        raise HTTPException(
            status_code=422,
            detail="Please select a vehicle first to view tire results.",
        )
    return await resolve_tire_size(nhtsa, vehicle)


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------


@router.post("/quotes", response_model=SubmissionResult[Quote], status_code=201)
async def create_quote(
    submission: QuoteSubmission,
    repo: Annotated[QuoteRepository, Depends(get_quote_repo)],
    notifier: Annotated[Notifier, Depends(get_notifier)],
    storage: Annotated[ClientScope, Depends(get_client_scope)],
):
    return await quote_service.submit_quote(
        submission.form,
        submission.vehicle,
        submission.tire_size,
        repo,
        notifier,
        storage=storage,
    )


@router.get("/quotes/confirmation", response_model=Quote)
async def quote_confirmation(storage: Annotated[ClientScope, Depends(get_client_scope)]):
    quote = quote_service.last_quote(storage)
    if quote is None:
        raise HTTPException(status_code=404, detail="No quote found")
    return quote


# ---------------------------------------------------------------------------
# Appointments
# ---------------------------------------------------------------------------


@router.get("/appointments/options", response_model=AppointmentOptions)
async def appointment_options():
    return AppointmentOptions(
        time_slots=list(TIME_SLOTS),
        services=[ServiceOption(id=k, label=v) for k, v in AVAILABLE_SERVICES.items()],
    )


@router.post(
    "/appointments", response_model=SubmissionResult[Appointment], status_code=201
)
async def create_appointment(
    form: AppointmentRequestForm,
    repo: Annotated[AppointmentRepository, Depends(get_appointment_repo)],
    notifier: Annotated[Notifier, Depends(get_notifier)],
    storage: Annotated[Optional[ClientScope], Depends(get_optional_client_scope)],
):
    return await appointment_service.submit_appointment(form, repo, notifier, storage=storage)
