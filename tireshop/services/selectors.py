"""Option sets for the four vehicle finder steps.

Years and trims are enumerated locally. Makes and models come from NHTSA;
a failed lookup yields an empty list plus an advisory message so the step
shows nothing to pick and the wizard cannot advance.
"""

from datetime import date
from typing import Optional

from tireshop.core.enums import COMMON_TRIMS, EARLIEST_MODEL_YEAR
from tireshop.core.errors import ProviderError
from tireshop.core.logging import log_error
from tireshop.models.vehicle import OptionList
from tireshop.services.nhtsa import NHTSAClient

MAKES_UNAVAILABLE = "Failed to fetch vehicle makes. Please try again."
MODELS_UNAVAILABLE = "Failed to fetch vehicle models. Please try again."


def filter_options(options: list[str], search: Optional[str]) -> list[str]:
    """Case-insensitive substring filter; an empty search keeps everything."""
    if not search:
        return options
    needle = search.lower()
    return [o for o in options if needle in o.lower()]


def year_options(today: Optional[date] = None) -> list[str]:
    """Next model year down to 1990, newest first."""
    current = (today or date.today()).year
    return [str(y) for y in range(current + 1, EARLIEST_MODEL_YEAR - 1, -1)]


def trim_options() -> list[str]:
    return list(COMMON_TRIMS)


async def make_options(
    nhtsa: NHTSAClient, year: str, search: Optional[str] = None
) -> OptionList:
    if not year:
        return OptionList()
    try:
        results = await nhtsa.get_makes_for_year(year)
    except ProviderError as e:
        log_error("Make lookup failed", e, year=year)
        return OptionList(error=MAKES_UNAVAILABLE)

    makes = sorted({str(r["MakeName"]).strip() for r in results if r.get("MakeName")})
    return OptionList(options=filter_options(makes, search))


async def model_options(
    nhtsa: NHTSAClient, year: str, make: str, search: Optional[str] = None
) -> OptionList:
    if not (year and make):
        return OptionList()
    try:
        results = await nhtsa.get_models_for_make_year(make, year)
    except ProviderError as e:
        log_error("Model lookup failed", e, year=year, make=make)
        return OptionList(error=MODELS_UNAVAILABLE)

    models = sorted({str(r["Model_Name"]).strip() for r in results if r.get("Model_Name")})
    return OptionList(options=filter_options(models, search))
