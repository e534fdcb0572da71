"""Tire size lookup and the curated offers shown on the results page.

NHTSA has no tire-size data, so sizes come from a small hard-coded table keyed
on make/model substrings and model-year thresholds. The NHTSA call made by
``resolve_tire_size`` only confirms the model exists for that year; it never
changes the size and its failure never blocks resolution.
"""

from typing import Optional

from tireshop.core.errors import ProviderError
from tireshop.core.logging import get_logger
from tireshop.models.vehicle import TireOption, TireResult, TireSize, VehicleSelection
from tireshop.services.nhtsa import NHTSAClient
from tireshop.services.validation import TIRE_SIZE_PATTERN

logger = get_logger(__name__)

DEFAULT_TIRE_SIZE = "225/65R17"

TIRE_DATA_ADVISORY = (
    "Using estimated tire size. Please verify with your vehicle manual."
)

# (make substring, model substring, year threshold, size at/after, size before)
# A threshold of None means the size applies to every year.
TIRE_SIZE_RULES: list[tuple[str, str, Optional[int], str, str]] = [
    ("honda", "civic", 2016, "215/55R16", "205/55R16"),
    ("honda", "accord", 2018, "225/50R17", "225/55R17"),
    ("toyota", "camry", 2018, "235/45R18", "215/55R17"),
    ("toyota", "corolla", None, "205/55R16", "205/55R16"),
]

TIRE_OPTIONS: list[TireOption] = [
    TireOption(
        id=1,
        brand="Michelin",
        model="Defender T+H",
        season="All-Season",
        price="$189",
        rating=4.8,
        in_stock=True,
        category="Premium",
    ),
    TireOption(
        id=2,
        brand="Goodyear",
        model="Assurance WeatherReady",
        season="All-Season",
        price="$159",
        rating=4.6,
        in_stock=True,
        category="Mid-Range",
    ),
    TireOption(
        id=3,
        brand="Continental",
        model="TrueContact Plus",
        season="All-Season",
        price="$175",
        rating=4.7,
        in_stock=True,
        category="Premium",
    ),
    TireOption(
        id=4,
        brand="Firestone",
        model="Destination LE3",
        season="All-Season",
        price="$135",
        rating=4.4,
        in_stock=True,
        category="Budget",
    ),
]


def lookup_tire_size(vehicle: VehicleSelection) -> str:
    """Return the stock tire size for a vehicle, or the default size."""
    make = vehicle.make.lower()
    model = vehicle.model.lower()
    year = vehicle.year_int

    for make_key, model_key, threshold, newer, older in TIRE_SIZE_RULES:
        if make_key in make and model_key in model:
            if threshold is None:
                return newer
            # An unparseable year counts as older than every threshold.
            return newer if year is not None and year >= threshold else older

    return DEFAULT_TIRE_SIZE


def parse_tire_size(size: str) -> TireSize:
    """Split ``225/65R17`` into its parts; malformed input yields the default."""
    match = TIRE_SIZE_PATTERN.search(size or "")
    if not match:
        match = TIRE_SIZE_PATTERN.search(DEFAULT_TIRE_SIZE)
    width, aspect_ratio, construction, diameter = match.groups()
    return TireSize(
        width=width,
        aspect_ratio=aspect_ratio,
        construction=construction,
        diameter=diameter,
    )


async def model_exists(nhtsa: NHTSAClient, vehicle: VehicleSelection) -> bool:
    results = await nhtsa.get_models_for_make_year(vehicle.make, vehicle.year)
    return any(r.get("Model_Name") == vehicle.model for r in results)


async def resolve_tire_size(nhtsa: NHTSAClient, vehicle: VehicleSelection) -> TireResult:
    """Build the tire results for a vehicle.

    The existence check is advisory: provider errors and unknown models are
    logged and reported through ``advisory``, and the size is the table
    value either way.
    """
    verified = False
    advisory = None
    try:
        verified = await model_exists(nhtsa, vehicle)
        if not verified:
            logger.info(f"Model not found at NHTSA: {vehicle.display_name}")
    except ProviderError as e:
        logger.warning(f"Tire data check failed for {vehicle.display_name}: {e}")

    if not verified:
        advisory = TIRE_DATA_ADVISORY

    size = lookup_tire_size(vehicle)
    return TireResult(
        vehicle=vehicle,
        tire_size=size,
        # Front and rear sizes match for every vehicle in the table.
        front_tire_size=size,
        rear_tire_size=size,
        size_parts=parse_tire_size(size),
        verified=verified,
        advisory=advisory,
        options=TIRE_OPTIONS,
    )
