"""Human-readable quote reference numbers: ``PREFIX-YYYYMMDD-RRRR``."""

import random
import re
from datetime import datetime, timezone
from typing import Optional

REFERENCE_PATTERN = re.compile(r"^[A-Z]+-\d{8}-\d{4}$")

_rng = random.SystemRandom()


def generate_reference_number(
    prefix: str = "TS",
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Date segment is the current UTC date; the suffix is 1000-9999."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    suffix = (rng or _rng).randint(1000, 9999)
    return f"{prefix.upper()}-{now:%Y%m%d}-{suffix}"


def is_reference_number(value: str) -> bool:
    return bool(REFERENCE_PATTERN.match(value or ""))
