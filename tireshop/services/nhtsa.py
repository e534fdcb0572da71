"""Async client for the NHTSA vPIC API.

No authentication required. All endpoints return JSON with ?format=json and
wrap their payload in ``{"Results": [...]}``; a missing ``Results`` key is
treated as an empty list.
"""

import time
from urllib.parse import quote

import httpx

from tireshop.config import get_settings
from tireshop.core.errors import ProviderError
from tireshop.core.logging import log_external_call


class NHTSAClient:
    """Async client for the NHTSA vPIC API."""

    def __init__(self, base_url: str | None = None, client: httpx.AsyncClient | None = None) -> None:
        self.base_url = base_url or get_settings().nhtsa_base_url
        self.client = client or httpx.AsyncClient(timeout=15.0)

    async def _get_results(self, operation: str, url: str) -> list[dict]:
        start = time.time()
        try:
            resp = await self.client.get(url)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            log_external_call("nhtsa", operation, False, (time.time() - start) * 1000)
            raise ProviderError(f"NHTSA {operation} failed: {e}") from e

        log_external_call("nhtsa", operation, True, (time.time() - start) * 1000)
        results = data.get("Results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            return []
        return [r for r in results if isinstance(r, dict)]

    async def get_makes_for_year(self, year: str, vehicle_type: str = "car") -> list[dict]:
        """Get makes for a vehicle type in a given model year."""
        url = (
            f"{self.base_url}/vehicles/GetMakesForVehicleType/{vehicle_type}"
            f"?year={quote(str(year))}&format=json"
        )
        return await self._get_results("get_makes_for_year", url)

    async def get_models_for_make_year(self, make: str, year: str) -> list[dict]:
        """Get models for a specific make and year."""
        url = (
            f"{self.base_url}/vehicles/GetModelsForMakeYear"
            f"/make/{quote(make)}/modelyear/{quote(str(year))}?format=json"
        )
        return await self._get_results("get_models_for_make_year", url)

    async def close(self) -> None:
        await self.client.aclose()


# Singleton
nhtsa_client = NHTSAClient()
