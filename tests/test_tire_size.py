"""Tests for tire size resolution and the step option lists."""

import asyncio
from datetime import date

import pytest

from tests.conftest import FakeNHTSA
from tireshop.models.vehicle import VehicleSelection
from tireshop.services.selectors import (
    MAKES_UNAVAILABLE,
    MODELS_UNAVAILABLE,
    filter_options,
    make_options,
    model_options,
    trim_options,
    year_options,
)
from tireshop.services.tire_size import (
    DEFAULT_TIRE_SIZE,
    TIRE_DATA_ADVISORY,
    lookup_tire_size,
    parse_tire_size,
    resolve_tire_size,
)


def _vehicle(year, make, model, trim="Base") -> VehicleSelection:
    return VehicleSelection(year=year, make=make, model=model, trim=trim)


# ---------------------------------------------------------------------------
# Lookup table
# ---------------------------------------------------------------------------


class TestLookup:
    @pytest.mark.parametrize(
        "year,make,model,size",
        [
            ("2020", "Honda", "Civic", "215/55R16"),
            ("2016", "Honda", "Civic", "215/55R16"),
            ("2015", "Honda", "Civic", "205/55R16"),
            ("2018", "Honda", "Accord", "225/50R17"),
            ("2017", "Honda", "Accord", "225/55R17"),
            ("2019", "Toyota", "Camry", "235/45R18"),
            ("2012", "Toyota", "Camry", "215/55R17"),
            ("1995", "Toyota", "Corolla", "205/55R16"),
            ("2024", "Toyota", "Corolla Cross", "205/55R16"),
        ],
    )
    def test_table(self, year, make, model, size):
        assert lookup_tire_size(_vehicle(year, make, model)) == size

    def test_case_insensitive_substring(self):
        assert lookup_tire_size(_vehicle("2020", "HONDA", "civic type r")) == "215/55R16"

    def test_unknown_vehicle_uses_default(self):
        assert lookup_tire_size(_vehicle("2021", "Ford", "F-150")) == DEFAULT_TIRE_SIZE

    def test_parse(self):
        parts = parse_tire_size("235/45R18")
        assert (parts.width, parts.aspect_ratio, parts.construction, parts.diameter) == (
            "235",
            "45",
            "R",
            "18",
        )
        assert str(parts) == "235/45R18"

    def test_parse_malformed_falls_back(self):
        assert str(parse_tire_size("garbage")) == DEFAULT_TIRE_SIZE


# ---------------------------------------------------------------------------
# Resolution with the provider check
# ---------------------------------------------------------------------------


class TestResolve:
    def test_known_model_verified(self):
        nhtsa = FakeNHTSA(models=["Civic", "Accord"])
        result = asyncio.run(resolve_tire_size(nhtsa, _vehicle("2020", "Honda", "Civic", "EX")))
        assert result.tire_size == "215/55R16"
        assert result.front_tire_size == result.rear_tire_size == "215/55R16"
        assert result.verified is True
        assert result.advisory is None
        assert len(result.options) == 4

    def test_older_civic(self):
        nhtsa = FakeNHTSA(models=["Civic"])
        result = asyncio.run(resolve_tire_size(nhtsa, _vehicle("2015", "Honda", "Civic")))
        assert result.tire_size == "205/55R16"

    def test_unknown_vehicle_default_size(self):
        nhtsa = FakeNHTSA(models=["F-150"])
        result = asyncio.run(resolve_tire_size(nhtsa, _vehicle("2021", "Ford", "F-150")))
        assert result.tire_size == "225/65R17"
        assert result.verified is True

    def test_provider_failure_still_resolves(self):
        nhtsa = FakeNHTSA(fail=True)
        result = asyncio.run(resolve_tire_size(nhtsa, _vehicle("2020", "Honda", "Civic")))
        assert result.tire_size == "215/55R16"
        assert result.verified is False
        assert result.advisory == TIRE_DATA_ADVISORY

    def test_model_missing_at_provider(self):
        nhtsa = FakeNHTSA(models=["Accord"])
        result = asyncio.run(resolve_tire_size(nhtsa, _vehicle("2020", "Honda", "Civic")))
        assert result.tire_size == "215/55R16"
        assert result.advisory == TIRE_DATA_ADVISORY


# ---------------------------------------------------------------------------
# Option lists
# ---------------------------------------------------------------------------


class TestOptions:
    def test_years_newest_first(self):
        years = year_options(today=date(2025, 6, 1))
        assert years[0] == "2026"
        assert years[-1] == "1990"
        assert len(years) == 37

    def test_trims(self):
        assert "EX-L" in trim_options()

    def test_filter_case_insensitive(self):
        assert filter_options(["Honda", "Hyundai", "Toyota"], "hy") == ["Hyundai"]

    def test_filter_empty_search(self):
        assert filter_options(["A", "B"], "") == ["A", "B"]

    def test_makes_sorted_and_deduped(self):
        nhtsa = FakeNHTSA(makes=["TOYOTA", "HONDA", "HONDA"])
        result = asyncio.run(make_options(nhtsa, "2020"))
        assert result.options == ["HONDA", "TOYOTA"]
        assert result.error is None

    def test_makes_need_a_year(self):
        nhtsa = FakeNHTSA(makes=["HONDA"])
        assert asyncio.run(make_options(nhtsa, "")).options == []
        assert nhtsa.calls == []

    def test_make_failure_yields_empty_list_and_message(self):
        result = asyncio.run(make_options(FakeNHTSA(fail=True), "2020"))
        assert result.options == []
        assert result.error == MAKES_UNAVAILABLE

    def test_models_filtered(self):
        nhtsa = FakeNHTSA(models=["Civic", "Accord", "CR-V"])
        result = asyncio.run(model_options(nhtsa, "2020", "Honda", search="c"))
        assert result.options == ["Accord", "CR-V", "Civic"]

    def test_model_failure(self):
        result = asyncio.run(model_options(FakeNHTSA(fail=True), "2020", "Honda"))
        assert result.error == MODELS_UNAVAILABLE
