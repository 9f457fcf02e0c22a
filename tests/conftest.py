"""
tests/conftest.py
─────────────────
Shared pytest fixtures for the equipment health test suite.
"""
import os
from datetime import date

import pytest

os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("JSON_INDENT", "2")


@pytest.fixture
def as_of() -> date:
    return date(2024, 6, 1)


@pytest.fixture
def make_profile():
    """Build an EquipmentProfile from keyword overrides."""
    from src.data.models import EquipmentProfile

    def _make(**overrides):
        return EquipmentProfile(**overrides)

    return _make


@pytest.fixture
def gas_tank(make_profile):
    """Two-year-old builder-grade gas tank on soft-ish city water. Healthy."""
    return make_profile(
        family="WATER_HEATER",
        variant="GAS",
        age_years=2.0,
        warranty_years=6.0,
        house_psi=60.0,
        hardness_gpg=5.0,
        people_count=3,
        tank_capacity_gal=50.0,
    )


@pytest.fixture
def hybrid_tank(make_profile):
    return make_profile(
        family="WATER_HEATER",
        variant="HYBRID",
        age_years=2.0,
        warranty_years=6.0,
        house_psi=60.0,
        hardness_gpg=5.0,
        air_filter_status="CLEAN",
        room_volume_type="OPEN",
    )


@pytest.fixture
def tankless_gas(make_profile):
    """Two-year-old professional tankless with service valves. Healthy."""
    return make_profile(
        family="WATER_HEATER",
        variant="TANKLESS_GAS",
        age_years=2.0,
        warranty_years=12.0,
        house_psi=60.0,
        hardness_gpg=5.0,
        has_isolation_valves=True,
    )


@pytest.fixture
def softener(make_profile):
    """Scenario A household: 3 people, 15 GPG, 32k grains, city water."""
    return make_profile(
        family="SOFTENER",
        variant="ION_EXCHANGE",
        age_years=5.0,
        hardness_gpg=15.0,
        people_count=3,
        water_source="CITY",
        has_carbon_filter=True,
        softener_capacity_grains=32_000.0,
    )
