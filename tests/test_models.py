"""Tests des modèles / Model tests."""

import pytest
from sqlalchemy import inspect

from fuelmaster.database import engine, init_db
from fuelmaster.models.fuel_entry import FuelEntry
from fuelmaster.models.vehicle_profile import VehicleCategory, VehicleProfile


def test_fuel_entry_repr():
    e = FuelEntry(id=1, date="2024-01-01", odometer_start=1000, odometer_end=1500, liters=30)
    assert "2024-01-01" in repr(e)
    assert "1500" in repr(e)


def test_fuel_entry_record_data():
    e = FuelEntry(
        id=3, date="2024-01-01", odometer_start=1000, odometer_end=1500,
        liters=30, price_per_liter=1.5, cost=45, distance=None, reserve_km="50",
    )
    data = e.to_record_data()
    assert data["id"] == 3
    assert data["cost"] == 45
    assert data["reserve_km"] == "50"
    assert "notes" not in data


def test_vehicle_profile_repr():
    p = VehicleProfile(id=1, name="Ibiza", category=VehicleCategory.LIGHT_PASSENGER, registration_date="2020-01-22")
    assert "Ibiza" in repr(p)
    assert "turismo" in repr(p)


def test_category_values():
    assert VehicleCategory.LIGHT_PASSENGER.value == "turismo"
    assert VehicleCategory.LIGHT_VAN.value == "furgoneta"
    assert VehicleCategory.HISTORIC.value == "historico"


def test_category_parse():
    assert VehicleCategory.parse("Furgoneta ") == VehicleCategory.LIGHT_VAN
    assert VehicleCategory.parse(VehicleCategory.BUS) == VehicleCategory.BUS
    assert VehicleCategory.parse("nave espacial") == VehicleCategory.LIGHT_PASSENGER
    assert VehicleCategory.parse(None) == VehicleCategory.LIGHT_PASSENGER


@pytest.mark.asyncio
async def test_init_db_creates_tables():
    await init_db()
    async with engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    assert {"fuel_entries", "vehicle_profiles"} <= set(tables)
