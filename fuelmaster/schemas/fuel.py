"""Schémas carburant / Fuel schemas.

FuelRecord est le type d'entrée du moteur de métriques : il refuse NaN,
infinis et valeurs négatives dès la construction.
FuelRecord is the metrics engine input type: NaN, infinities and negative
values are rejected at construction time.
"""

import datetime as dt
import math

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fuelmaster.utils.dates import parse_date, to_iso


def _as_float(value) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


class FuelRecord(BaseModel):
    """Repostaje validé / Validated refill record.

    cost absent -> liters * price_per_liter.
    price_per_liter absent ou nul -> cost / liters (si liters > 0).
    """
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: int | str | None = None
    date: dt.date
    odometer_start: float = Field(ge=0)
    odometer_end: float = Field(ge=0)
    liters: float = Field(ge=0)
    price_per_liter: float = Field(default=0.0, ge=0)
    cost: float = Field(default=0.0, ge=0)
    distance: float | None = Field(default=None, ge=0)
    reserve_km: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_cost_and_price(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        liters = _as_float(data.get("liters"))
        price = _as_float(data.get("price_per_liter"))
        cost = _as_float(data.get("cost"))

        if data.get("cost") is None:
            if liters is not None and price is not None:
                data["cost"] = liters * price
            else:
                data.pop("cost", None)
        if not price and cost is not None and liters:
            data["price_per_liter"] = cost / liters
        elif data.get("price_per_liter") is None:
            data.pop("price_per_liter", None)
        return data

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        parsed = parse_date(value)
        if parsed is None:
            raise ValueError(f"Invalid date: {value!r}")
        return parsed


class DerivedRecord(FuelRecord):
    """Repostaje enrichi des métriques calculées / Refill record with computed metrics."""

    distance: float = 0.0
    consumption_per_100: float = 0.0
    efficiency_per_liter: float = 0.0
    cumulative_cost: float = 0.0
    cumulative_liters: float = 0.0
    cumulative_distance: float = 0.0
    # Ecart entre km initial saisi et km final precedent /
    # Gap between the stored start reading and the previous end reading
    distance_discrepancy: float = 0.0


class SummaryStats(BaseModel):
    """Statistiques globales / Aggregate statistics."""
    model_config = ConfigDict(frozen=True)

    total_distance: float = 0.0
    total_fuel: float = 0.0
    total_cost: float = 0.0
    avg_consumption: float = 0.0
    avg_efficiency: float = 0.0
    avg_price_per_liter: float = 0.0
    avg_cost_per_100: float = 0.0
    last_odometer: float = 0.0
    entry_count: int = 0


# --- API ---

class FuelEntryBase(BaseModel):
    date: str
    odometer_end: float = Field(ge=0, allow_inf_nan=False)
    liters: float = Field(ge=0, allow_inf_nan=False)
    price_per_liter: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    odometer_start: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    cost: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    distance: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    reserve_km: str | None = None
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value):
        iso = to_iso(value)
        if iso is None:
            raise ValueError(f"Invalid date: {value!r}")
        return iso


class FuelEntryCreate(FuelEntryBase):
    pass


class FuelEntryUpdate(BaseModel):
    date: str | None = None
    odometer_start: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    odometer_end: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    liters: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    price_per_liter: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    cost: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    distance: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    reserve_km: str | None = None
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value):
        if value is None:
            return None
        iso = to_iso(value)
        if iso is None:
            raise ValueError(f"Invalid date: {value!r}")
        return iso


class FuelEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: str
    odometer_start: float
    odometer_end: float
    liters: float
    price_per_liter: float
    cost: float
    distance: float | None = None
    reserve_km: str | None = None
    notes: str | None = None
    created_at: str | None = None


class ImportResult(BaseModel):
    """Résultat d'import / Import outcome."""
    imported: int
    skipped: int
    replaced: int = 0
