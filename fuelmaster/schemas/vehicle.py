"""Schémas profil véhicule / Vehicle profile schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fuelmaster.models.vehicle_profile import VehicleCategory
from fuelmaster.utils.dates import to_iso


class VehicleProfileBase(BaseModel):
    registration_date: str
    category: VehicleCategory = VehicleCategory.LIGHT_PASSENGER
    name: str | None = None
    tank_capacity_liters: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    last_inspection_date: str | None = None
    next_service_km: int | None = Field(default=None, ge=0)
    next_service_date: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _known_category(cls, value):
        # Categorie inconnue -> turismo / Unknown category -> light passenger
        return VehicleCategory.parse(value)

    @field_validator("registration_date", mode="before")
    @classmethod
    def _required_date(cls, value):
        iso = to_iso(value)
        if iso is None:
            raise ValueError(f"Invalid date: {value!r}")
        return iso

    @field_validator("last_inspection_date", "next_service_date", mode="before")
    @classmethod
    def _optional_date(cls, value):
        if value in (None, ""):
            return None
        iso = to_iso(value)
        if iso is None:
            raise ValueError(f"Invalid date: {value!r}")
        return iso


class VehicleProfileUpdate(VehicleProfileBase):
    pass


class VehicleProfileRead(VehicleProfileBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    updated_at: str | None = None
