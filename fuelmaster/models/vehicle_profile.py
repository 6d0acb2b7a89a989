"""Modele profil vehicule / Vehicle profile model.

Un seul vehicule suivi par installation (mode local).
A single tracked vehicle per installation (local mode).
"""

import enum

from sqlalchemy import Enum, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from fuelmaster.database import Base


class VehicleCategory(str, enum.Enum):
    """Categorie ITV du vehicule / Vehicle inspection category.

    Valeurs envoyees par le formulaire de configuration.
    Values sent by the settings form.
    """
    LIGHT_PASSENGER = "turismo"
    MOTORCYCLE = "motocicleta"
    MOPED = "ciclomotor"
    LIGHT_VAN = "furgoneta"
    HEAVY_GOODS = "pesado"
    BUS = "autobus"
    CARAVAN = "caravana"
    HISTORIC = "historico"

    @classmethod
    def parse(cls, value) -> "VehicleCategory":
        """Categorie connue ou turismo par defaut / Known category or light passenger default."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.LIGHT_PASSENGER


class VehicleProfile(Base):
    """Profil du vehicule suivi / Tracked vehicle profile."""
    __tablename__ = "vehicle_profiles"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str | None] = mapped_column(String(100))
    category: Mapped[VehicleCategory] = mapped_column(
        Enum(VehicleCategory), nullable=False, default=VehicleCategory.LIGHT_PASSENGER
    )
    tank_capacity_liters: Mapped[float | None] = mapped_column(Float)

    # --- Dates cles / Key dates ---
    registration_date: Mapped[str] = mapped_column(String(10), nullable=False)  # YYYY-MM-DD
    last_inspection_date: Mapped[str | None] = mapped_column(String(10))

    # --- Prochaine revision / Next service ---
    next_service_km: Mapped[int | None] = mapped_column(Integer)
    next_service_date: Mapped[str | None] = mapped_column(String(10))

    updated_at: Mapped[str | None] = mapped_column(String(32))  # ISO 8601

    def __repr__(self) -> str:
        return f"<VehicleProfile {self.name or self.id} - {self.category.value}>"
