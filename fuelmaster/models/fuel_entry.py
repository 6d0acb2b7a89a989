"""Modele suivi carburant / Fuel tracking model."""

from sqlalchemy import Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fuelmaster.database import Base


class FuelEntry(Base):
    """Repostaje enregistre / Stored refill entry."""
    __tablename__ = "fuel_entries"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    odometer_start: Mapped[float] = mapped_column(Float, nullable=False)
    odometer_end: Mapped[float] = mapped_column(Float, nullable=False)
    liters: Mapped[float] = mapped_column(Float, nullable=False)
    price_per_liter: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    # Distance saisie ou importee, recalculee si absente / Entered or imported, derived when missing
    distance: Mapped[float | None] = mapped_column(Float)
    reserve_km: Mapped[str | None] = mapped_column(String(20))
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[str | None] = mapped_column(String(32))  # ISO 8601

    def to_record_data(self) -> dict:
        """Champs attendus par FuelRecord / Fields expected by FuelRecord."""
        return {
            "id": self.id,
            "date": self.date,
            "odometer_start": self.odometer_start,
            "odometer_end": self.odometer_end,
            "liters": self.liters,
            "price_per_liter": self.price_per_liter,
            "cost": self.cost,
            "distance": self.distance,
            "reserve_km": self.reserve_km,
        }

    def __repr__(self) -> str:
        return f"<FuelEntry {self.date} - {self.liters}L - {self.odometer_end} km>"
