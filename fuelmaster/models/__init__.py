"""
Modèles SQLAlchemy / SQLAlchemy models.
Importer tous les modèles ici pour qu'ils soient enregistrés sur Base.metadata.
Import all models here so they are registered on Base.metadata.
"""

from fuelmaster.models.fuel_entry import FuelEntry
from fuelmaster.models.vehicle_profile import VehicleCategory, VehicleProfile

__all__ = [
    "FuelEntry",
    "VehicleCategory",
    "VehicleProfile",
]
