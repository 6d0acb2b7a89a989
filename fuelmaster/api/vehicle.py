"""Routes profil véhicule / Vehicle profile routes."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fuelmaster.database import get_db
from fuelmaster.models.vehicle_profile import VehicleProfile
from fuelmaster.schemas.dashboard import InspectionForecast
from fuelmaster.schemas.vehicle import VehicleProfileRead, VehicleProfileUpdate
from fuelmaster.services.inspection_service import InspectionService

router = APIRouter()


async def get_profile(db: AsyncSession) -> VehicleProfile | None:
    """Profil unique du véhicule suivi / Single tracked vehicle profile."""
    result = await db.execute(select(VehicleProfile).order_by(VehicleProfile.id).limit(1))
    return result.scalar_one_or_none()


@router.get("/", response_model=VehicleProfileRead)
async def read_vehicle(db: AsyncSession = Depends(get_db)):
    """Voir le profil véhicule / Get the vehicle profile."""
    profile = await get_profile(db)
    if not profile:
        raise HTTPException(status_code=404, detail="Vehicle profile not configured")
    return profile


@router.put("/", response_model=VehicleProfileRead)
async def save_vehicle(data: VehicleProfileUpdate, db: AsyncSession = Depends(get_db)):
    """Créer ou remplacer le profil véhicule / Create or replace the vehicle profile."""
    profile = await get_profile(db)
    if profile is None:
        profile = VehicleProfile()
        db.add(profile)

    for key, value in data.model_dump().items():
        setattr(profile, key, value)
    profile.updated_at = datetime.now(timezone.utc).isoformat(timespec="seconds")

    await db.flush()
    await db.refresh(profile)
    return profile


@router.get("/inspection", response_model=InspectionForecast)
async def vehicle_inspection(
    as_of: str | None = Query(None, description="Date de référence (YYYY-MM-DD), aujourd'hui par défaut"),
    db: AsyncSession = Depends(get_db),
):
    """Prochaine ITV du véhicule / Next vehicle inspection."""
    return InspectionService.forecast(await get_profile(db), as_of)
