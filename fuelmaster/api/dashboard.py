"""Routes tableau de bord / Dashboard routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fuelmaster.api.fuel import load_derived
from fuelmaster.api.vehicle import get_profile
from fuelmaster.database import get_db
from fuelmaster.schemas.dashboard import DashboardResponse
from fuelmaster.services.inspection_service import InspectionService
from fuelmaster.services.metrics_service import MetricsService
from fuelmaster.services.reminder_service import ReminderService

router = APIRouter()


@router.get("/", response_model=DashboardResponse)
async def dashboard(
    as_of: str | None = Query(None, description="Date de référence (YYYY-MM-DD), aujourd'hui par défaut"),
    db: AsyncSession = Depends(get_db),
):
    """Statistiques, prochaine ITV et prochaine révision / Stats, next inspection and next service."""
    stats = MetricsService.summarize(await load_derived(db))
    profile = await get_profile(db)
    return DashboardResponse(
        stats=stats,
        inspection=InspectionService.forecast(profile, as_of),
        service=ReminderService.service_reminder(profile, stats.last_odometer, as_of),
    )
