"""Routes Export CSV/Excel/PDF / Export API routes."""

import io
from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from fuelmaster.api.fuel import load_derived
from fuelmaster.api.vehicle import get_profile
from fuelmaster.database import get_db
from fuelmaster.services.export_service import ExportService
from fuelmaster.services.metrics_service import MetricsService

router = APIRouter()


@router.get("/fuel")
async def export_fuel(
    format: str = Query("csv", pattern="^(csv|xlsx|pdf)$"),
    db: AsyncSession = Depends(get_db),
):
    """Exporter l'historique des repostajes / Export the refill history to CSV, XLSX or PDF."""
    entries = await load_derived(db)
    stamp = date.today().isoformat()

    if format == "csv":
        content = ExportService.to_csv(entries)
        media_type = "text/csv; charset=utf-8"
        filename = f"historial_combustible_{stamp}.csv"
    elif format == "xlsx":
        content = ExportService.to_xlsx(entries, MetricsService.summarize(entries))
        media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        filename = f"historial_combustible_{stamp}.xlsx"
    else:
        profile = await get_profile(db)
        content = ExportService.to_pdf(
            entries,
            MetricsService.summarize(entries),
            vehicle_name=profile.name if profile else None,
            tank_capacity_liters=profile.tank_capacity_liters if profile else None,
        )
        media_type = "application/pdf"
        filename = f"informe_consumo_{stamp}.pdf"

    return StreamingResponse(
        io.BytesIO(content),
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
