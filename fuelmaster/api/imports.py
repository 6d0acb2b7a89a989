"""Routes Import CSV/Excel / Import API routes."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile
from sqlalchemy import delete as sa_delete
from sqlalchemy.ext.asyncio import AsyncSession

from fuelmaster.config import settings
from fuelmaster.database import get_db
from fuelmaster.models.fuel_entry import FuelEntry
from fuelmaster.rate_limit import limiter
from fuelmaster.schemas.fuel import ImportResult
from fuelmaster.services.import_service import ImportFormatError, ImportService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/fuel", response_model=ImportResult)
@limiter.limit(settings.RATE_LIMIT_IMPORT)
async def import_fuel(
    request: Request,
    file: UploadFile = File(...),
    replace: bool = Query(False, description="Remplacer l'historique existant / Replace existing history"),
    db: AsyncSession = Depends(get_db),
):
    """
    Importer le tableur de suivi carburant (CSV ou Excel).
    Import the fuel-log spreadsheet (CSV or Excel).
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")

    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")
    if len(content) > settings.MAX_IMPORT_BYTES:
        raise HTTPException(status_code=413, detail="File too large")

    try:
        parsed = ImportService.parse_upload(file.filename, content)
    except ImportFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not parsed.records:
        raise HTTPException(status_code=400, detail="No valid rows found in file")

    replaced = 0
    if replace:
        result = await db.execute(sa_delete(FuelEntry))
        replaced = result.rowcount or 0

    created_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
    for record in parsed.records:
        db.add(FuelEntry(
            date=record.date.isoformat(),
            odometer_start=record.odometer_start,
            odometer_end=record.odometer_end,
            liters=record.liters,
            price_per_liter=record.price_per_liter,
            cost=record.cost,
            distance=record.distance,
            reserve_km=record.reserve_km,
            created_at=created_at,
        ))
    await db.flush()

    logger.info(
        "Imported %d fuel entries from %s (%d skipped, %d replaced)",
        len(parsed.records), file.filename, parsed.skipped, replaced,
    )
    return ImportResult(imported=len(parsed.records), skipped=parsed.skipped, replaced=replaced)
