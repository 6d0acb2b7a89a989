"""Routes repostajes / Fuel entry routes."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fuelmaster.database import get_db
from fuelmaster.models.fuel_entry import FuelEntry
from fuelmaster.schemas.fuel import (
    DerivedRecord,
    FuelEntryCreate,
    FuelEntryRead,
    FuelEntryUpdate,
    FuelRecord,
    SummaryStats,
)
from fuelmaster.services.metrics_service import MetricsService

router = APIRouter()


async def load_entries(db: AsyncSession) -> list[FuelEntry]:
    """Repostajes par ordre chronologique / Entries in chronological order."""
    result = await db.execute(select(FuelEntry).order_by(FuelEntry.date, FuelEntry.odometer_end))
    return list(result.scalars().all())


async def load_derived(db: AsyncSession) -> list[DerivedRecord]:
    """Repostajes enrichis des métriques / Entries with derived metrics."""
    entries = await load_entries(db)
    return MetricsService.derive_records(e.to_record_data() for e in entries)


def _validated(data: dict) -> FuelRecord:
    try:
        return FuelRecord(**data)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))


@router.get("/", response_model=list[FuelEntryRead])
async def list_fuel(db: AsyncSession = Depends(get_db)):
    """Lister les repostajes / List refill entries."""
    return await load_entries(db)


@router.get("/derived", response_model=list[DerivedRecord])
async def list_derived(db: AsyncSession = Depends(get_db)):
    """Repostajes avec consommation et cumuls / Entries with consumption and running totals."""
    return await load_derived(db)


@router.get("/summary", response_model=SummaryStats)
async def fuel_summary(db: AsyncSession = Depends(get_db)):
    """Statistiques globales / Aggregate statistics."""
    return MetricsService.summarize(await load_derived(db))


@router.get("/{entry_id}", response_model=FuelEntryRead)
async def get_fuel(entry_id: int, db: AsyncSession = Depends(get_db)):
    """Voir un repostaje / Get a refill entry."""
    entry = await db.get(FuelEntry, entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Fuel entry not found")
    return entry


@router.post("/", response_model=FuelEntryRead, status_code=201)
async def create_fuel(data: FuelEntryCreate, db: AsyncSession = Depends(get_db)):
    """Saisie manuelle d'un repostaje / Manual refill entry.

    Sans km initial, on reprend le km final du repostaje précédent.
    Without a start reading, the previous entry's end reading is used.
    """
    dump = data.model_dump()
    if dump["odometer_start"] is None:
        result = await db.execute(
            select(FuelEntry.odometer_end)
            .where(FuelEntry.odometer_end <= dump["odometer_end"])
            .order_by(FuelEntry.odometer_end.desc())
            .limit(1)
        )
        previous_end = result.scalar_one_or_none()
        dump["odometer_start"] = previous_end if previous_end is not None else dump["odometer_end"]

    record = _validated(dump)
    entry = FuelEntry(
        date=record.date.isoformat(),
        odometer_start=record.odometer_start,
        odometer_end=record.odometer_end,
        liters=record.liters,
        price_per_liter=record.price_per_liter,
        cost=record.cost,
        distance=record.distance,
        reserve_km=record.reserve_km,
        notes=dump.get("notes"),
        created_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
    )
    db.add(entry)
    await db.flush()
    await db.refresh(entry)
    return entry


@router.put("/{entry_id}", response_model=FuelEntryRead)
async def update_fuel(entry_id: int, data: FuelEntryUpdate, db: AsyncSession = Depends(get_db)):
    """Modifier un repostaje / Update a refill entry."""
    entry = await db.get(FuelEntry, entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Fuel entry not found")

    updates = data.model_dump(exclude_unset=True)
    # Litres ou prix modifiés sans coût : coût recalculé / Liters or price changed without cost: recompute
    if "cost" not in updates and ({"liters", "price_per_liter"} & updates.keys()):
        updates["cost"] = None
    # Cout modifie sans prix : prix recalcule / Cost changed without price: re-derive the price
    elif "cost" in updates and "price_per_liter" not in updates:
        updates["price_per_liter"] = None

    record = _validated({**entry.to_record_data(), **updates})
    for key in ("odometer_start", "odometer_end", "liters", "price_per_liter", "cost", "distance", "reserve_km"):
        setattr(entry, key, getattr(record, key))
    entry.date = record.date.isoformat()
    if "notes" in updates:
        entry.notes = updates["notes"]

    await db.flush()
    await db.refresh(entry)
    return entry


@router.delete("/{entry_id}", status_code=204)
async def delete_fuel(entry_id: int, db: AsyncSession = Depends(get_db)):
    """Supprimer un repostaje / Delete a refill entry."""
    entry = await db.get(FuelEntry, entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Fuel entry not found")
    await db.delete(entry)
