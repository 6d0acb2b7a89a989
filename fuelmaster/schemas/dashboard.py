"""Schémas tableau de bord / Dashboard schemas."""

import datetime as dt
import enum

from pydantic import BaseModel

from fuelmaster.schemas.fuel import SummaryStats


class InspectionState(str, enum.Enum):
    """Etat du cycle ITV / Inspection cycle state."""
    AWAITING_FIRST_INSPECTION = "AWAITING_FIRST_INSPECTION"
    IN_EARLY_INTERVAL = "IN_EARLY_INTERVAL"
    IN_LATE_INTERVAL = "IN_LATE_INTERVAL"
    EXEMPT = "EXEMPT"


class AlertLevel(str, enum.Enum):
    """Niveau d'alerte d'un compte a rebours / Countdown alert level."""
    CRITICAL = "critical"
    WARNING = "warning"
    OK = "ok"
    UNKNOWN = "unknown"


class InspectionForecast(BaseModel):
    """Prochaine ITV / Next inspection forecast."""
    is_configured: bool = False
    next_date: dt.date | None = None
    state: InspectionState | None = None
    days_remaining: int | None = None
    alert_level: AlertLevel = AlertLevel.UNKNOWN
    is_exempt: bool = False
    is_overdue: bool = False


class ServiceReminder(BaseModel):
    """Prochaine revision / Next service reminder."""
    is_configured: bool = False
    next_service_km: int | None = None
    km_remaining: float | None = None
    next_service_date: dt.date | None = None
    days_remaining: int | None = None
    alert_level: AlertLevel = AlertLevel.UNKNOWN
    is_due: bool = False


class DashboardResponse(BaseModel):
    """Donnees du tableau de bord / Dashboard payload."""
    stats: SummaryStats
    inspection: InspectionForecast
    service: ServiceReminder
