"""
Service des comptes à rebours / Countdown service.
Jours restants avant une échéance, rappel de révision et niveau d'alerte.
"""

from datetime import date

from fuelmaster.config import settings
from fuelmaster.schemas.dashboard import AlertLevel, ServiceReminder
from fuelmaster.utils.dates import parse_date


class ReminderService:
    """Comptes à rebours du tableau de bord / Dashboard countdowns."""

    @staticmethod
    def days_remaining(target, today=None) -> int | None:
        """Jours calendaires jusqu'à target / Calendar days until target (negative if past)."""
        target_date = parse_date(target)
        if target_date is None:
            return None
        reference = parse_date(today) or date.today()
        return (target_date - reference).days

    @staticmethod
    def alert_level(days: int | None) -> AlertLevel:
        """Niveau d'alerte / Alert level: < 7 jours critique, < 30 jours attention."""
        if days is None:
            return AlertLevel.UNKNOWN
        if days < settings.ALERT_CRITICAL_DAYS:
            return AlertLevel.CRITICAL
        if days < settings.ALERT_WARNING_DAYS:
            return AlertLevel.WARNING
        return AlertLevel.OK

    @staticmethod
    def service_reminder(profile, last_odometer: float, today=None) -> ServiceReminder:
        """Rappel de révision / Next service reminder.

        Échue dès que le kilométrage ou la date est atteint.
        Due as soon as either the mileage or the date is reached.
        """
        if profile is None:
            return ServiceReminder()

        next_km = getattr(profile, "next_service_km", None)
        next_date = parse_date(getattr(profile, "next_service_date", None))
        if next_km is None and next_date is None:
            return ServiceReminder()

        km_remaining = max(0.0, next_km - last_odometer) if next_km is not None else None
        days = ReminderService.days_remaining(next_date, today) if next_date else None

        return ServiceReminder(
            is_configured=True,
            next_service_km=next_km,
            km_remaining=km_remaining,
            next_service_date=next_date,
            days_remaining=days,
            alert_level=ReminderService.alert_level(days),
            is_due=(km_remaining is not None and km_remaining <= 0) or (days is not None and days <= 0),
        )
