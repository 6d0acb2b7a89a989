"""
Service de planification ITV / Periodic inspection (ITV) scheduling service.

Projette la prochaine inspection obligatoire à partir de la date
d'immatriculation, de la catégorie et éventuellement de la dernière ITV réelle.
Projects the next mandatory inspection from the registration date, the vehicle
category and optionally the last real inspection.

Les échéances sont des décalages en mois depuis l'immatriculation. L'intervalle
suivant une échéance dépend de l'âge du véhicule à cette échéance (comparaison
stricte aux seuils). Les phases bornées sont parcourues pas à pas, la phase
finale sans borne est franchie par calcul direct.
Deadlines are month offsets from the registration date. The interval after a
deadline depends on the vehicle age at that deadline (strict comparison with
the thresholds). Bounded phases are walked step by step, the open-ended final
phase is jumped in closed form.
"""

import logging
from dataclasses import dataclass
from datetime import date

from fuelmaster.config import settings
from fuelmaster.models.vehicle_profile import VehicleCategory
from fuelmaster.schemas.dashboard import InspectionForecast, InspectionState
from fuelmaster.services.reminder_service import ReminderService
from fuelmaster.utils.dates import add_months, months_between, parse_date

logger = logging.getLogger(__name__)

# Vehicule exempte d'ITV / Vehicle exempt from inspection
EXEMPT_DATE = date(2099, 1, 1)


@dataclass(frozen=True)
class IntervalRule:
    """Intervalle applicable jusqu'a un age (exclu) / Interval applying below an age (exclusive)."""
    until_age_months: int | None  # None = sans fin / open-ended
    interval_months: int


@dataclass(frozen=True)
class InspectionSchedule:
    """Calendrier ITV d'une categorie / Inspection schedule of a category."""
    first_due_months: int
    rules: tuple[IntervalRule, ...]
    exempt_from_months: int | None = None

    def rule_index(self, age_months: int) -> int:
        for index, rule in enumerate(self.rules):
            if rule.until_age_months is None or age_months < rule.until_age_months:
                return index
        return len(self.rules) - 1

    def rule_for(self, age_months: int) -> IntervalRule:
        return self.rules[self.rule_index(age_months)]

    def is_exempt_at(self, age_months: int) -> bool:
        return self.exempt_from_months is not None and age_months >= self.exempt_from_months

    def state_at(self, age_months: int) -> InspectionState:
        if self.is_exempt_at(age_months):
            return InspectionState.EXEMPT
        if age_months < self.first_due_months:
            return InspectionState.AWAITING_FIRST_INSPECTION
        if self.rule_index(age_months) == 0:
            return InspectionState.IN_EARLY_INTERVAL
        return InspectionState.IN_LATE_INTERVAL


_LIGHT_PASSENGER = InspectionSchedule(
    first_due_months=48,
    rules=(IntervalRule(120, 24), IntervalRule(None, 12)),
)

SCHEDULES: dict[VehicleCategory, InspectionSchedule] = {
    VehicleCategory.LIGHT_PASSENGER: _LIGHT_PASSENGER,
    VehicleCategory.MOTORCYCLE: _LIGHT_PASSENGER,
    VehicleCategory.MOPED: InspectionSchedule(
        first_due_months=36,
        rules=(IntervalRule(None, 24),),
    ),
    VehicleCategory.LIGHT_VAN: InspectionSchedule(
        first_due_months=24,
        rules=(IntervalRule(72, 24), IntervalRule(120, 12), IntervalRule(None, 6)),
    ),
    VehicleCategory.HEAVY_GOODS: InspectionSchedule(
        first_due_months=12,
        rules=(IntervalRule(120, 12), IntervalRule(None, 6)),
    ),
    VehicleCategory.BUS: InspectionSchedule(
        first_due_months=12,
        rules=(IntervalRule(60, 12), IntervalRule(None, 6)),
    ),
    VehicleCategory.CARAVAN: InspectionSchedule(
        first_due_months=72,
        rules=(IntervalRule(None, 24),),
    ),
    VehicleCategory.HISTORIC: InspectionSchedule(
        first_due_months=24,
        rules=(IntervalRule(480, 24), IntervalRule(540, 36), IntervalRule(None, 48)),
        exempt_from_months=720,
    ),
}


def _reached(deadline: date, reference: date, inclusive: bool) -> bool:
    return deadline >= reference if inclusive else deadline > reference


class InspectionService:
    """Planification des ITV / Inspection scheduling."""

    @staticmethod
    def schedule_for(category) -> InspectionSchedule:
        """Calendrier de la categorie, turismo par defaut / Category schedule, light passenger by default."""
        return SCHEDULES[VehicleCategory.parse(category)]

    @staticmethod
    def first_deadline_after(
        registration: date,
        schedule: InspectionSchedule,
        reference: date,
        inclusive: bool = False,
    ) -> tuple[int, date] | None:
        """Premiere echeance apres reference / First deadline after reference.

        Retourne (age en mois, date), ou None si le vehicule est exempte a cette echeance.
        Returns (age in months, date), or None when the vehicle is exempt by then.
        """
        offset = schedule.first_due_months
        deadline = add_months(registration, offset)

        while not _reached(deadline, reference, inclusive):
            rule = schedule.rule_for(offset)
            if rule.until_age_months is not None:
                offset += rule.interval_months
                deadline = add_months(registration, offset)
                continue

            # Phase finale : saut direct / Final phase: direct jump
            base = offset
            interval = rule.interval_months
            elapsed = months_between(registration, reference)
            offset = base + max((elapsed - base) // interval + 1, 1) * interval
            while offset - interval > base and _reached(
                add_months(registration, offset - interval), reference, inclusive
            ):
                offset -= interval
            deadline = add_months(registration, offset)

        if schedule.is_exempt_at(offset):
            return None
        return offset, deadline

    @staticmethod
    def _next_from_inspection(registration: date, schedule: InspectionSchedule, inspected_on: date) -> date:
        """Echeance suivant une ITV reelle / Deadline following a real inspection.

        Regle des 30 jours : une ITV passee au plus ITV_AMNESTY_DAYS jours avant
        son echeance theorique ne decale pas le cycle.
        30-day rule: an inspection at most ITV_AMNESTY_DAYS days before its
        theoretical deadline does not shift the cycle.
        """
        theoretical = InspectionService.first_deadline_after(
            registration, schedule, inspected_on, inclusive=True
        )
        if theoretical is None:
            return EXEMPT_DATE

        offset, deadline = theoretical
        if (deadline - inspected_on).days <= settings.ITV_AMNESTY_DAYS:
            next_offset = offset + schedule.rule_for(offset).interval_months
            if schedule.is_exempt_at(next_offset):
                return EXEMPT_DATE
            return add_months(registration, next_offset)

        age = months_between(registration, inspected_on)
        if age < schedule.first_due_months:
            return add_months(registration, schedule.first_due_months)
        next_date = add_months(inspected_on, schedule.rule_for(age).interval_months)
        if schedule.is_exempt_at(months_between(registration, next_date)):
            return EXEMPT_DATE
        return next_date

    @staticmethod
    def next_inspection_date(
        registration_date,
        category,
        last_inspection_date=None,
        today=None,
    ) -> date | None:
        """Prochaine ITV obligatoire / Next mandatory inspection date.

        None si la date d'immatriculation est illisible, EXEMPT_DATE si le
        vehicule n'est plus soumis a l'ITV. Sans ITV reelle, premiere echeance
        strictement posterieure a aujourd'hui ; avec ITV reelle, echeance
        suivante (eventuellement deja depassee).
        None when the registration date is unreadable, EXEMPT_DATE when the
        vehicle no longer needs inspections. Without a real inspection, first
        deadline strictly after today; with one, the following deadline (which
        may already be past). None as well when no deadline falls within
        ITV_MAX_PROJECTION_YEARS of today.
        """
        registration = parse_date(registration_date)
        if registration is None:
            return None

        schedule = InspectionService.schedule_for(category)
        reference = parse_date(today) or date.today()

        if schedule.is_exempt_at(months_between(registration, reference)):
            return EXEMPT_DATE

        inspected_on = parse_date(last_inspection_date)
        if inspected_on is not None and inspected_on >= registration:
            next_date = InspectionService._next_from_inspection(registration, schedule, inspected_on)
        else:
            if inspected_on is not None:
                logger.warning(
                    "Ignoring last inspection %s before registration %s", inspected_on, registration
                )
            found = InspectionService.first_deadline_after(registration, schedule, reference)
            next_date = EXEMPT_DATE if found is None else found[1]

        if next_date == EXEMPT_DATE:
            return next_date
        horizon = add_months(reference, settings.ITV_MAX_PROJECTION_YEARS * 12)
        if next_date == date.max or next_date > horizon:
            logger.warning(
                "No inspection deadline within %d years of %s", settings.ITV_MAX_PROJECTION_YEARS, reference
            )
            return None
        return next_date

    @staticmethod
    def inspection_state(registration_date, category, today=None) -> InspectionState | None:
        """Etat du cycle ITV a une date / Inspection cycle state at a date."""
        registration = parse_date(registration_date)
        if registration is None:
            return None
        reference = parse_date(today) or date.today()
        schedule = InspectionService.schedule_for(category)
        return schedule.state_at(max(months_between(registration, reference), 0))

    @staticmethod
    def forecast(profile, today=None) -> InspectionForecast:
        """Prevision ITV pour le tableau de bord / Inspection forecast for the dashboard.

        profile : objet avec registration_date, category, last_inspection_date (ou None).
        """
        if profile is None:
            return InspectionForecast()

        reference = parse_date(today) or date.today()
        next_date = InspectionService.next_inspection_date(
            profile.registration_date,
            profile.category,
            getattr(profile, "last_inspection_date", None),
            reference,
        )
        if next_date is None:
            return InspectionForecast()

        if next_date == EXEMPT_DATE:
            return InspectionForecast(
                is_configured=True,
                next_date=next_date,
                state=InspectionState.EXEMPT,
                is_exempt=True,
            )

        days = ReminderService.days_remaining(next_date, reference)
        return InspectionForecast(
            is_configured=True,
            next_date=next_date,
            state=InspectionService.inspection_state(profile.registration_date, profile.category, reference),
            days_remaining=days,
            alert_level=ReminderService.alert_level(days),
            is_overdue=days is not None and days < 0,
        )


next_inspection_date = InspectionService.next_inspection_date
forecast_inspection = InspectionService.forecast
