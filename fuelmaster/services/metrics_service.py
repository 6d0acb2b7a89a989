"""
Service de métriques carburant / Fuel metrics service.

Calcule, à partir des repostajes, la distance, la consommation (L/100 km),
l'efficacité (km/L) et les cumuls de chaque entrée, puis les statistiques
globales. Fonctions pures : aucune E/S, aucune exception pour des entrées typées.
Derives per-entry distance, consumption, efficiency and running totals, then
aggregate statistics. Pure functions: no I/O, no exceptions for typed input.
"""

import logging
import math
from collections.abc import Iterable

from fuelmaster.schemas.fuel import DerivedRecord, FuelRecord, SummaryStats

logger = logging.getLogger(__name__)


class MetricsService:
    """Moteur de métriques / Metrics engine."""

    @staticmethod
    def consumption_per_100(liters: float, distance: float) -> float:
        """Consommation L/100 / Consumption per 100 distance units."""
        if distance <= 0 or liters <= 0:
            return 0.0
        return (liters / distance) * 100

    @staticmethod
    def efficiency_per_liter(distance: float, liters: float) -> float:
        """Distance par litre / Distance per liter."""
        if liters <= 0 or distance <= 0:
            return 0.0
        return distance / liters

    @staticmethod
    def derive_records(records: Iterable[FuelRecord | dict]) -> list[DerivedRecord]:
        """Enrichir les repostajes dans l'ordre chronologique / Derive metrics in chronological order.

        Tri par date puis km final (tri stable). La distance d'une entrée est
        sa distance saisie si non nulle, sinon km final - km final précédent
        (km final - km initial pour la première).
        Sorted by date then end reading (stable). Distance is the explicit
        non-zero value, else end - previous end (end - start for the first).
        """
        items = [r if isinstance(r, FuelRecord) else FuelRecord.model_validate(r) for r in records]
        if not items:
            return []

        ordered = sorted(items, key=lambda r: (r.date, r.odometer_end))
        first = ordered[0]

        derived: list[DerivedRecord] = []
        cumulative_cost = 0.0
        cumulative_liters = 0.0
        discrepancies = 0
        previous: FuelRecord | None = None

        for record in ordered:
            if previous is None:
                chained = record.odometer_end - record.odometer_start
                discrepancy = 0.0
            else:
                chained = record.odometer_end - previous.odometer_end
                discrepancy = record.odometer_start - previous.odometer_end
                if discrepancy != 0:
                    discrepancies += 1
            distance = record.distance if record.distance else chained

            cumulative_cost += record.cost
            cumulative_liters += record.liters

            derived.append(DerivedRecord(**{
                **record.model_dump(),
                "distance": distance,
                "consumption_per_100": MetricsService.consumption_per_100(record.liters, distance),
                "efficiency_per_liter": MetricsService.efficiency_per_liter(distance, record.liters),
                "cumulative_cost": cumulative_cost,
                "cumulative_liters": cumulative_liters,
                "cumulative_distance": record.odometer_end - first.odometer_start,
                "distance_discrepancy": discrepancy,
            }))
            previous = record

        logger.debug("Derived %d fuel records (%d odometer discrepancies)", len(derived), discrepancies)
        return derived

    @staticmethod
    def summarize(derived: Iterable[DerivedRecord]) -> SummaryStats:
        """Statistiques globales / Aggregate statistics.

        Moyennes de consommation et d'efficacité = rapport des sommes
        (litres totaux / distance totale), pas moyenne des rapports.
        Le prix moyen est la moyenne simple des prix saisis.
        Consumption and efficiency use ratio-of-sums; the average price is the
        plain mean of recorded prices.
        """
        # Egalite de km final : le plus petit km initial ouvre la serie /
        # tie on end reading: the lowest start reading opens the series
        ordered = sorted(derived, key=lambda r: (r.odometer_end, r.odometer_start))
        if not ordered:
            return SummaryStats()

        first = ordered[0]
        last = ordered[-1]

        total_distance = last.odometer_end - first.odometer_start
        total_fuel = math.fsum(r.liters for r in ordered)
        total_cost = math.fsum(r.cost for r in ordered)
        avg_price = math.fsum(r.price_per_liter for r in ordered) / len(ordered)

        return SummaryStats(
            total_distance=total_distance,
            total_fuel=total_fuel,
            total_cost=total_cost,
            avg_consumption=(total_fuel / total_distance) * 100 if total_distance > 0 else 0.0,
            avg_efficiency=total_distance / total_fuel if total_fuel > 0 else 0.0,
            avg_price_per_liter=avg_price,
            avg_cost_per_100=(total_cost / total_distance) * 100 if total_distance > 0 else 0.0,
            last_odometer=last.odometer_end,
            entry_count=len(ordered),
        )


derive_records = MetricsService.derive_records
summarize = MetricsService.summarize
