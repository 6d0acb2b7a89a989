"""
Utilitaires de dates / Date helpers.

Les dates arrivent du formulaire (YYYY-MM-DD) ou du tableur (DD/MM/YYYY).
Dates come from the settings form (YYYY-MM-DD) or the spreadsheet (DD/MM/YYYY).
"""

import re
from datetime import date, datetime

from dateutil.relativedelta import relativedelta

_DATE_SPLIT = re.compile(r"[/\-.]")


def parse_date(value) -> date | None:
    """Convertir en date, None si illisible / Convert to a date, None when unreadable.

    Accepte date, datetime, "YYYY-MM-DD", "DD/MM/YYYY" (separateurs / - .)
    et ignore une eventuelle partie horaire.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    token = value.strip().split(" ")[0].split("T")[0]
    parts = _DATE_SPLIT.split(token)
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None

    first, second, third = (int(p) for p in parts)
    try:
        if first > 1000:
            return date(first, second, third)
        return date(third, second, first)
    except ValueError:
        return None


def to_iso(value) -> str | None:
    """Date ISO YYYY-MM-DD ou None / ISO date string or None."""
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None


def add_months(start: date, months: int) -> date:
    """Ajouter des mois en bornant le jour / Add months, clamping the day of month.

    31/01 + 1 mois = 28/02 (ou 29/02). Hors calendrier : date.max (ou date.min).
    Outside the calendar range the result saturates at date.max (or date.min).
    """
    try:
        return start + relativedelta(months=months)
    except (ValueError, OverflowError):
        return date.max if months > 0 else date.min


def months_between(start: date, end: date) -> int:
    """Nombre de mois entiers ecoules / Number of whole months elapsed.

    Plus grand m tel que add_months(start, m) <= end. Negatif si end < start.
    """
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if add_months(start, months) > end:
        months -= 1
    return months
