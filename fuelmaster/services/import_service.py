"""
Service d'import CSV/Excel / CSV/Excel import service.
Lit l'export du tableur de suivi carburant et retourne des FuelRecord validés.
Reads the fuel-log spreadsheet export and returns validated FuelRecords.

Format attendu / Expected format:
- lignes de titre libres, puis une ligne d'en-tête contenant "FECHA"
- nombres au format européen ("1.368,00", "36,29", "1,18 €", "112.035")
- lignes sans date valide ignorées (totaux, notes)
"""

import csv
import io
import logging
import math
import re
import unicodedata
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from openpyxl import load_workbook
from pydantic import ValidationError

from fuelmaster.schemas.fuel import FuelRecord

logger = logging.getLogger(__name__)

_STRIP_CHARS = re.compile(r"[\"€$£kmlL\s]")
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_DATE_SPLIT = re.compile(r"[/\-.]")
_HEADER_MARKER = "FECHA"

# Alias de colonnes (en-têtes normalisés) / Column aliases (normalized headers)
COLUMN_ALIASES: dict[str, list[str]] = {
    "date": ["fecha"],
    "odometer_start": ["kminicial"],
    "odometer_end": ["kmfinal"],
    "liters": ["litros"],
    "cost": ["gasto"],
    "price_per_liter": ["pvp", "precio"],
    "distance": ["kilometros", "distancia"],
    "reserve_km": ["reserva"],
}


class ImportFormatError(ValueError):
    """Fichier illisible ou sans en-tête / Unreadable file or missing header."""


@dataclass
class FuelImport:
    """Lignes importées / Imported rows."""
    records: list[FuelRecord] = field(default_factory=list)
    skipped: int = 0


class ImportService:
    """Import de repostajes depuis fichiers / Refill import from files."""

    @staticmethod
    def clean_number(value: Any) -> float:
        """Nettoyer un nombre du tableur / Clean a spreadsheet number.

        "1.368,00" -> 1368.0, "36,29" -> 36.29, "1,18 €" -> 1.18,
        "112.035" -> 112035.0 (point suivi de 3 chiffres = milliers). Illisible -> 0.
        """
        if value is None or isinstance(value, bool):
            return 0.0
        if isinstance(value, (int, float)):
            return 0.0 if math.isnan(value) or math.isinf(value) else float(value)

        s = _STRIP_CHARS.sub("", str(value).strip())
        if not s:
            return 0.0

        if "." in s and "," in s:
            s = s.replace(".", "").replace(",", ".", 1)
        elif "," in s:
            s = s.replace(",", ".", 1)
        elif "." in s:
            parts = s.split(".")
            if len(parts) > 1 and len(parts[-1]) == 3:
                s = s.replace(".", "")

        match = _LEADING_NUMBER.match(s)
        if not match:
            return 0.0
        number = float(match.group(0))
        return 0.0 if math.isnan(number) or math.isinf(number) else number

    @staticmethod
    def is_date_like(value: Any) -> bool:
        """Trois parties numériques (DD/MM/YYYY...) / Three numeric parts."""
        if isinstance(value, (date, datetime)):
            return True
        if not value:
            return False
        token = str(value).strip().split(" ")[0]
        parts = _DATE_SPLIT.split(token)
        return len(parts) == 3 and all(p.strip().isdigit() for p in parts)

    @staticmethod
    def normalize_header(value: Any) -> str:
        """'Km Inicial' -> 'kminicial', 'Kilómetros' -> 'kilometros'."""
        text = unicodedata.normalize("NFD", str(value or "").strip().lower())
        text = "".join(c for c in text if not unicodedata.combining(c))
        return re.sub(r"[^a-z0-9]", "", text)

    @staticmethod
    def locate_columns(headers: list[Any]) -> dict[str, int]:
        """Index de chaque champ connu (absent = non présent) / Index of each known field."""
        normalized = [ImportService.normalize_header(h) for h in headers]
        columns: dict[str, int] = {}
        for field_name, aliases in COLUMN_ALIASES.items():
            for idx, header in enumerate(normalized):
                if header and any(header == a or a in header for a in aliases):
                    columns[field_name] = idx
                    break
        return columns

    @staticmethod
    def build_records(rows: list[list[Any]], columns: dict[str, int], first_line: int = 1) -> FuelImport:
        """Convertir les lignes de données en FuelRecord / Convert data rows to FuelRecords."""
        result = FuelImport()
        date_idx = columns.get("date")
        if date_idx is None:
            raise ImportFormatError("No date column found in header row")

        def cell(row: list[Any], name: str) -> Any:
            idx = columns.get(name)
            if idx is None or idx >= len(row):
                return None
            return row[idx]

        for line_no, row in enumerate(rows, first_line):
            raw_date = cell(row, "date")
            if isinstance(raw_date, str):
                raw_date = raw_date.strip().split(" ")[0]
            if not ImportService.is_date_like(raw_date):
                continue

            odometer_start = ImportService.clean_number(cell(row, "odometer_start"))
            odometer_end = ImportService.clean_number(cell(row, "odometer_end"))
            liters = ImportService.clean_number(cell(row, "liters"))
            cost = ImportService.clean_number(cell(row, "cost"))
            if "distance" in columns:
                distance = ImportService.clean_number(cell(row, "distance"))
            else:
                distance = odometer_end - odometer_start

            if odometer_end == 0 and liters == 0:
                continue

            price = ImportService.clean_number(cell(row, "price_per_liter"))
            if not price:
                price = cost / liters if liters > 0 else 0.0
            reserve = cell(row, "reserve_km")

            try:
                record = FuelRecord(
                    id=f"import-{line_no}",
                    date=raw_date,
                    odometer_start=odometer_start,
                    odometer_end=odometer_end,
                    liters=liters,
                    price_per_liter=price,
                    cost=cost or None,
                    distance=distance if distance > 0 else None,
                    reserve_km=str(reserve).strip() if reserve not in (None, "") else None,
                )
            except ValidationError as e:
                logger.warning("Skipping line %d: %s", line_no, e.errors()[0].get("msg"))
                result.skipped += 1
                continue
            result.records.append(record)

        return result

    @staticmethod
    def parse_fuel_csv(content: bytes | str) -> FuelImport:
        """Parser l'export CSV du tableur / Parse the spreadsheet CSV export."""
        text = content.decode("utf-8-sig") if isinstance(content, bytes) else content.lstrip("\ufeff")
        lines = [line for line in text.strip().splitlines() if line.strip()]

        header_idx = next(
            (i for i, line in enumerate(lines) if _HEADER_MARKER in line.upper()), None
        )
        if header_idx is None:
            raise ImportFormatError(f"Header row with '{_HEADER_MARKER}' not found")

        # Valeurs entre guillemets avec virgules (format Google Sheets) /
        # Quoted values containing commas (Google Sheets format)
        reader = csv.reader(lines[header_idx:], delimiter=",")
        headers = next(reader)
        rows = [[c.strip() for c in row] for row in reader]

        columns = ImportService.locate_columns(headers)
        result = ImportService.build_records(rows, columns, first_line=header_idx + 2)
        logger.info("CSV import: %d records, %d skipped", len(result.records), result.skipped)
        return result

    @staticmethod
    def parse_fuel_excel(content: bytes) -> FuelImport:
        """Parser un classeur Excel du même tableur / Parse an Excel workbook of the same sheet."""
        try:
            wb = load_workbook(filename=io.BytesIO(content), read_only=True, data_only=True)
        except Exception as e:
            raise ImportFormatError(f"Unreadable Excel file: {e}") from e

        try:
            ws = wb.active
            if ws is None:
                raise ImportFormatError("Workbook has no active sheet")
            all_rows = [list(row) for row in ws.iter_rows(values_only=True)]
        finally:
            wb.close()

        header_idx = next(
            (
                i for i, row in enumerate(all_rows)
                if any(v is not None and _HEADER_MARKER in str(v).upper() for v in row)
            ),
            None,
        )
        if header_idx is None:
            raise ImportFormatError(f"Header row with '{_HEADER_MARKER}' not found")

        columns = ImportService.locate_columns(all_rows[header_idx])
        result = ImportService.build_records(all_rows[header_idx + 1:], columns, first_line=header_idx + 2)
        logger.info("Excel import: %d records, %d skipped", len(result.records), result.skipped)
        return result

    @staticmethod
    def parse_upload(filename: str | None, content: bytes) -> FuelImport:
        """Choisir le parseur selon le fichier / Pick the parser for the uploaded file."""
        name = (filename or "").lower()
        if name.endswith((".xlsx", ".xlsm")) or content[:4] == b"PK\x03\x04":
            return ImportService.parse_fuel_excel(content)
        try:
            return ImportService.parse_fuel_csv(content)
        except UnicodeDecodeError as e:
            raise ImportFormatError("CSV file must be UTF-8 encoded") from e
