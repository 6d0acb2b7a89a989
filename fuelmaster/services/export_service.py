"""
Service d'export CSV/Excel/PDF / CSV/Excel/PDF export service.
Génère l'historique des repostajes et le rapport de consommation.
Generates the refill history and the consumption report.
"""

import csv
import io
from datetime import date

from openpyxl import Workbook
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from fuelmaster.schemas.fuel import DerivedRecord, SummaryStats

CSV_HEADERS = [
    "Fecha", "Km Inicial", "Km Final", "Distancia", "Litros",
    "Precio/Litro", "Coste Total", "Consumo L/100km", "Km/Litro", "Reserva",
]

XLSX_FIELDS = [
    "date", "odometer_start", "odometer_end", "distance", "liters", "price_per_liter",
    "cost", "consumption_per_100", "efficiency_per_liter", "cumulative_cost",
    "cumulative_liters", "cumulative_distance", "distance_discrepancy", "reserve_km",
]

_EMERALD = colors.HexColor("#10b981")
_SLATE = colors.HexColor("#1e293b")
_ROW_ALT = colors.HexColor("#f8fafc")


def decimal_comma(value: float, digits: int = 2) -> str:
    """12.5 -> '12,50'."""
    return f"{value:.{digits}f}".replace(".", ",")


def plain_number(value: float) -> str:
    """Entier sans décimales, sinon virgule décimale / Integer as is, otherwise decimal comma."""
    if float(value).is_integer():
        return str(int(value))
    return decimal_comma(value)


def thousands(value: float) -> str:
    """112035 -> '112.035' (format es-ES)."""
    return f"{value:,.0f}".replace(",", ".")


class ExportService:
    """Export des repostajes / Refill export."""

    @staticmethod
    def to_csv(entries: list[DerivedRecord]) -> bytes:
        """Générer un CSV UTF-8 BOM avec séparateur ';' / Generate UTF-8 BOM CSV with ';' separator."""
        output = io.StringIO()
        writer = csv.writer(output, delimiter=";", lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        for e in entries:
            writer.writerow([
                e.date.strftime("%d/%m/%Y"),
                plain_number(e.odometer_start),
                plain_number(e.odometer_end),
                plain_number(e.distance),
                decimal_comma(e.liters),
                decimal_comma(e.price_per_liter, 3),
                decimal_comma(e.cost),
                decimal_comma(e.consumption_per_100),
                decimal_comma(e.efficiency_per_liter),
                e.reserve_km or "",
            ])
        return ("\ufeff" + output.getvalue()).encode("utf-8")

    @staticmethod
    def to_xlsx(entries: list[DerivedRecord], stats: SummaryStats) -> bytes:
        """Générer un fichier Excel / Generate an Excel file."""
        wb = Workbook()
        ws = wb.active
        ws.title = "Repostajes"

        # En-têtes / Headers
        for col_idx, field in enumerate(XLSX_FIELDS, 1):
            cell = ws.cell(row=1, column=col_idx, value=field)
            cell.font = cell.font.copy(bold=True)

        # Données / Data rows
        for row_idx, entry in enumerate(entries, 2):
            data = entry.model_dump()
            for col_idx, field in enumerate(XLSX_FIELDS, 1):
                ws.cell(row=row_idx, column=col_idx, value=data.get(field))

        summary = wb.create_sheet("Resumen")
        for row_idx, (key, value) in enumerate(stats.model_dump().items(), 1):
            key_cell = summary.cell(row=row_idx, column=1, value=key)
            key_cell.font = key_cell.font.copy(bold=True)
            summary.cell(row=row_idx, column=2, value=value)

        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()

    @staticmethod
    def to_pdf(
        entries: list[DerivedRecord],
        stats: SummaryStats,
        vehicle_name: str | None = None,
        tank_capacity_liters: float | None = None,
        report_date: date | None = None,
    ) -> bytes:
        """Rapport PDF de consommation / Consumption PDF report.

        Résumé exécutif puis historique détaillé, plus récent en premier.
        Executive summary, then detailed history, newest first.
        """
        buf = io.BytesIO()
        doc = SimpleDocTemplate(
            buf,
            pagesize=A4,
            leftMargin=15 * mm,
            rightMargin=15 * mm,
            topMargin=15 * mm,
            bottomMargin=15 * mm,
            title="Informe de consumo",
        )
        styles = getSampleStyleSheet()
        report_date = report_date or date.today()

        story = [
            Paragraph("INFORME DE CONSUMO Y EFICIENCIA", styles["Title"]),
            Paragraph(
                f"{vehicle_name or 'Vehículo'} · Fecha del informe: {report_date.strftime('%d/%m/%Y')}",
                styles["Normal"],
            ),
            Spacer(1, 8 * mm),
            Paragraph("Resumen Ejecutivo", styles["Heading2"]),
        ]

        tank = f"{plain_number(tank_capacity_liters)} Litros" if tank_capacity_liters else "-"
        summary_rows = [
            ["Consumo Medio:", f"{decimal_comma(stats.avg_consumption)} L/100km",
             "Eficiencia:", f"{decimal_comma(stats.avg_efficiency)} km/L"],
            ["Inversión Total:", f"{decimal_comma(stats.total_cost)} €",
             "Coste/100km:", f"{decimal_comma(stats.avg_cost_per_100)} €"],
            ["Kilometraje Total:", f"{thousands(stats.last_odometer)} km",
             "Litros Totales:", f"{decimal_comma(stats.total_fuel)} L"],
            ["Media PVP:", f"{decimal_comma(stats.avg_price_per_liter, 3)} €/L",
             "Depósito:", tank],
        ]
        summary = Table(summary_rows, hAlign="LEFT")
        summary.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
            ("FONTNAME", (2, 0), (2, -1), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("LINEABOVE", (0, 0), (-1, 0), 0.5, _EMERALD),
        ]))
        story += [summary, Spacer(1, 8 * mm), Paragraph("Histórico Detallado de Repostajes", styles["Heading2"])]

        history = [["Fecha", "Odómetro", "Distancia", "Llenado", "PVP €/L", "Coste €", "L/100km"]]
        for e in reversed(entries):
            history.append([
                e.date.strftime("%d/%m/%Y"),
                thousands(e.odometer_end),
                f"{plain_number(e.distance)} km",
                f"{decimal_comma(e.liters)} L",
                f"{decimal_comma(e.price_per_liter, 3)} €",
                f"{decimal_comma(e.cost)} €",
                decimal_comma(e.consumption_per_100),
            ])
        table = Table(history, repeatRows=1, hAlign="LEFT")
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), _SLATE),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, 0), 9),
            ("FONTSIZE", (0, 1), (-1, -1), 8),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, _ROW_ALT]),
            ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
        ]))
        story.append(table)

        doc.build(story)
        return buf.getvalue()
