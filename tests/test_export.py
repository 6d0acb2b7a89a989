"""Tests export / Export tests."""

import io

from openpyxl import load_workbook

from fuelmaster.schemas.fuel import FuelRecord, SummaryStats
from fuelmaster.services.export_service import ExportService, decimal_comma, plain_number, thousands
from fuelmaster.services.metrics_service import derive_records, summarize


def _derived():
    return derive_records([
        FuelRecord(date="2024-01-01", odometer_start=1000, odometer_end=1500, liters=30, price_per_liter=1.5),
        FuelRecord(date="2024-01-15", odometer_start=1500, odometer_end=2000, liters=25, price_per_liter=1.6,
                   reserve_km="40"),
    ])


def test_number_formats():
    assert decimal_comma(12.5) == "12,50"
    assert decimal_comma(1.5, 3) == "1,500"
    assert plain_number(500.0) == "500"
    assert plain_number(480.5) == "480,50"
    assert thousands(112035) == "112.035"


def test_csv():
    content = ExportService.to_csv(_derived())
    assert content.startswith(b"\xef\xbb\xbf")
    lines = content.decode("utf-8-sig").splitlines()
    assert lines[0].startswith("Fecha;Km Inicial;Km Final")
    assert lines[1] == "01/01/2024;1000;1500;500;30,00;1,500;45,00;6,00;16,67;"
    assert lines[2].endswith(";40")
    assert len(lines) == 3


def test_xlsx():
    derived = _derived()
    content = ExportService.to_xlsx(derived, summarize(derived))
    assert content[:2] == b"PK"
    wb = load_workbook(io.BytesIO(content))
    assert wb.sheetnames == ["Repostajes", "Resumen"]
    ws = wb["Repostajes"]
    assert ws.cell(row=1, column=1).value == "date"
    assert ws.max_row == 3
    assert wb["Resumen"].cell(row=1, column=1).value == "total_distance"


def test_pdf():
    derived = _derived()
    content = ExportService.to_pdf(derived, summarize(derived), vehicle_name="Ibiza", tank_capacity_liters=45)
    assert content.startswith(b"%PDF")


def test_pdf_empty_history():
    assert ExportService.to_pdf([], SummaryStats()).startswith(b"%PDF")
