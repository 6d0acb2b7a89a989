"""Tests API / API tests."""

import pytest

FUEL_CSV = (
    "FECHA,Km Inicial,Km Final,Litros,Gasto,PVP\n"
    '01/01/2024,"1.000","1.500","30,00","45,00 €","1,50 €"\n'
    '15/01/2024,"1.500","2.000","25,00","40,00 €",\n'
    '32/13/2024,"2.000","2.300","20,00","30,00 €",\n'
)


async def _add_entries(client):
    first = await client.post("/api/fuel/", json={
        "date": "01/01/2024", "odometer_start": 1000, "odometer_end": 1500,
        "liters": 30, "price_per_liter": 1.5,
    })
    second = await client.post("/api/fuel/", json={
        "date": "2024-01-15", "odometer_end": 2000, "liters": 25, "price_per_liter": 1.6,
    })
    return first.json(), second.json()


@pytest.mark.asyncio
async def test_root(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "running"


@pytest.mark.asyncio
async def test_api_health(client):
    resp = await client.get("/api/")
    assert resp.status_code == 200
    assert resp.json()["app"] == "FuelMaster"
    assert "X-Request-ID" in resp.headers
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.asyncio
async def test_create_fuel_entry(client):
    resp = await client.post("/api/fuel/", json={
        "date": "01/01/2024", "odometer_start": 1000, "odometer_end": 1500,
        "liters": 30, "price_per_liter": 1.5,
    })
    assert resp.status_code == 201
    data = resp.json()
    assert data["date"] == "2024-01-01"
    assert data["cost"] == 45.0
    assert data["created_at"]
    assert "id" in data


@pytest.mark.asyncio
async def test_create_defaults_start_to_previous_end(client):
    _, second = await _add_entries(client)
    assert second["odometer_start"] == 1500
    assert second["cost"] == pytest.approx(40.0)


@pytest.mark.asyncio
async def test_first_entry_without_start(client):
    resp = await client.post("/api/fuel/", json={"date": "2024-01-01", "odometer_end": 800, "liters": 20, "cost": 30})
    data = resp.json()
    assert data["odometer_start"] == 800
    assert data["price_per_liter"] == 1.5


@pytest.mark.asyncio
async def test_create_invalid_entry(client):
    resp = await client.post("/api/fuel/", json={"date": "2024-01-01", "odometer_end": 100, "liters": -5})
    assert resp.status_code == 422
    resp = await client.post("/api/fuel/", json={"date": "yesterday", "odometer_end": 100, "liters": 5})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_list_derived_and_summary(client):
    await _add_entries(client)

    resp = await client.get("/api/fuel/")
    assert [e["date"] for e in resp.json()] == ["2024-01-01", "2024-01-15"]

    resp = await client.get("/api/fuel/derived")
    derived = resp.json()
    assert derived[1]["distance"] == 500
    assert derived[1]["consumption_per_100"] == pytest.approx(5.0)
    assert derived[1]["cumulative_cost"] == pytest.approx(85.0)

    resp = await client.get("/api/fuel/summary")
    stats = resp.json()
    assert stats["entry_count"] == 2
    assert stats["total_distance"] == 1000
    assert stats["avg_consumption"] == pytest.approx(5.5)


@pytest.mark.asyncio
async def test_update_recomputes_cost(client):
    _, second = await _add_entries(client)
    resp = await client.put(f"/api/fuel/{second['id']}", json={"liters": 20})
    assert resp.status_code == 200
    data = resp.json()
    assert data["liters"] == 20
    assert data["cost"] == pytest.approx(32.0)
    assert data["odometer_start"] == 1500


@pytest.mark.asyncio
async def test_update_cost_rederives_price(client):
    _, second = await _add_entries(client)
    resp = await client.put(f"/api/fuel/{second['id']}", json={"cost": 50})
    assert resp.status_code == 200
    data = resp.json()
    assert data["cost"] == 50
    assert data["liters"] == 25
    assert data["price_per_liter"] == pytest.approx(2.0)


@pytest.mark.asyncio
async def test_delete_fuel_entry(client):
    first, _ = await _add_entries(client)
    resp = await client.delete(f"/api/fuel/{first['id']}")
    assert resp.status_code == 204
    resp = await client.get(f"/api/fuel/{first['id']}")
    assert resp.status_code == 404
    resp = await client.delete("/api/fuel/9999")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_vehicle_profile(client):
    resp = await client.get("/api/vehicle/")
    assert resp.status_code == 404

    resp = await client.put("/api/vehicle/", json={
        "registration_date": "22/01/2020", "category": "turismo", "name": "Ibiza",
        "tank_capacity_liters": 45, "last_inspection_date": "",
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["registration_date"] == "2020-01-22"
    assert data["last_inspection_date"] is None

    resp = await client.put("/api/vehicle/", json={"registration_date": "2020-01-22", "category": "nave"})
    assert resp.json()["category"] == "turismo"
    assert resp.json()["id"] == data["id"]


@pytest.mark.asyncio
async def test_vehicle_profile_requires_registration(client):
    resp = await client.put("/api/vehicle/", json={"category": "turismo"})
    assert resp.status_code == 422
    resp = await client.put("/api/vehicle/", json={"registration_date": "2020-02-30"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_vehicle_inspection(client):
    resp = await client.get("/api/vehicle/inspection")
    assert resp.json()["is_configured"] is False

    await client.put("/api/vehicle/", json={"registration_date": "2020-01-22", "category": "turismo"})
    resp = await client.get("/api/vehicle/inspection", params={"as_of": "2025-06-01"})
    data = resp.json()
    assert data["next_date"] == "2026-01-22"
    assert data["state"] == "IN_EARLY_INTERVAL"
    assert data["alert_level"] == "ok"


@pytest.mark.asyncio
async def test_vehicle_inspection_near_calendar_end(client):
    resp = await client.put("/api/vehicle/", json={"registration_date": "9998-06-01", "category": "turismo"})
    assert resp.status_code == 200
    resp = await client.get("/api/vehicle/inspection", params={"as_of": "9999-01-01"})
    assert resp.status_code == 200
    assert resp.json()["is_configured"] is False


@pytest.mark.asyncio
async def test_dashboard(client):
    await _add_entries(client)
    await client.put("/api/vehicle/", json={
        "registration_date": "2020-01-22", "next_service_km": 2300, "next_service_date": "2026-03-01",
    })
    resp = await client.get("/api/dashboard/", params={"as_of": "2026-01-20"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["stats"]["last_odometer"] == 2000
    assert data["inspection"]["days_remaining"] == 2
    assert data["inspection"]["alert_level"] == "critical"
    assert data["service"]["km_remaining"] == 300
    assert data["service"]["is_due"] is False


@pytest.mark.asyncio
async def test_dashboard_empty(client):
    resp = await client.get("/api/dashboard/")
    data = resp.json()
    assert data["stats"]["entry_count"] == 0
    assert data["inspection"]["is_configured"] is False
    assert data["service"]["is_configured"] is False


@pytest.mark.asyncio
async def test_import_fuel_csv(client):
    files = {"file": ("repostajes.csv", FUEL_CSV.encode("utf-8"), "text/csv")}
    resp = await client.post("/api/imports/fuel", files=files)
    assert resp.status_code == 200
    assert resp.json() == {"imported": 2, "skipped": 1, "replaced": 0}

    resp = await client.post("/api/imports/fuel", params={"replace": "true"}, files=files)
    assert resp.json()["replaced"] == 2

    resp = await client.get("/api/fuel/")
    assert len(resp.json()) == 2


@pytest.mark.asyncio
async def test_import_without_header(client):
    files = {"file": ("bad.csv", b"DATE,KM\n01/01/2024,100\n", "text/csv")}
    resp = await client.post("/api/imports/fuel", files=files)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_export_csv(client):
    await _add_entries(client)
    resp = await client.get("/api/exports/fuel", params={"format": "csv"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "attachment" in resp.headers["content-disposition"]
    assert resp.content.decode("utf-8-sig").splitlines()[0].startswith("Fecha;")


@pytest.mark.asyncio
async def test_export_xlsx_and_pdf(client):
    await _add_entries(client)
    resp = await client.get("/api/exports/fuel", params={"format": "xlsx"})
    assert resp.content[:2] == b"PK"
    resp = await client.get("/api/exports/fuel", params={"format": "pdf"})
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_export_unknown_format(client):
    resp = await client.get("/api/exports/fuel", params={"format": "doc"})
    assert resp.status_code == 422
