"""Tests for the saved scenario endpoints."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from maintlytics.action.api import app
from maintlytics.analytics.scenario_codec import save_scenario
from maintlytics.analytics.work_orders import FilterSpec
from maintlytics.db.connection import get_session


def _mock_session_override():
    session = AsyncMock()
    yield session


@pytest.fixture()
def client():
    app.dependency_overrides[get_session] = _mock_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@patch("maintlytics.memory.scenario_store.list_scenarios", new_callable=AsyncMock)
def test_list_scenarios(mock_list, client):
    scenario = save_scenario("Linha 1", FilterSpec(asset_codes=frozenset({"M1"})))
    mock_list.return_value = [scenario]

    resp = client.get("/scenarios")
    assert resp.status_code == 200
    data = resp.json()
    assert data[0]["id"] == scenario.id
    assert data[0]["filters"]["machineCodes"] == ["M1"]


@patch("maintlytics.memory.scenario_store.add_scenario", new_callable=AsyncMock)
def test_create_scenario(mock_add, client):
    resp = client.post("/scenarios", json={
        "name": "Prensas janeiro",
        "filters": {"asset_codes": ["M2", "M1"], "period": "2024-01"},
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Prensas janeiro"
    assert data["filters"] == {"machineCodes": ["M1", "M2"], "period": "2024-01", "status": "all"}
    mock_add.assert_awaited_once()


def test_create_scenario_requires_name(client):
    resp = client.post("/scenarios", json={"name": "   "})
    assert resp.status_code == 400


@patch("maintlytics.memory.scenario_store.add_scenario", new_callable=AsyncMock)
def test_create_scenario_store_failure(mock_add, client):
    mock_add.side_effect = RuntimeError("db down")
    resp = client.post("/scenarios", json={"name": "x"})
    assert resp.status_code == 500


@patch("maintlytics.memory.scenario_store.get_scenario", new_callable=AsyncMock)
def test_apply_scenario_reports_dropped_codes(mock_get, client):
    mock_get.return_value = save_scenario("s", FilterSpec(asset_codes=frozenset({"M1", "M9"})))

    resp = client.post("/scenarios/abc/apply", json={"dataset_asset_codes": ["M1", "M2"]})
    assert resp.status_code == 200
    data = resp.json()
    assert data["dropped_codes"] == ["M9"]
    assert data["filters"]["machineCodes"] == ["M1"]


@patch("maintlytics.memory.scenario_store.get_scenario", new_callable=AsyncMock)
def test_apply_unknown_scenario(mock_get, client):
    mock_get.return_value = None
    resp = client.post("/scenarios/missing/apply", json={"dataset_asset_codes": []})
    assert resp.status_code == 404


@patch("maintlytics.memory.scenario_store.delete_scenario", new_callable=AsyncMock)
def test_delete_unknown_is_not_error(mock_delete, client):
    mock_delete.return_value = False
    resp = client.delete("/scenarios/missing")
    assert resp.status_code == 200
    assert resp.json()["status"] == "not_found"


@patch("maintlytics.memory.scenario_store.delete_scenario", new_callable=AsyncMock)
def test_delete(mock_delete, client):
    mock_delete.return_value = True
    resp = client.delete("/scenarios/abc")
    assert resp.json() == {"status": "deleted", "id": "abc"}


@patch("maintlytics.memory.scenario_store.export_json", new_callable=AsyncMock)
def test_export(mock_export, client):
    mock_export.return_value = "[]"
    resp = client.get("/scenarios/export")
    assert resp.json() == {"payload": "[]"}


@patch("maintlytics.memory.scenario_store.import_json", new_callable=AsyncMock)
def test_import(mock_import, client):
    mock_import.return_value = 3
    resp = client.post("/scenarios/import", json={"payload": "[]"})
    assert resp.json() == {"status": "imported", "count": 3}


@patch("maintlytics.memory.scenario_store.import_json", new_callable=AsyncMock)
def test_import_rejects_corrupt_payload(mock_import, client):
    mock_import.side_effect = ValueError("Saved-scenario payload is not valid JSON")
    resp = client.post("/scenarios/import", json={"payload": "not json"})
    assert resp.status_code == 400
    assert "not valid JSON" in resp.json()["detail"]
