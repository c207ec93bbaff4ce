"""API tests for the vehicle endpoints."""

from __future__ import annotations

import sqlite3
from typing import Any

import pytest
from fastapi.testclient import TestClient

VIN = "1HGCM82633A004352"


def _count(client: TestClient) -> int:
    return client.app.state.store.count_vehicles()


class TestCreateVehicle:
    def test_create_then_get(self, client: TestClient, vehicle_payload: dict[str, Any]):
        resp = client.post("/api/vehicles", json=vehicle_payload)
        assert resp.status_code == 201
        created = resp.json()
        assert isinstance(created["id"], int)

        resp = client.get(f"/api/vehicles/{VIN}")
        assert resp.status_code == 200
        body = resp.json()
        for key, value in vehicle_payload.items():
            assert body[key] == value
        assert body["tokenId"] is None
        assert body["metadata"] == {}

    def test_round_trip_is_identical(self, client: TestClient, vehicle_payload: dict[str, Any]):
        vehicle_payload.update(
            currentMileage=152345,
            metadata={"color": "silver", "notes": "Regular maintenance", "owners": [1, 2]},
            tokenId="txid123.0",
            vehicleHash="c2hhMjU2",
            onchainAt="2024-06-01T12:00:00.123Z",
        )
        created = client.post("/api/vehicles", json=vehicle_payload).json()
        fetched = client.get(f"/api/vehicles/{VIN}").json()
        assert fetched == created
        for key, value in vehicle_payload.items():
            assert fetched[key] == value

    def test_duplicate_vin(self, client: TestClient, vehicle_payload: dict[str, Any]):
        first = client.post("/api/vehicles", json=vehicle_payload).json()
        resp = client.post("/api/vehicles", json={**vehicle_payload, "make": "Acura"})
        assert resp.status_code == 409
        assert resp.json() == {"error": "VIN already exists"}
        assert client.get(f"/api/vehicles/{VIN}").json() == first
        assert _count(client) == 1

    @pytest.mark.parametrize("field", ["vin", "make", "model", "year", "ownerAddress"])
    def test_missing_required_field(self, client: TestClient, vehicle_payload: dict[str, Any], field: str):
        vehicle_payload.pop(field)
        resp = client.post("/api/vehicles", json=vehicle_payload)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing required fields"}
        assert _count(client) == 0

    @pytest.mark.parametrize("field", ["vin", "make", "ownerAddress"])
    def test_empty_or_null_required_field(self, client: TestClient, vehicle_payload: dict[str, Any], field: str):
        assert client.post("/api/vehicles", json={**vehicle_payload, field: ""}).status_code == 400
        assert client.post("/api/vehicles", json={**vehicle_payload, field: None}).status_code == 400
        assert _count(client) == 0

    def test_malformed_year(self, client: TestClient, vehicle_payload: dict[str, Any]):
        resp = client.post("/api/vehicles", json={**vehicle_payload, "year": "two thousand"})
        assert resp.status_code == 400
        assert "error" in resp.json()
        assert _count(client) == 0

    @pytest.mark.parametrize("year", [-2003, 0, True, 1999.5])
    def test_year_must_be_positive_integer(self, client: TestClient, vehicle_payload: dict[str, Any], year):
        resp = client.post("/api/vehicles", json={**vehicle_payload, "year": year})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid request body"}
        assert _count(client) == 0

    def test_onchain_at_must_be_a_timestamp(self, client: TestClient, vehicle_payload: dict[str, Any]):
        resp = client.post("/api/vehicles", json={**vehicle_payload, "onchainAt": "yesterday"})
        assert resp.status_code == 400
        assert _count(client) == 0

    def test_non_object_body(self, client: TestClient):
        resp = client.post("/api/vehicles", json=["not", "an", "object"])
        assert resp.status_code == 400
        assert _count(client) == 0


class TestReadVehicles:
    def test_get_unknown(self, client: TestClient):
        resp = client.get("/api/vehicles/UNKNOWNVIN")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Vehicle not found"}

    def test_list_is_summary(self, client: TestClient, vehicle_payload: dict[str, Any]):
        client.post("/api/vehicles", json={**vehicle_payload, "metadata": {"color": "silver"}})
        client.post(
            "/api/vehicles",
            json={"vin": "JH4KA8260MC000000", "make": "Acura", "model": "Legend", "year": 1991,
                  "ownerAddress": "1BoatSLRHtKNngkdXEeobR76b53LETtpyT", "tokenId": "token-1002"},
        )
        resp = client.get("/api/vehicles")
        assert resp.status_code == 200
        assert resp.json() == [
            {"vin": VIN, "make": "Honda", "model": "Accord", "year": 2003,
             "ownerAddress": "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa", "tokenId": None},
            {"vin": "JH4KA8260MC000000", "make": "Acura", "model": "Legend", "year": 1991,
             "ownerAddress": "1BoatSLRHtKNngkdXEeobR76b53LETtpyT", "tokenId": "token-1002"},
        ]

    def test_list_empty(self, client: TestClient):
        assert client.get("/api/vehicles").json() == []

    def test_storage_failure_hides_details(self, client: TestClient, monkeypatch):
        def broken():
            raise sqlite3.OperationalError("disk I/O error at page 42")

        monkeypatch.setattr(client.app.state.store, "list_vehicles", broken)
        resp = client.get("/api/vehicles")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to list vehicles"}


class TestAmbient:
    def test_health(self, client: TestClient):
        assert client.get("/api/health").json() == {"status": "healthy", "api": "online", "database": "online"}

    def test_cors_preflight(self, client: TestClient):
        resp = client.options(
            "/api/vehicles",
            headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "POST"},
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "http://localhost:5173"
