"""Tests for ServiceLogService: references, coercion, ordering."""

from __future__ import annotations

import asyncio

import pytest
from pydantic import ValidationError as SchemaValidationError

from vehicle_history_api.app.core.db import RecordStore
from vehicle_history_api.app.core.errors import NotFoundError, ValidationError
from vehicle_history_api.app.schemas.service_log import ServiceLogCreate
from vehicle_history_api.app.schemas.vehicle import VehicleCreate
from vehicle_history_api.app.services.service_log_service import ServiceLogService
from vehicle_history_api.app.services.vehicle_service import VehicleService

VIN = "JH4KA8260MC000000"


def _log(**overrides) -> ServiceLogCreate:
    data = {
        "serviceType": "Brake pads",
        "serviceDate": "2024-04-10",
        "mileage": 233000,
        "description": "Front pads replaced",
    }
    data.update(overrides)
    return ServiceLogCreate.model_validate(data)


@pytest.fixture
def service(store: RecordStore) -> ServiceLogService:
    vehicle = VehicleCreate(vin=VIN, make="Acura", model="Legend", year=1991, owner_address="owner")
    asyncio.run(VehicleService(store).create_vehicle(vehicle))
    return ServiceLogService(store)


class TestCreateLog:
    def test_create_and_normalise(self, service: ServiceLogService):
        log = asyncio.run(service.create_log(VIN, _log(mileage="233000", cost="120.5", txid="tx-1",
                                                       onchainAt="2024-04-10T08:30:00+02:00")))
        assert log.vehicle_vin == VIN
        assert log.mileage == 233000
        assert log.cost == 120.5
        assert log.service_date == "2024-04-10T00:00:00.000000Z"
        assert log.onchain_at == "2024-04-10T08:30:00+02:00"
        assert log.txid == "tx-1"
        assert log.receipt_url is None
        assert log.created_at

    def test_zero_mileage_is_accepted(self, service: ServiceLogService):
        log = asyncio.run(service.create_log(VIN, _log(mileage=0)))
        assert log.mileage == 0

    @pytest.mark.parametrize("field", ["serviceType", "serviceDate", "mileage", "description"])
    def test_missing_required_field(self, service: ServiceLogService, store: RecordStore, field: str):
        with pytest.raises(ValidationError):
            asyncio.run(service.create_log(VIN, _log(**{field: None})))
        assert store.count_logs() == 0

    def test_unknown_vehicle(self, service: ServiceLogService, store: RecordStore):
        with pytest.raises(NotFoundError, match="Vehicle not found"):
            asyncio.run(service.create_log("UNKNOWNVIN", _log()))
        assert store.count_logs() == 0

    def test_negative_mileage_rejected_by_schema(self):
        with pytest.raises(SchemaValidationError):
            _log(mileage=-5)


class TestListLogs:
    def test_newest_service_date_first(self, service: ServiceLogService):
        for day in ("2023-06-01", "2024-01-15", "2022-11-30"):
            asyncio.run(service.create_log(VIN, _log(serviceDate=day)))
        logs = asyncio.run(service.list_logs(VIN))
        assert [log.service_date[:10] for log in logs] == ["2024-01-15", "2023-06-01", "2022-11-30"]

    def test_unknown_vin_has_no_logs(self, service: ServiceLogService):
        assert asyncio.run(service.list_logs("UNKNOWNVIN")) == []
