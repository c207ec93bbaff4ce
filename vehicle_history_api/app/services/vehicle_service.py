"""
Business logic for vehicle records.

A vehicle is created once and then only read; there is no update or
delete operation.  ``create_vehicle`` validates the required fields
before touching storage so that a rejected request never leaves a
partial record behind.

The VIN pre-check only saves a round trip for the common duplicate
case.  Two concurrent creates for the same VIN can both pass it; the
unique index on ``vehicles.vin`` rejects the second insert and that
rejection is reported as the same conflict.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import List, Optional

from starlette.concurrency import run_in_threadpool

from ..core.db import DuplicateKeyError, RecordStore, format_timestamp, utcnow
from ..core.errors import ConflictError, InternalError, NotFoundError, ValidationError
from ..schemas.vehicle import VehicleCreate, VehicleRead, VehicleSummary
from .mint_client import MintClient

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("vin", "make", "model", "year", "owner_address")


class VehicleService:
    """Service for creating and reading vehicles."""

    def __init__(self, store: RecordStore, mint_client: Optional[MintClient] = None) -> None:
        self.store = store
        self.mint_client = mint_client

    async def create_vehicle(self, data: VehicleCreate) -> VehicleRead:
        """Validate and store a new vehicle, returning the stored record.

        Raises
        ------
        ValidationError
            A required field is missing or empty.
        ConflictError
            A vehicle with the same VIN already exists.
        InternalError
            The insert failed for any other reason.
        """
        missing = [name for name in REQUIRED_FIELDS if not getattr(data, name)]
        if missing:
            logger.info("Rejected vehicle create, missing %s", ", ".join(missing))
            raise ValidationError("Missing required fields")

        try:
            if self.store.find_vehicle(data.vin) is not None:
                raise ConflictError("VIN already exists")

            now = format_timestamp(utcnow())
            record = {
                "vin": data.vin,
                "make": data.make,
                "model": data.model,
                "year": data.year,
                "current_mileage": data.current_mileage,
                "owner_address": data.owner_address,
                "token_id": data.token_id,
                "onchain_tx": None,
                "onchain_at": data.onchain_at,
                "onchain_error": None,
                "vehicle_hash": data.vehicle_hash,
                "metadata": data.metadata or {},
                "created_at": now,
                "last_updated": now,
            }
            if self.mint_client is not None and not record["token_id"]:
                await self._mint(record)

            stored = self.store.insert_vehicle(record)
        except DuplicateKeyError as exc:
            logger.warning(
                "Concurrent create for VIN %s rejected by unique index (discarded token %s, tx %s)",
                data.vin,
                record["token_id"],
                record["onchain_tx"],
            )
            raise ConflictError("VIN already exists") from exc
        except sqlite3.Error as exc:
            logger.exception("Failed to create vehicle %s", data.vin)
            raise InternalError("Failed to create vehicle") from exc

        logger.info("Created vehicle %s (%s %s %s)", data.vin, data.year, data.make, data.model)
        return VehicleRead.model_validate(stored)

    async def _mint(self, record: dict) -> None:
        # requests blocks; keep the event loop free while the mint call runs.
        result = await run_in_threadpool(
            self.mint_client.mint, record["vin"], record["metadata"], record["owner_address"]
        )
        if result.ok:
            record["token_id"] = result.token_id
            record["onchain_tx"] = result.txid
            record["onchain_at"] = format_timestamp(utcnow())
        else:
            record["onchain_error"] = result.error

    async def get_vehicle(self, vin: str) -> VehicleRead:
        """Return the vehicle with ``vin`` or raise ``NotFoundError``."""
        try:
            record = self.store.find_vehicle(vin)
        except sqlite3.Error as exc:
            logger.exception("Failed to get vehicle %s", vin)
            raise InternalError("Failed to get vehicle") from exc
        if record is None:
            raise NotFoundError("Vehicle not found")
        return VehicleRead.model_validate(record)

    async def list_vehicles(self) -> List[VehicleSummary]:
        """Return every vehicle as a summary, oldest first.

        Metadata and anchoring details are left out to keep the payload
        small; fetch a single vehicle for the full record.
        """
        try:
            records = self.store.list_vehicles()
        except sqlite3.Error as exc:
            logger.exception("Failed to list vehicles")
            raise InternalError("Failed to list vehicles") from exc
        return [VehicleSummary.model_validate(record) for record in records]
