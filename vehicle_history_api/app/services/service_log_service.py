"""
Business logic for service logs.

Service logs are append-only maintenance entries attached to a vehicle
by VIN.  They can be created and listed; nothing updates or removes
them.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import List

from ..core.db import MissingReferenceError, RecordStore, format_timestamp, utcnow
from ..core.errors import InternalError, NotFoundError, ValidationError
from ..schemas.service_log import ServiceLogCreate, ServiceLogRead

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("service_type", "service_date", "mileage", "description")


class ServiceLogService:
    """Service for appending and listing service logs."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def create_log(self, vin: str, data: ServiceLogCreate) -> ServiceLogRead:
        """Append a log entry for the vehicle ``vin``.

        ``mileage`` of zero is a valid reading; only an absent value is
        rejected.  Raises ``ValidationError`` for missing fields and
        ``NotFoundError`` when no vehicle has this VIN.
        """
        missing = [name for name in REQUIRED_FIELDS if getattr(data, name) is None]
        if missing:
            logger.info("Rejected service log for %s, missing %s", vin, ", ".join(missing))
            raise ValidationError("Missing required fields")

        try:
            if self.store.find_vehicle(vin) is None:
                raise NotFoundError("Vehicle not found")
            stored = self.store.insert_log(
                {
                    "vehicle_vin": vin,
                    "service_type": data.service_type,
                    "service_date": format_timestamp(data.service_date),
                    "mileage": int(data.mileage),
                    "description": data.description,
                    "cost": float(data.cost) if data.cost is not None else None,
                    "receipt_url": data.receipt_url,
                    "txid": data.txid,
                    "onchain_at": data.onchain_at,
                    "log_hash": data.log_hash,
                    "created_at": format_timestamp(utcnow()),
                }
            )
        except MissingReferenceError as exc:
            raise NotFoundError("Vehicle not found") from exc
        except sqlite3.Error as exc:
            logger.exception("Failed to create service log for %s", vin)
            raise InternalError("Failed to create service log") from exc

        logger.info("Added %s log for %s (txid %s)", data.service_type, vin, data.txid)
        return ServiceLogRead.model_validate(stored)

    async def list_logs(self, vin: str) -> List[ServiceLogRead]:
        """Return all logs for ``vin`` by service date, newest first."""
        try:
            records = self.store.list_logs(vin)
        except sqlite3.Error as exc:
            logger.exception("Failed to list service logs for %s", vin)
            raise InternalError("Failed to list service logs") from exc
        return [ServiceLogRead.model_validate(record) for record in records]
