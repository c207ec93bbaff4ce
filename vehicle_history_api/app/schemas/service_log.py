"""
Pydantic models for service log entries.

Numeric and date fields are coerced here: ``mileage`` accepts integers
or numeric strings, ``cost`` any non-negative number, and
``serviceDate`` either a full ISO timestamp or a bare ``YYYY-MM-DD``
date (read as midnight UTC).  ``onchainAt`` must parse as a timestamp
but is kept as sent.  Required fields are enforced by
``ServiceLogService``.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .base import CamelModel, CreatePayload, check_timestamp


class ServiceLogCreate(CreatePayload):
    service_type: Optional[str] = Field(None, examples=["Oil change"])
    service_date: Optional[datetime] = Field(None, examples=["2024-03-15"])
    mileage: Optional[int] = Field(None, ge=0, examples=[152000])
    description: Optional[str] = Field(None, examples=["Synthetic 5W-30, new filter"])
    cost: Optional[float] = Field(None, ge=0, examples=[89.99])
    receipt_url: Optional[str] = None
    txid: Optional[str] = Field(None, description="External anchoring reference, stored as given")
    onchain_at: Optional[str] = None
    log_hash: Optional[str] = Field(None, description="Caller-computed digest of the log data")

    @field_validator("onchain_at")
    @classmethod
    def onchain_at_is_timestamp(cls, value: Optional[str]) -> Optional[str]:
        return check_timestamp(value)


class ServiceLogRead(CamelModel):
    """A service log as stored.  Logs are never updated or deleted."""

    id: int
    vehicle_vin: str
    service_type: str
    service_date: str
    mileage: int
    description: str
    cost: Optional[float] = None
    receipt_url: Optional[str] = None
    txid: Optional[str] = None
    onchain_at: Optional[str] = None
    log_hash: Optional[str] = None
    created_at: str
