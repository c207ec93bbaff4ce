"""
Pydantic models for vehicle records.

``VehicleCreate`` is the request body of ``POST /api/vehicles``.  All
of its fields are optional at the schema level: which of them are
required is decided by ``VehicleService`` so that a missing key, an
explicit ``null`` and an empty string are all rejected the same way.
``VehicleRead`` is the full stored record, ``VehicleSummary`` the
lighter projection returned by the list endpoint.
"""

from typing import Any, Dict, Optional

from pydantic import Field, StrictInt, field_validator

from .base import CamelModel, CreatePayload, check_timestamp


class VehicleCreate(CreatePayload):
    vin: Optional[str] = Field(None, examples=["1HGCM82633A004352"])
    make: Optional[str] = Field(None, examples=["Honda"])
    model: Optional[str] = Field(None, examples=["Accord"])
    year: Optional[StrictInt] = Field(None, gt=0, examples=[2003])
    current_mileage: Optional[int] = Field(None, ge=0, examples=[152345])
    owner_address: Optional[str] = Field(None, examples=["1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"])
    metadata: Optional[Dict[str, Any]] = Field(None, examples=[{"color": "silver"}])
    token_id: Optional[str] = Field(None, description="External anchoring reference, stored as given")
    onchain_at: Optional[str] = Field(None, description="When the anchoring reference was created")
    vehicle_hash: Optional[str] = Field(None, description="Caller-computed digest of the submitted data")

    @field_validator("onchain_at")
    @classmethod
    def onchain_at_is_timestamp(cls, value: Optional[str]) -> Optional[str]:
        return check_timestamp(value)


class VehicleSummary(CamelModel):
    """Projection used by ``GET /api/vehicles``."""

    vin: str
    make: str
    model: str
    year: int
    owner_address: str
    token_id: Optional[str] = None


class VehicleRead(CamelModel):
    """A vehicle as stored."""

    id: int
    vin: str
    make: str
    model: str
    year: int
    current_mileage: Optional[int] = None
    owner_address: str
    token_id: Optional[str] = None
    onchain_tx: Optional[str] = None
    onchain_at: Optional[str] = None
    onchain_error: Optional[str] = None
    vehicle_hash: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: str
    last_updated: str
