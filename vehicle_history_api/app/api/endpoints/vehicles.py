"""
Vehicle endpoints.

Vehicles can be listed, fetched by VIN and created.  There is no
authentication: ``ownerAddress`` is stored exactly as the client sends
it.  Errors are raised by ``VehicleService`` and turned into
``{"error": ...}`` responses by the handlers in ``core.errors``.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from ...schemas.vehicle import VehicleCreate, VehicleRead, VehicleSummary
from ...services.vehicle_service import VehicleService
from ..deps import get_vehicle_service

router = APIRouter()


@router.get("", response_model=List[VehicleSummary])
async def list_vehicles(service: VehicleService = Depends(get_vehicle_service)) -> List[VehicleSummary]:
    """List all vehicles as summaries (no metadata)."""
    return await service.list_vehicles()


@router.get("/{vin}", response_model=VehicleRead)
async def get_vehicle(vin: str, service: VehicleService = Depends(get_vehicle_service)) -> VehicleRead:
    """Return the full record for ``vin``; 404 if there is none."""
    return await service.get_vehicle(vin)


@router.post("", response_model=VehicleRead, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle_in: VehicleCreate,
    service: VehicleService = Depends(get_vehicle_service),
) -> VehicleRead:
    """Create a vehicle.

    Responds 400 when ``vin``, ``make``, ``model``, ``year`` or
    ``ownerAddress`` is missing and 409 when the VIN is taken.
    """
    return await service.create_vehicle(vehicle_in)
