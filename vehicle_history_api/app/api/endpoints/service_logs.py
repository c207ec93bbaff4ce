"""
Service log endpoints, nested under ``/vehicles/{vin}/logs``.

Logs are append-only: the API offers create and list, nothing else.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from ...schemas.service_log import ServiceLogCreate, ServiceLogRead
from ...services.service_log_service import ServiceLogService
from ..deps import get_service_log_service

router = APIRouter()


@router.get("/{vin}/logs", response_model=List[ServiceLogRead])
async def list_logs(
    vin: str,
    service: ServiceLogService = Depends(get_service_log_service),
) -> List[ServiceLogRead]:
    """List the logs of ``vin`` by service date, newest first.

    An unknown VIN simply has no logs and yields an empty list.
    """
    return await service.list_logs(vin)


@router.post("/{vin}/logs", response_model=ServiceLogRead, status_code=status.HTTP_201_CREATED)
async def create_log(
    vin: str,
    log_in: ServiceLogCreate,
    service: ServiceLogService = Depends(get_service_log_service),
) -> ServiceLogRead:
    """Append a service log; 404 if the vehicle does not exist."""
    return await service.create_log(vin, log_in)
