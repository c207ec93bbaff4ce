"""
FastAPI dependencies that hand services to the route handlers.

The ``RecordStore`` (and the optional ``MintClient``) are created once
at startup and attached to ``app.state``; services are cheap wrappers
built per request around them.
"""

from typing import Optional

from fastapi import Depends, Request

from ..core.db import RecordStore
from ..services.mint_client import MintClient
from ..services.service_log_service import ServiceLogService
from ..services.vehicle_service import VehicleService


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_mint_client(request: Request) -> Optional[MintClient]:
    return getattr(request.app.state, "mint_client", None)


def get_vehicle_service(
    store: RecordStore = Depends(get_store),
    mint_client: Optional[MintClient] = Depends(get_mint_client),
) -> VehicleService:
    return VehicleService(store, mint_client)


def get_service_log_service(store: RecordStore = Depends(get_store)) -> ServiceLogService:
    return ServiceLogService(store)
