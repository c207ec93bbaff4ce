"""
Top‑level API router.

Aggregates the domain routers; ``create_app`` mounts the result under
``/api``.  Service-log routes are nested under a vehicle's VIN so they
share the ``/vehicles`` prefix.
"""

from fastapi import APIRouter

from .endpoints import health, service_logs, vehicles

router = APIRouter()

router.include_router(vehicles.router, prefix="/vehicles", tags=["vehicles"])
router.include_router(service_logs.router, prefix="/vehicles", tags=["service logs"])
router.include_router(health.router, prefix="/health", tags=["health"])
