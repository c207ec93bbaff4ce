"""Health check reporting API and database status."""

import logging
import sqlite3
from typing import Dict

from fastapi import APIRouter, Depends

from ...core.db import RecordStore
from ..deps import get_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def health_check(store: RecordStore = Depends(get_store)) -> Dict[str, str]:
    health_status = {"status": "healthy", "api": "online", "database": "online"}
    try:
        store.ping()
    except (sqlite3.Error, RuntimeError) as exc:
        logger.warning("Health check failed: %s", exc)
        health_status["database"] = "offline"
        health_status["status"] = "unhealthy"
    return health_status
