#!/usr/bin/env python3
"""
Seed the vehicles table with a few sample records.

Each sample is upserted by VIN: missing vehicles are inserted, existing
ones are overwritten with the sample values.  This is the only place
that upserts; the API itself refuses duplicate VINs.

Usage:
    python seed_vehicles.py [database_path]

If no path is given, ``DATABASE_URL`` (or its default) is used.
"""

import argparse
import logging
import sqlite3
import sys
from typing import Iterable, List, Optional

from vehicle_history_api.app.core.config import settings
from vehicle_history_api.app.core.db import RecordStore
from vehicle_history_api.app.core.logging_config import setup_logging

logger = logging.getLogger("seed_vehicles")

SAMPLE_VEHICLES: List[dict] = [
    {
        "vin": "1HGCM82633A004352",
        "make": "Honda",
        "model": "Accord",
        "year": 2003,
        "current_mileage": 152345,
        "owner_address": "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa",
        "token_id": "token-1001",
        "metadata": {"color": "silver", "notes": "Regular maintenance"},
    },
    {
        "vin": "JH4KA8260MC000000",
        "make": "Acura",
        "model": "Legend",
        "year": 1991,
        "current_mileage": 234000,
        "owner_address": "1BoatSLRHtKNngkdXEeobR76b53LETtpyT",
        "token_id": "token-1002",
        "metadata": {"color": "black", "notes": "Classic, restored interior"},
    },
    {
        "vin": "WDBJF65JYXA000000",
        "make": "Mercedes-Benz",
        "model": "E320",
        "year": 1999,
        "current_mileage": 189500,
        "owner_address": "1dice8EMZmqKvrGE4Qc9bUFf9PX3xaYDp",
        "token_id": "token-1003",
        "metadata": {"color": "blue", "notes": "Imported"},
    },
    {
        "vin": "3FAFP31381R000000",
        "make": "Ford",
        "model": "Focus",
        "year": 2008,
        "current_mileage": 98000,
        "owner_address": "1BsBN8BvjvrjJUC43Ui6KwuLXW8yTWuimn",
        "token_id": "token-1004",
        "metadata": {"color": "white", "notes": "Fleet vehicle"},
    },
    {
        "vin": "5YJ3E1EA7KF000000",
        "make": "Tesla",
        "model": "Model 3",
        "year": 2019,
        "current_mileage": 42000,
        "owner_address": "1BsBN8BvjvrjJUC43Ui6KwuLXW8yTWuimn",
        "token_id": "token-1005",
        "metadata": {"color": "red", "notes": "EV, battery health good"},
    },
]


def seed(store: RecordStore, vehicles: Iterable[dict] = SAMPLE_VEHICLES) -> int:
    """Upsert ``vehicles`` into ``store`` and return the resulting count."""
    for vehicle in vehicles:
        if store.upsert_vehicle(vehicle):
            logger.info("Inserted vehicle VIN=%s", vehicle["vin"])
        else:
            logger.info("Updated vehicle VIN=%s", vehicle["vin"])
    count = store.count_vehicles()
    logger.info("Vehicles table now has %s records.", count)
    return count


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Seed sample vehicles into the vehicle history database.")
    ap.add_argument("database", nargs="?", default=settings.database_url, help="Path to the SQLite database")
    args = ap.parse_args(argv)

    setup_logging(settings.log_level)
    store = RecordStore(args.database)
    logger.info("Using database: %s", store.database_path)
    try:
        with store:
            seed(store)
    except sqlite3.Error:
        logger.exception("Failed to seed vehicles")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
