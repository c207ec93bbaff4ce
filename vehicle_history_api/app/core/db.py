"""
SQLite record store and simple migration system.

``RecordStore`` owns the single database connection used by the
process.  It is created and connected when the application starts,
handed to every service that needs it, and closed on shutdown.  All
SQL lives here; services only see plain dictionaries keyed by column
name.

Uniqueness of a vehicle's VIN is enforced by the ``UNIQUE`` constraint
on ``vehicles.vin``.  Services may check for an existing record first
but the constraint is what actually guarantees a single row per VIN:
a rejected insert surfaces as ``DuplicateKeyError``.

Migrations are stored as ``(version, sql)`` pairs.  Applied versions
are recorded in the ``migrations`` table and new ones run in order on
``connect``.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

MIGRATIONS: list[tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS vehicles (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            vin TEXT NOT NULL UNIQUE,
            make TEXT NOT NULL,
            model TEXT NOT NULL,
            year INTEGER NOT NULL,
            current_mileage INTEGER,
            owner_address TEXT NOT NULL,
            token_id TEXT,
            onchain_tx TEXT,
            onchain_at TEXT,
            onchain_error TEXT,
            vehicle_hash TEXT,
            metadata TEXT NOT NULL DEFAULT '{}',
            created_at TEXT NOT NULL,
            last_updated TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS service_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            vehicle_vin TEXT NOT NULL,
            service_type TEXT NOT NULL,
            service_date TEXT NOT NULL,
            mileage INTEGER NOT NULL,
            description TEXT NOT NULL,
            cost REAL,
            receipt_url TEXT,
            txid TEXT,
            onchain_at TEXT,
            log_hash TEXT,
            created_at TEXT NOT NULL,
            FOREIGN KEY(vehicle_vin) REFERENCES vehicles(vin)
        );

        CREATE INDEX IF NOT EXISTS idx_service_logs_vin_date
            ON service_logs (vehicle_vin, service_date);
        """,
    ),
]

VEHICLE_COLUMNS = (
    "vin",
    "make",
    "model",
    "year",
    "current_mileage",
    "owner_address",
    "token_id",
    "onchain_tx",
    "onchain_at",
    "onchain_error",
    "vehicle_hash",
    "metadata",
    "created_at",
    "last_updated",
)

LOG_COLUMNS = (
    "vehicle_vin",
    "service_type",
    "service_date",
    "mileage",
    "description",
    "cost",
    "receipt_url",
    "txid",
    "onchain_at",
    "log_hash",
    "created_at",
)


class StoreError(Exception):
    """Base class for classified storage failures."""


class DuplicateKeyError(StoreError):
    """A unique constraint rejected the insert."""


class MissingReferenceError(StoreError):
    """A foreign key points at a record that does not exist."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render ``value`` as a fixed-width UTC string.

    Every stored timestamp uses the same layout so that ordering by the
    text column is chronological.  Naive datetimes are taken as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def resolve_database_path(database_url: str) -> str:
    """Return an absolute path for ``database_url``.

    Absolute paths and ``:memory:`` are returned unchanged; relative
    paths are resolved against the project root.
    """
    if database_url == MEMORY_DATABASE or os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parents[3]
    return str((base_dir / database_url).resolve())


class RecordStore:
    """Vehicle and service-log storage backed by one SQLite connection."""

    def __init__(self, database_url: str) -> None:
        self.database_path = resolve_database_path(database_url)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def connect(self) -> "RecordStore":
        """Open the connection and apply pending migrations."""
        if self._conn is not None:
            return self
        if self.database_path != MEMORY_DATABASE:
            Path(self.database_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.database_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        self._conn = conn
        self._migrate()
        logger.info("Connected to SQLite database: %s", self.database_path)
        return self

    def close(self) -> None:
        if self._conn is None:
            return
        with self._lock:
            self._conn.close()
            self._conn = None
        logger.info("Closed database connection")

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("RecordStore is not connected")
        return self._conn

    def __enter__(self) -> "RecordStore":
        return self.connect()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _migrate(self) -> None:
        conn = self.connection
        with self._lock:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS migrations (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL
                )
                """
            )
            applied = {row["version"] for row in conn.execute("SELECT version FROM migrations")}
            for version, sql in MIGRATIONS:
                if version in applied:
                    continue
                conn.executescript(sql)
                conn.execute(
                    "INSERT INTO migrations (version, applied_at) VALUES (?, ?)",
                    (version, format_timestamp(utcnow())),
                )
                conn.commit()
                logger.info("Applied migration %s", version)

    def ping(self) -> bool:
        with self._lock:
            self.connection.execute("SELECT 1").fetchone()
        return True

    # ------------------------------------------------------------------
    # Vehicles
    # ------------------------------------------------------------------

    def insert_vehicle(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a vehicle row and return it as stored.

        Raises ``DuplicateKeyError`` if a row with the same VIN exists.
        """
        values = _vehicle_values(record)
        placeholders = ", ".join("?" for _ in VEHICLE_COLUMNS)
        conn = self.connection
        with self._lock:
            try:
                with conn:
                    conn.execute(
                        f"INSERT INTO vehicles ({', '.join(VEHICLE_COLUMNS)}) VALUES ({placeholders})",
                        values,
                    )
            except sqlite3.IntegrityError as exc:
                if "UNIQUE" in str(exc):
                    raise DuplicateKeyError(record["vin"]) from exc
                raise
            row = conn.execute("SELECT * FROM vehicles WHERE vin = ?", (record["vin"],)).fetchone()
        return _vehicle_from_row(row)

    def upsert_vehicle(self, record: Dict[str, Any]) -> bool:
        """Insert or overwrite a vehicle by VIN.

        ``last_updated`` is refreshed on every call, ``created_at`` is only
        set when the row is inserted.  Returns ``True`` when a new row was
        created.  Used by the seeding utility; the API never upserts.
        """
        now = format_timestamp(utcnow())
        merged = dict(record)
        merged.setdefault("created_at", now)
        merged["last_updated"] = now
        values = _vehicle_values(merged)
        update_columns = [c for c in VEHICLE_COLUMNS if c not in {"vin", "created_at"}]
        conn = self.connection
        with self._lock:
            with conn:
                exists = conn.execute("SELECT 1 FROM vehicles WHERE vin = ?", (record["vin"],)).fetchone()
                conn.execute(
                    f"""
                    INSERT INTO vehicles ({', '.join(VEHICLE_COLUMNS)})
                    VALUES ({', '.join('?' for _ in VEHICLE_COLUMNS)})
                    ON CONFLICT(vin) DO UPDATE SET
                    {', '.join(f'{c} = excluded.{c}' for c in update_columns)}
                    """,
                    values,
                )
        return exists is None

    def find_vehicle(self, vin: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self.connection.execute("SELECT * FROM vehicles WHERE vin = ?", (vin,)).fetchone()
        return _vehicle_from_row(row) if row else None

    def list_vehicles(self) -> List[Dict[str, Any]]:
        with self._lock:
            rows = self.connection.execute("SELECT * FROM vehicles ORDER BY id ASC").fetchall()
        return [_vehicle_from_row(row) for row in rows]

    def count_vehicles(self) -> int:
        with self._lock:
            return self.connection.execute("SELECT COUNT(*) FROM vehicles").fetchone()[0]

    # ------------------------------------------------------------------
    # Service logs (append-only)
    # ------------------------------------------------------------------

    def insert_log(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Append a service log and return it as stored.

        Raises ``MissingReferenceError`` when ``vehicle_vin`` does not name
        an existing vehicle.
        """
        values = tuple(record.get(column) for column in LOG_COLUMNS)
        conn = self.connection
        with self._lock:
            try:
                with conn:
                    cursor = conn.execute(
                        f"INSERT INTO service_logs ({', '.join(LOG_COLUMNS)}) "
                        f"VALUES ({', '.join('?' for _ in LOG_COLUMNS)})",
                        values,
                    )
            except sqlite3.IntegrityError as exc:
                if "FOREIGN KEY" in str(exc):
                    raise MissingReferenceError(record["vehicle_vin"]) from exc
                raise
            row = conn.execute("SELECT * FROM service_logs WHERE id = ?", (cursor.lastrowid,)).fetchone()
        return dict(row)

    def list_logs(self, vin: str) -> List[Dict[str, Any]]:
        """Return the logs of ``vin``, newest service date first.

        Logs sharing a service date keep their insertion order.
        """
        with self._lock:
            rows = self.connection.execute(
                "SELECT * FROM service_logs WHERE vehicle_vin = ? ORDER BY service_date DESC, id ASC",
                (vin,),
            ).fetchall()
        return [dict(row) for row in rows]

    def count_logs(self, vin: Optional[str] = None) -> int:
        with self._lock:
            if vin is None:
                return self.connection.execute("SELECT COUNT(*) FROM service_logs").fetchone()[0]
            return self.connection.execute(
                "SELECT COUNT(*) FROM service_logs WHERE vehicle_vin = ?", (vin,)
            ).fetchone()[0]


def _vehicle_values(record: Dict[str, Any]) -> tuple:
    values = []
    for column in VEHICLE_COLUMNS:
        value = record.get(column)
        if column == "metadata":
            value = json.dumps(value or {})
        values.append(value)
    return tuple(values)


def _vehicle_from_row(row: sqlite3.Row) -> Dict[str, Any]:
    record = dict(row)
    try:
        record["metadata"] = json.loads(record["metadata"]) if record["metadata"] else {}
    except (TypeError, json.JSONDecodeError):
        logger.warning("Discarding unreadable metadata for VIN %s", record.get("vin"))
        record["metadata"] = {}
    return record
