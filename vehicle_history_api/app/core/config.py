"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so that
the API runs locally against a SQLite file next to the project with no
setup.  Tests build their own ``Settings`` instance and pass it to
``create_app``.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Vehicle History API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "4001"))

    # Path to the SQLite database.  A relative path is resolved against
    # the project root by ``core.db``; ``:memory:`` keeps everything in
    # process memory.
    database_url: str = os.getenv("DATABASE_URL", "vehicle_history.db")

    # Origin of the single-page frontend.  The Vite dev server runs on
    # port 5173 by default.
    allow_origin: str = os.getenv("ALLOW_ORIGIN", "http://localhost:5173")

    # Optional external minting service.  When set, vehicles created
    # without a ``tokenId`` are sent there and the returned reference is
    # stored.  Failures never block the create.
    token_mint_endpoint: Optional[str] = os.getenv("TOKEN_MINT_ENDPOINT") or None
    token_mint_key: Optional[str] = os.getenv("TOKEN_MINT_KEY") or None
    token_mint_timeout: float = float(os.getenv("TOKEN_MINT_TIMEOUT", "10"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
