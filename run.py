"""Entry point for serving the Vehicle History API.

Host, port and the rest of the configuration come from environment
variables (see ``vehicle_history_api.app.core.config``).  The default
port is 4001, which is where the frontend expects the backend.

Usage:
    python run.py
"""
import logging

from uvicorn import Config, Server

from vehicle_history_api.app.core.config import settings
from vehicle_history_api.app.main import app


def main() -> None:
    """Serve the API with Uvicorn until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info("Backend API listening on http://localhost:%s", settings.port)
    server.run()


if __name__ == "__main__":
    main()
