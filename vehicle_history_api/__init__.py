"""Vehicle ownership and service history backend (FastAPI over SQLite)."""
