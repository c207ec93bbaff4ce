"""
Endpoint modules.

Each module defines an ``APIRouter`` for one domain.  They are
aggregated in ``api/router.py`` and mounted under ``/api``.
"""
