"""
Application package initializer.

The backend keeps vehicle ownership records and their service history.
Each domain (vehicles, service logs) has its own schema module, service
class and router in ``api/endpoints``.  Storage lives behind the
``RecordStore`` in ``core.db`` which is handed to each service
explicitly rather than imported as global state.
"""
