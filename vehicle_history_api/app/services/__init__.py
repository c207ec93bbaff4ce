"""
Service layer abstraction.

Each service encapsulates the business rules for a domain and talks to
storage only through the ``RecordStore`` it is constructed with.
"""
