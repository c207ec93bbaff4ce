"""
HTTP layer.

``router`` aggregates the domain routers; ``deps`` builds services for
each request from the store attached to the application state.
"""
