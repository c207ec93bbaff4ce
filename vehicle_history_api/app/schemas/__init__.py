"""
Pydantic schema definitions for API payloads.

Request bodies and responses use the camelCase field names the
frontend sends (``ownerAddress``, ``serviceDate``...).  Python code
works with snake_case attributes; aliases are generated automatically.
"""
