"""Shared pydantic configuration for API schemas."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

_TIMESTAMP = TypeAdapter(datetime)


def check_timestamp(value: Optional[str]) -> Optional[str]:
    """Ensure ``value`` parses as an ISO timestamp and return it unchanged.

    Anchoring timestamps are stored exactly as the client sent them
    (e.g. the millisecond ``toISOString()`` form).
    """
    if value is None:
        return None
    try:
        _TIMESTAMP.validate_python(value)
    except ValueError:
        raise ValueError(f"Invalid timestamp: {value!r}") from None
    return value


class CamelModel(BaseModel):
    """Model whose JSON keys are the camelCase form of its attributes.

    Both the alias (``ownerAddress``) and the attribute name
    (``owner_address``) are accepted on input; output uses the alias.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreatePayload(CamelModel):
    """Base for request bodies of create operations.

    Blank strings are treated as absent so that required-field checks in
    the services see ``None`` for them.
    """

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value
