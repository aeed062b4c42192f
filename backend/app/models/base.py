from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


def created_at_field() -> Any:
    """Factory for created_at so every record gets its own timestamp."""
    return Field(default_factory=utc_now)


def updated_at_field() -> Any:
    """Factory for updated_at; starts equal to the moment of creation."""
    return Field(default_factory=utc_now)


class CamelModel(BaseModel):
    """Base for everything that crosses the wire.

    Fields are snake_case in Python and camelCase in JSON; either spelling is
    accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class BaseRecord(CamelModel):
    """Base record with string id and timestamps."""

    id: str

    created_at: datetime = created_at_field()
    updated_at: datetime = updated_at_field()
