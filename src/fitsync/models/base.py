"""Shared base for domain models."""

import uuid
from datetime import datetime, timezone
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate a new record ID."""
    return str(uuid.uuid4())


class DomainModel(BaseModel):
    """Base for persisted entities.

    Fields are snake_case in Python and in the database; the plain
    (exported) form uses camelCase keys.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("*")
    @classmethod
    def _assume_utc(cls, value: Any) -> Any:
        """Normalize timestamps to aware UTC; naive values are taken as UTC."""
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        return value

    @classmethod
    def hydrate(cls, plain: dict[str, Any]) -> Self:
        """Build a model from its plain (exported) representation.

        Raises:
            pydantic.ValidationError: If the record does not match the schema
        """
        return cls.model_validate(plain)

    def to_plain(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
