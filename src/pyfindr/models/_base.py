"""Base model shared by pyfindr records.

Every record is a frozen pydantic model: decoded reports are values,
never entities, so nothing downstream can mutate a report after the
decoder produced it.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]
"""Datetime coerced to an aware UTC value."""


class FindrBaseModel(BaseModel):
    """Base for pyfindr records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible dict of the record."""
        return self.model_dump(mode="json")
