"""Base model for plantsensor records.

Every record model inherits from :class:`PlantBaseModel` which provides:

* ``alias_generator=to_camel`` so records serialise with lowerCamelCase
  keys (``trayId``) when dumped ``by_alias``.
* ``populate_by_name=True`` so the remote sources' snake_case keys
  (``tray_id``) validate as well as camelCase ones.
* Frozen instances: a fetched or combined record is never mutated, an
  upsert replaces it.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]
"""Datetime that is always timezone-aware in UTC."""


class PlantBaseModel(BaseModel):
    """Base for all plantsensor records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
