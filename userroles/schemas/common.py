"""Shared pydantic configuration and timestamp encoding for directory entities."""

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# Identities are stored as signed 64-bit integers.
MAX_IDENTITY = 2**63 - 1


def format_timestamp(value: datetime) -> str:
    """
    Render a timestamp as yyyy-MM-ddTHH:mm:ss.SSSZ, e.g. 2024-05-01T10:00:00.000+0000.

    Naive values (SQLite CURRENT_TIMESTAMP) are UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}{value:%z}"


Timestamp = Annotated[
    datetime,
    PlainSerializer(format_timestamp, return_type=str, when_used="json"),
]


class CamelModel(BaseModel):
    """JSON field names are the camelCase attribute names (userId, roleName, ...)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )
