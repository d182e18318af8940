"""Base model for instance metadata records.

Every metadata record inherits from :class:`ImdsBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase IMDS keys (``noticeTime``)
  map automatically to snake_case fields.
* A ``raw`` dict that captures the original payload.
* :data:`UtcTimestamp`, which pins naive timestamps to UTC.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def ensure_utc(value: datetime) -> datetime:
    """Return *value* as a timezone-aware datetime, assuming UTC when naive."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


UtcTimestamp = Annotated[datetime, AfterValidator(ensure_utc)]
"""Annotated type for IMDS ISO-8601 timestamps, always timezone-aware."""


class ImdsBaseModel(BaseModel):
    """Base for records decoded from instance metadata responses."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original metadata response dict."""

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        # Keep the caller's raw= when constructing from kwargs.
        if "raw" in values:
            return values
        merged = dict(values)
        merged["raw"] = dict(values)
        return merged
