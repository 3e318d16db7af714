from __future__ import annotations
from datetime import datetime, timezone
from pydantic import BaseModel, Field


def iso_timestamp(moment: datetime | None = None) -> str:
    """UTC ISO-8601 with millisecond precision and a trailing ``Z``."""
    moment = moment or datetime.now(timezone.utc)
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class HealthStatus(BaseModel):
    status: str = "ok"
    timestamp: str = Field(default_factory=iso_timestamp)


class CacheClearResult(BaseModel):
    success: bool = True
    message: str = "Cache cleared successfully"


class ErrorBody(BaseModel):
    error: str
