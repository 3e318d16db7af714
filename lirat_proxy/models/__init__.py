"""Pydantic response models for the proxy's own (non-upstream) endpoints."""

from .status import CacheClearResult, ErrorBody, HealthStatus, iso_timestamp

__all__ = [
    "CacheClearResult",
    "ErrorBody",
    "HealthStatus",
    "iso_timestamp",
]
