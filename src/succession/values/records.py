"""Lifecycle records attached to a will: execution, revocation, probate, contest."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def ensure_not_future(value: datetime, what: str) -> datetime:
    """Normalise ``value`` to UTC and reject timestamps after now."""
    value = _as_utc(value)
    if value > datetime.now(UTC):
        raise ValueError(f"{what} cannot be in the future")
    return value


class ExecutionRecord(BaseModel):
    """When and where the will was signed before its witnesses."""

    model_config = ConfigDict(frozen=True)

    executed_at: datetime
    location: str = Field(..., min_length=2)
    witness_count: int = Field(..., ge=0)

    @field_validator("executed_at")
    @classmethod
    def _not_in_future(cls, value: datetime) -> datetime:
        return ensure_not_future(value, "Execution date")


class RevocationMethod(Enum):
    NEW_WILL = "NEW_WILL"
    CODICIL = "CODICIL"
    DESTRUCTION = "DESTRUCTION"
    COURT_ORDER = "COURT_ORDER"
    MARRIAGE = "MARRIAGE"
    DIVORCE = "DIVORCE"
    OTHER = "OTHER"


class RevocationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: RevocationMethod
    reason: str | None = None
    revoked_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    revoked_by: str | None = None
    court_order_ref: str | None = None


class StorageLocation(Enum):
    SAFE_DEPOSIT_BOX = "SAFE_DEPOSIT_BOX"
    LAWYER_OFFICE = "LAWYER_OFFICE"
    HOME_SAFE = "HOME_SAFE"
    DIGITAL_VAULT = "DIGITAL_VAULT"
    COURT_REGISTRY = "COURT_REGISTRY"
    WITH_EXECUTOR = "WITH_EXECUTOR"
    OTHER = "OTHER"


class ProbateRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    case_number: str = Field(..., min_length=1)
    registry: str = Field(..., min_length=1)
    filed_by: str | None = None
    filed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    granted_at: datetime | None = None


class ContestRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    contested_by: str = Field(..., min_length=1)
    grounds: str = Field(..., min_length=1)
    contested_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    resolved_at: datetime | None = None
    upheld: bool | None = None
    resolution: str | None = None


__all__ = [
    "ExecutionRecord",
    "RevocationMethod",
    "RevocationRecord",
    "StorageLocation",
    "ProbateRecord",
    "ContestRecord",
    "ensure_not_future",
]
