"""
Bequests and their share specifications.

A share is one of four tagged variants: a specific asset, a percentage of
the estate, a percentage of the residue, or a fixed amount of money.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from succession.exceptions import EntityStateError
from succession.values.money import Money
from succession.values.persons import PersonRef, display_name


class SpecificAssetShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["specific_asset"] = "specific_asset"
    asset_id: str = Field(..., min_length=1)
    description: str | None = None


class PercentageShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["percentage"] = "percentage"
    percentage: Decimal = Field(..., gt=0, le=100)


class ResiduaryShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["residuary"] = "residuary"
    percentage: Decimal = Field(default=Decimal("100"), gt=0, le=100)


class FixedAmountShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["fixed_amount"] = "fixed_amount"
    amount: Money

    @field_validator("amount")
    @classmethod
    def _positive(cls, value: Money) -> Money:
        if value.amount <= 0:
            raise ValueError("Fixed bequest amount must be positive")
        return value


ShareSpec = Annotated[
    SpecificAssetShare | PercentageShare | ResiduaryShare | FixedAmountShare,
    Field(discriminator="kind"),
]


class BequestStatus(Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    REVOKED = "REVOKED"


class Bequest(BaseModel):
    """A gift to one beneficiary."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    beneficiary: PersonRef
    share: ShareSpec
    status: BequestStatus = BequestStatus.PENDING
    priority: int = Field(default=1, ge=1)
    conditions: str | None = None
    clause_ref: str | None = None
    description: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    revoked_reason: str | None = None

    @property
    def beneficiary_name(self) -> str:
        return display_name(self.beneficiary)

    @property
    def is_revoked(self) -> bool:
        return self.status is BequestStatus.REVOKED

    @property
    def is_residuary(self) -> bool:
        return isinstance(self.share, ResiduaryShare)

    @property
    def percentage(self) -> Decimal | None:
        """Percentage of the estate, for non-residuary percentage shares only."""
        if isinstance(self.share, PercentageShare):
            return self.share.percentage
        return None

    @property
    def residuary_percentage(self) -> Decimal | None:
        if isinstance(self.share, ResiduaryShare):
            return self.share.percentage
        return None

    @property
    def asset_id(self) -> str | None:
        if isinstance(self.share, SpecificAssetShare):
            return self.share.asset_id
        return None

    def activate(self) -> Bequest:
        if self.status is not BequestStatus.PENDING:
            return self
        return self.model_copy(update={"status": BequestStatus.ACTIVE})

    def revoke(self, reason: str | None = None) -> Bequest:
        if self.is_revoked:
            raise EntityStateError("bequest", self.id, self.status.value, "revoke")
        return self.model_copy(
            update={"status": BequestStatus.REVOKED, "revoked_reason": reason}
        )


__all__ = [
    "SpecificAssetShare",
    "PercentageShare",
    "ResiduaryShare",
    "FixedAmountShare",
    "ShareSpec",
    "BequestStatus",
    "Bequest",
]
