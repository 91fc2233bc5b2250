"""
Executor powers (Sections 79-83 LSA).

Enumerates what a nominated executor may do with the estate, together with
bonding and commission terms. Presets cover the common nomination shapes.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, model_validator

from succession.values.money import Money

MAX_COMMISSION_PERCENTAGE = Decimal("5")

POWER_FLAGS = (
    "can_pay_debts",
    "can_collect_assets",
    "can_sell_land",
    "can_sell_personal_property",
    "can_invest_funds",
    "can_distribute",
    "can_continue_business",
    "can_mortgage_property",
    "can_compromise_debts",
    "can_litigate",
)


class ExecutorPowers(BaseModel):
    """
    Permitted actions plus bond and commission terms.

    Example:
        >>> powers = ExecutorPowers.business()
        >>> powers.permits("can_continue_business")
        True
    """

    model_config = ConfigDict(frozen=True)

    can_pay_debts: bool = True
    can_collect_assets: bool = True
    can_sell_land: bool = False
    can_sell_personal_property: bool = True
    can_invest_funds: bool = False
    can_distribute: bool = True
    can_continue_business: bool = False
    can_mortgage_property: bool = False
    can_compromise_debts: bool = False
    can_litigate: bool = False

    requires_bond: bool = False
    bond_amount: Money | None = None
    entitled_to_commission: bool = False
    commission_percentage: Decimal | None = None

    @model_validator(mode="after")
    def _check_terms(self) -> ExecutorPowers:
        if self.commission_percentage is not None:
            if not self.entitled_to_commission:
                raise ValueError("commission percentage given but executor is not entitled to commission")
            if not Decimal("0") <= self.commission_percentage <= MAX_COMMISSION_PERCENTAGE:
                raise ValueError(
                    f"Commission percentage must be between 0% and {MAX_COMMISSION_PERCENTAGE}%"
                )
        if self.requires_bond and self.bond_amount is None:
            raise ValueError("Bond amount must be specified if bond is required")
        if self.bond_amount is not None and self.bond_amount.is_negative:
            raise ValueError("Bond amount cannot be negative")
        return self

    @classmethod
    def standard(cls) -> ExecutorPowers:
        return cls(entitled_to_commission=True, commission_percentage=Decimal("2.5"))

    @classmethod
    def limited(cls, bond_amount: Money) -> ExecutorPowers:
        return cls(
            can_sell_personal_property=False,
            requires_bond=True,
            bond_amount=bond_amount,
            entitled_to_commission=True,
            commission_percentage=Decimal("1.5"),
        )

    @classmethod
    def business(cls) -> ExecutorPowers:
        return cls(
            can_invest_funds=True,
            can_continue_business=True,
            can_compromise_debts=True,
            entitled_to_commission=True,
            commission_percentage=Decimal("3.0"),
        )

    @classmethod
    def full(cls, bond_amount: Money) -> ExecutorPowers:
        return cls(
            **{flag: True for flag in POWER_FLAGS},
            requires_bond=True,
            bond_amount=bond_amount,
            entitled_to_commission=True,
            commission_percentage=Decimal("2.0"),
        )

    def permits(self, power: str) -> bool:
        if power not in POWER_FLAGS:
            raise ValueError(f"Unknown executor power: {power}")
        return bool(getattr(self, power))

    def granted_powers(self) -> list[str]:
        return [flag for flag in POWER_FLAGS if getattr(self, flag)]


__all__ = [
    "ExecutorPowers",
    "POWER_FLAGS",
    "MAX_COMMISSION_PERCENTAGE",
]
