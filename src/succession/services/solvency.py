"""
Estate solvency and the debt-priority waterfall (Section 45 LSA).

Debts are paid strictly in statutory tier order. Within a tier that cannot
be paid in full, the available amount is pro-rated across the tier's debts
by outstanding balance. The first short tier and every tier after it are
marked at risk; the walk always runs to the end so the total shortfall is
known.

Conservation holds for every waterfall: total paid never exceeds the
amount available, and remaining debt is exactly total debt minus total
paid.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from succession.config import DEFAULT_RULES, ComplianceRules
from succession.values.money import CENT, Money
from succession.values.severity import Severity

RATIO_PRECISION = Decimal("0.0001")


class DebtTier(Enum):
    """Statutory payment priority, highest first."""

    FUNERAL_EXPENSES = "FUNERAL_EXPENSES"
    TESTAMENTARY_EXPENSES = "TESTAMENTARY_EXPENSES"
    SECURED_DEBTS = "SECURED_DEBTS"
    TAXES_RATES_WAGES = "TAXES_RATES_WAGES"
    UNSECURED_GENERAL = "UNSECURED_GENERAL"

    @property
    def priority(self) -> int:
        return _TIER_PRIORITY[self]

    @property
    def is_critical(self) -> bool:
        """Funeral, testamentary and secured debts (Section 45(a)-(c))."""
        return self.priority <= 3


_TIER_PRIORITY = {
    DebtTier.FUNERAL_EXPENSES: 1,
    DebtTier.TESTAMENTARY_EXPENSES: 2,
    DebtTier.SECURED_DEBTS: 3,
    DebtTier.TAXES_RATES_WAGES: 4,
    DebtTier.UNSECURED_GENERAL: 5,
}


class DebtStatus(Enum):
    OUTSTANDING = "OUTSTANDING"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    DISPUTED = "DISPUTED"
    SETTLED = "SETTLED"
    WRITTEN_OFF = "WRITTEN_OFF"


class Debt(BaseModel):
    """A liability of the estate."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    creditor_name: str = Field(..., min_length=1)
    tier: DebtTier
    original_amount: Money
    outstanding_balance: Money | None = None
    status: DebtStatus = DebtStatus.OUTSTANDING
    secured_asset_id: str | None = None

    @model_validator(mode="after")
    def _check_amounts(self) -> Debt:
        if self.original_amount.is_negative:
            raise ValueError("Debt amount cannot be negative")
        if self.outstanding_balance is not None and self.outstanding_balance.is_negative:
            raise ValueError("Outstanding balance cannot be negative")
        return self

    @property
    def is_closed(self) -> bool:
        return self.status in (DebtStatus.SETTLED, DebtStatus.WRITTEN_OFF)

    @property
    def outstanding(self) -> Money:
        """Amount still owed; zero for settled and written-off debts."""
        if self.is_closed:
            return Money.zero(self.original_amount.currency)
        if self.outstanding_balance is None:
            return self.original_amount
        return self.outstanding_balance


class EstateAsset(BaseModel):
    """An asset of the estate as seen by the solvency analysis."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(..., min_length=1)
    value: Money
    is_liquid: bool = False
    encumbrance: Money | None = None

    @model_validator(mode="after")
    def _check_amounts(self) -> EstateAsset:
        if self.value.is_negative:
            raise ValueError("Asset value cannot be negative")
        if self.encumbrance is not None and self.encumbrance.is_negative:
            raise ValueError("Encumbrance cannot be negative")
        return self

    @property
    def is_encumbered(self) -> bool:
        return self.encumbrance is not None and not self.encumbrance.is_zero


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class DebtPayment:
    debt_id: str
    creditor_name: str
    tier: DebtTier
    outstanding: Money
    payment: Money

    @property
    def remaining(self) -> Money:
        return self.outstanding - self.payment

    @property
    def is_fully_paid(self) -> bool:
        return self.payment >= self.outstanding


@dataclass(frozen=True)
class TierAllocation:
    """Outcome of one tier of the waterfall."""

    tier: DebtTier
    outstanding: Money
    paid: Money
    at_risk: bool
    payments: tuple[DebtPayment, ...] = ()

    @property
    def is_covered(self) -> bool:
        return self.paid >= self.outstanding

    @property
    def shortfall(self) -> Money:
        return self.outstanding - self.paid


@dataclass(frozen=True)
class Waterfall:
    available: Money
    tiers: tuple[TierAllocation, ...]

    @property
    def total_outstanding(self) -> Money:
        return Money.total((t.outstanding for t in self.tiers), self.available.currency)

    @property
    def total_paid(self) -> Money:
        return Money.total((t.paid for t in self.tiers), self.available.currency)

    @property
    def remaining_debt(self) -> Money:
        return self.total_outstanding - self.total_paid

    @property
    def remaining_assets(self) -> Money:
        return self.available - self.total_paid

    @property
    def shortfall(self) -> Money:
        return self.remaining_debt

    @property
    def first_short_tier(self) -> DebtTier | None:
        for allocation in self.tiers:
            if not allocation.is_covered:
                return allocation.tier
        return None

    def allocation_for(self, tier: DebtTier) -> TierAllocation | None:
        for allocation in self.tiers:
            if allocation.tier is tier:
                return allocation
        return None

    def payment_for(self, debt_id: str) -> DebtPayment | None:
        for allocation in self.tiers:
            for payment in allocation.payments:
                if payment.debt_id == debt_id:
                    return payment
        return None


@dataclass(frozen=True)
class TierSummary:
    tier: DebtTier
    debt_count: int
    total_amount: Money
    settled_amount: Money
    outstanding_amount: Money
    percentage_of_estate: Decimal
    is_covered: bool

    @property
    def priority(self) -> int:
        return self.tier.priority


@dataclass(frozen=True)
class LiquidityAnalysis:
    liquid: Money
    illiquid: Money
    encumbered: Money
    free_and_clear: Money
    # None when there is no debt
    liquidity_ratio: Decimal | None


@dataclass(frozen=True)
class SolvencyRisk:
    category: str
    severity: Severity
    description: str
    mitigation: str


@dataclass(frozen=True)
class SolvencyReport:
    total_assets: Money
    total_debt: Money
    net_position: Money
    is_solvent: bool
    solvency_ratio: Decimal | None
    tier_summaries: tuple[TierSummary, ...]
    waterfall: Waterfall
    liquidity: LiquidityAnalysis
    critical_debts_covered: bool
    risks: tuple[SolvencyRisk, ...] = ()
    recommendations: tuple[str, ...] = ()

    @property
    def shortfall(self) -> Money:
        return self.waterfall.shortfall

    def has_risk(self, category: str) -> bool:
        return any(r.category == category for r in self.risks)


@dataclass(frozen=True)
class SaleSimulation:
    before: SolvencyReport
    after: SolvencyReport
    assets_sold: tuple[str, ...] = ()
    sale_proceeds: Money = field(default_factory=Money.zero)

    @property
    def total_debts_paid(self) -> Money:
        return self.after.waterfall.total_paid

    @property
    def remaining_debts(self) -> Money:
        return self.after.waterfall.remaining_debt

    @property
    def would_be_solvent(self) -> bool:
        return self.after.is_solvent


# =============================================================================
# Analyzer
# =============================================================================


def _ratio(numerator: Money, denominator: Money) -> Decimal | None:
    if denominator.is_zero:
        return None
    return (numerator.amount / denominator.amount).quantize(RATIO_PRECISION, rounding=ROUND_HALF_UP)


def _pro_rate(available: Money, debts: Sequence[Debt], outstanding: Money) -> list[Money]:
    """Split ``available`` across ``debts`` by outstanding balance, to the cent."""
    shares = [
        (d.outstanding.amount * available.amount / outstanding.amount).quantize(
            CENT, rounding=ROUND_DOWN
        )
        for d in debts
    ]
    leftover = available.amount - sum(shares, Decimal("0"))
    # Remainder goes to the last debt, spilling backwards if it is already full
    for i in reversed(range(len(debts))):
        if leftover <= 0:
            break
        room = debts[i].outstanding.amount - shares[i]
        take = min(room, leftover)
        shares[i] += take
        leftover -= take
    return [Money(amount=share, currency=available.currency) for share in shares]


class SolvencyAnalyzer:
    """
    Stateless solvency analysis over an asset and debt ledger.

    Example:
        >>> analyzer = SolvencyAnalyzer()
        >>> report = analyzer.analyze(assets, debts)
        >>> report.is_solvent, report.shortfall
        (False, Money(amount=Decimal('150000.00'), currency='KES'))
    """

    def __init__(self, rules: ComplianceRules = DEFAULT_RULES, currency: str = "KES") -> None:
        self._rules = rules
        self._currency = currency

    def waterfall(self, available: Money, debts: Iterable[Debt]) -> Waterfall:
        """Pay ``debts`` from ``available`` in tier order."""
        open_debts = [d for d in debts if not d.outstanding.is_zero]
        remaining = available
        short = False
        allocations: list[TierAllocation] = []

        for tier in DebtTier:
            tier_debts = [d for d in open_debts if d.tier is tier]
            if not tier_debts:
                continue
            outstanding = Money.total((d.outstanding for d in tier_debts), available.currency)

            if remaining >= outstanding:
                payments = [d.outstanding for d in tier_debts]
                paid = outstanding
            else:
                short = True
                paid = remaining if not remaining.is_negative else Money.zero(available.currency)
                payments = _pro_rate(paid, tier_debts, outstanding)

            remaining = remaining - paid
            allocations.append(
                TierAllocation(
                    tier=tier,
                    outstanding=outstanding,
                    paid=paid,
                    at_risk=short,
                    payments=tuple(
                        DebtPayment(
                            debt_id=d.id,
                            creditor_name=d.creditor_name,
                            tier=tier,
                            outstanding=d.outstanding,
                            payment=p,
                        )
                        for d, p in zip(tier_debts, payments, strict=True)
                    ),
                )
            )

        return Waterfall(available=available, tiers=tuple(allocations))

    def _liquidity(self, assets: Sequence[EstateAsset], total_debt: Money) -> LiquidityAnalysis:
        currency = self._currency
        liquid = Money.total((a.value for a in assets if a.is_liquid), currency)
        illiquid = Money.total((a.value for a in assets if not a.is_liquid), currency)
        encumbered = Money.total((a.value for a in assets if a.is_encumbered), currency)
        free = Money.total((a.value for a in assets if not a.is_encumbered), currency)
        return LiquidityAnalysis(
            liquid=liquid,
            illiquid=illiquid,
            encumbered=encumbered,
            free_and_clear=free,
            liquidity_ratio=_ratio(liquid, total_debt),
        )

    def _tier_summaries(
        self,
        debts: Sequence[Debt],
        total_assets: Money,
        waterfall: Waterfall,
    ) -> list[TierSummary]:
        currency = self._currency
        summaries = []
        for tier in DebtTier:
            tier_debts = [d for d in debts if d.tier is tier]
            if not tier_debts:
                continue
            total = Money.total((d.original_amount for d in tier_debts), currency)
            settled = Money.total(
                (d.original_amount for d in tier_debts if d.status is DebtStatus.SETTLED),
                currency,
            )
            outstanding = Money.total((d.outstanding for d in tier_debts), currency)
            if total_assets.is_zero:
                share = Decimal("0")
            else:
                share = (total.amount / total_assets.amount * 100).quantize(
                    CENT, rounding=ROUND_HALF_UP
                )
            allocation = waterfall.allocation_for(tier)
            summaries.append(
                TierSummary(
                    tier=tier,
                    debt_count=len(tier_debts),
                    total_amount=total,
                    settled_amount=settled,
                    outstanding_amount=outstanding,
                    percentage_of_estate=share,
                    is_covered=allocation is None or allocation.is_covered,
                )
            )
        return summaries

    def _risks(
        self,
        is_solvent: bool,
        total_assets: Money,
        total_debt: Money,
        waterfall: Waterfall,
        liquidity: LiquidityAnalysis,
    ) -> list[SolvencyRisk]:
        risks: list[SolvencyRisk] = []

        if not is_solvent:
            risks.append(
                SolvencyRisk(
                    category="INSOLVENCY",
                    severity=Severity.CRITICAL,
                    description=f"Estate is insolvent by {waterfall.shortfall}",
                    mitigation="Negotiate debt settlements, liquidate assets, or file for bankruptcy.",
                )
            )

        ratio = liquidity.liquidity_ratio
        if ratio is not None and ratio < self._rules.liquidity_risk_ratio:
            risks.append(
                SolvencyRisk(
                    category="LIQUIDITY",
                    severity=Severity.HIGH,
                    description=(
                        f"Liquid assets cover less than "
                        f"{int(self._rules.liquidity_risk_ratio * 100)}% of liabilities"
                    ),
                    mitigation="Begin asset liquidation early - land and property sales take time.",
                )
            )

        secured = waterfall.allocation_for(DebtTier.SECURED_DEBTS)
        if secured is not None and not secured.is_covered:
            risks.append(
                SolvencyRisk(
                    category="FORECLOSURE",
                    severity=Severity.HIGH,
                    description="Secured debts not covered - creditors may foreclose on collateral",
                    mitigation="Prioritize payment of secured debts or negotiate with creditors.",
                )
            )

        taxes = waterfall.allocation_for(DebtTier.TAXES_RATES_WAGES)
        if taxes is not None and not taxes.is_covered:
            risks.append(
                SolvencyRisk(
                    category="TAX_LIABILITY",
                    severity=Severity.HIGH,
                    description="Tax obligations not covered - KRA may levy penalties",
                    mitigation="Negotiate a payment plan with KRA before penalties accrue.",
                )
            )

        funeral = waterfall.allocation_for(DebtTier.FUNERAL_EXPENSES)
        if funeral is not None and not funeral.is_covered:
            risks.append(
                SolvencyRisk(
                    category="FUNERAL_DEBT",
                    severity=Severity.MEDIUM,
                    description="Funeral expenses not fully paid (Section 45(a) highest priority)",
                    mitigation="Settle funeral expenses immediately - they have top priority.",
                )
            )

        leverage = _ratio(total_debt, total_assets)
        if leverage is not None and self._rules.high_leverage_ratio < leverage < 1:
            risks.append(
                SolvencyRisk(
                    category="HIGH_LEVERAGE",
                    severity=Severity.MEDIUM,
                    description=(
                        f"Debts exceed {int(self._rules.high_leverage_ratio * 100)}% of asset "
                        "value - limited margin for error"
                    ),
                    mitigation="Minimize expenses and focus on debt settlement.",
                )
            )

        return risks

    def _recommendations(
        self,
        is_solvent: bool,
        critical_covered: bool,
        liquidity: LiquidityAnalysis,
    ) -> list[str]:
        recommendations: list[str] = []
        if not is_solvent:
            recommendations.append(
                "Estate is insolvent. Consider filing for bankruptcy or negotiating with creditors."
            )
            recommendations.append(
                "Distribution cannot proceed until debts are settled or written off."
            )
        if not critical_covered:
            recommendations.append(
                "Critical debts (funeral, administration, secured) are not fully covered."
            )
            recommendations.append(
                "Consider liquidating illiquid assets to cover Section 45(a)-(c) priority debts."
            )

        ratio = liquidity.liquidity_ratio
        if is_solvent and ratio is not None and ratio < Decimal("0.5"):
            recommendations.append("Liquid assets cover less than 50% of liabilities.")
            recommendations.append("May need to liquidate property, land, or other illiquid assets.")

        total = liquidity.encumbered + liquidity.free_and_clear
        encumbrance_ratio = _ratio(liquidity.encumbered, total)
        if encumbrance_ratio is not None and encumbrance_ratio > Decimal("0.5"):
            recommendations.append("Over 50% of assets have liens or mortgages.")
            recommendations.append("Secured creditors may force sale of collateral if debts are not paid.")

        if is_solvent and critical_covered and (ratio is None or ratio >= 1):
            recommendations.append("Estate is in good financial health with adequate liquidity.")
            recommendations.append("Can proceed with distribution after settling critical debts.")
        return recommendations

    def analyze(self, assets: Iterable[EstateAsset], debts: Iterable[Debt]) -> SolvencyReport:
        """Produce a full solvency report. Never raises for business conditions."""
        assets = list(assets)
        debts = list(debts)
        currency = self._currency

        total_assets = Money.total((a.value for a in assets), currency)
        total_debt = Money.total((d.outstanding for d in debts), currency)
        net_position = total_assets - total_debt
        is_solvent = not net_position.is_negative

        waterfall = self.waterfall(total_assets, debts)
        liquidity = self._liquidity(assets, total_debt)
        critical_covered = all(
            t.is_covered for t in waterfall.tiers if t.tier.is_critical
        )

        return SolvencyReport(
            total_assets=total_assets,
            total_debt=total_debt,
            net_position=net_position,
            is_solvent=is_solvent,
            solvency_ratio=_ratio(total_assets, total_debt),
            tier_summaries=tuple(self._tier_summaries(debts, total_assets, waterfall)),
            waterfall=waterfall,
            liquidity=liquidity,
            critical_debts_covered=critical_covered,
            risks=tuple(self._risks(is_solvent, total_assets, total_debt, waterfall, liquidity)),
            recommendations=tuple(self._recommendations(is_solvent, critical_covered, liquidity)),
        )

    def simulate_sale(
        self,
        assets: Iterable[EstateAsset],
        debts: Iterable[Debt],
        sales: Mapping[str, Money],
        extra_assets: Iterable[EstateAsset] = (),
    ) -> SaleSimulation:
        """
        Re-run the analysis as if some assets were sold.

        Args:
            assets: Current assets
            debts: Current debts
            sales: Sale price by asset id; unknown ids are ignored
            extra_assets: Additional assets to add to the pool

        Returns:
            SaleSimulation comparing the reports before and after
        """
        assets = list(assets)
        debts = list(debts)
        before = self.analyze(assets, debts)

        augmented: list[EstateAsset] = []
        sold: list[str] = []
        proceeds = Money.zero(self._currency)
        for asset in assets:
            price = sales.get(asset.id)
            if price is None:
                augmented.append(asset)
                continue
            sold.append(asset.id)
            proceeds = proceeds + price
            augmented.append(
                EstateAsset(name=f"Proceeds of sale: {asset.name}", value=price, is_liquid=True)
            )
        augmented.extend(extra_assets)

        return SaleSimulation(
            before=before,
            after=self.analyze(augmented, debts),
            assets_sold=tuple(sold),
            sale_proceeds=proceeds,
        )


__all__ = [
    "DebtTier",
    "DebtStatus",
    "Debt",
    "EstateAsset",
    "DebtPayment",
    "TierAllocation",
    "Waterfall",
    "TierSummary",
    "LiquidityAnalysis",
    "SolvencyRisk",
    "SolvencyReport",
    "SaleSimulation",
    "SolvencyAnalyzer",
]
