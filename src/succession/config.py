"""
Configuration for the compliance engine.

This module provides:
- ComplianceRules: Tunable thresholds shared by the aggregate and the services
- DEFAULT_RULES: The statutory defaults (Law of Succession Act, Cap 160)

Rules are passed explicitly to the aggregate and to every service. Nothing
in the package reads configuration from process-wide state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal


@dataclass(frozen=True)
class ComplianceRules:
    """
    Thresholds and weights used by the invariant engine and scorers.

    Attributes:
        minimum_witness_age: Witnesses younger than this are a legal impediment
        signature_window: Maximum spread between the first and last witness
            signature for the signatures to count as simultaneous
        max_allocation_percentage: Ceiling for non-residuary percentage shares
            and, separately, for residuary shares
        residuary_tolerance: Allowed deviation from 100 for the total of the
            residuary shares
        critical_penalty: Readiness score deduction per CRITICAL error
        high_penalty: Readiness score deduction per HIGH error
        medium_penalty: Readiness score deduction per MEDIUM error
        low_penalty: Readiness score deduction per LOW error
        warning_penalty: Readiness score deduction per warning
        liquidity_risk_ratio: Liquidity ratio below which a LIQUIDITY risk is raised
        high_leverage_ratio: Debt-to-asset ratio above which a solvent estate
            is flagged as highly leveraged

    Example:
        >>> rules = ComplianceRules(signature_window=timedelta(minutes=15))
        >>> will = WillAggregate(uuid4(), rules=rules)
    """

    # Witness rules
    minimum_witness_age: int = 18
    signature_window: timedelta = timedelta(minutes=30)

    # Allocation rules
    max_allocation_percentage: Decimal = Decimal("100")
    residuary_tolerance: Decimal = Decimal("0.01")

    # Readiness scoring
    critical_penalty: int = 25
    high_penalty: int = 15
    medium_penalty: int = 10
    low_penalty: int = 5
    warning_penalty: int = 3

    # Solvency thresholds
    liquidity_risk_ratio: Decimal = Decimal("0.3")
    high_leverage_ratio: Decimal = Decimal("0.7")

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.minimum_witness_age < 0:
            raise ValueError(
                f"minimum_witness_age must be >= 0, got {self.minimum_witness_age}."
            )

        if self.signature_window <= timedelta(0):
            raise ValueError(
                f"signature_window must be positive, got {self.signature_window}. "
                "Use a value like timedelta(minutes=30) (default)."
            )

        if self.max_allocation_percentage <= 0:
            raise ValueError(
                f"max_allocation_percentage must be positive, "
                f"got {self.max_allocation_percentage}."
            )

        if self.residuary_tolerance < 0:
            raise ValueError(
                f"residuary_tolerance must be >= 0, got {self.residuary_tolerance}."
            )

        penalties = (
            self.critical_penalty,
            self.high_penalty,
            self.medium_penalty,
            self.low_penalty,
            self.warning_penalty,
        )
        if any(p < 0 for p in penalties):
            raise ValueError(f"score penalties must be >= 0, got {penalties}.")

        if self.liquidity_risk_ratio < 0:
            raise ValueError(
                f"liquidity_risk_ratio must be >= 0, got {self.liquidity_risk_ratio}."
            )

        if not 0 < self.high_leverage_ratio < 1:
            raise ValueError(
                f"high_leverage_ratio must be between 0 and 1, got {self.high_leverage_ratio}."
            )


DEFAULT_RULES = ComplianceRules()


__all__ = [
    "ComplianceRules",
    "DEFAULT_RULES",
]
