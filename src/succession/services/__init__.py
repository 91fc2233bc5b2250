"""
Stateless domain services over a hydrated will.

None of these services mutate the will, and none raise for business
conditions; every finding is returned as a structured result.
"""

from succession.services.readiness import (
    ReadinessError,
    ReadinessReport,
    ReadinessTier,
    ReadinessValidator,
    ReadinessWarning,
)
from succession.services.risk import (
    DisinheritanceAssessment,
    DisinheritanceRiskScorer,
    LegalStrength,
    StrengthRating,
    WillRiskReport,
)
from succession.services.solvency import (
    Debt,
    DebtPayment,
    DebtStatus,
    DebtTier,
    EstateAsset,
    LiquidityAnalysis,
    SaleSimulation,
    SolvencyAnalyzer,
    SolvencyReport,
    SolvencyRisk,
    TierAllocation,
    TierSummary,
    Waterfall,
)
from succession.services.witness_eligibility import (
    RankedCandidate,
    WitnessEligibilityChecker,
)

__all__ = [
    # Witness eligibility
    "WitnessEligibilityChecker",
    "RankedCandidate",
    # Disinheritance risk
    "DisinheritanceRiskScorer",
    "DisinheritanceAssessment",
    "LegalStrength",
    "StrengthRating",
    "WillRiskReport",
    # Readiness
    "ReadinessValidator",
    "ReadinessTier",
    "ReadinessReport",
    "ReadinessError",
    "ReadinessWarning",
    # Solvency
    "SolvencyAnalyzer",
    "SolvencyReport",
    "SolvencyRisk",
    "DebtTier",
    "DebtStatus",
    "Debt",
    "DebtPayment",
    "EstateAsset",
    "LiquidityAnalysis",
    "TierAllocation",
    "TierSummary",
    "Waterfall",
    "SaleSimulation",
]
