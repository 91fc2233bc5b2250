"""
Read-side queries over stored wills.

Each query loads the will and hands it to a stateless service. Nothing
here mutates or saves a will.
"""

from collections.abc import Iterable, Sequence
from datetime import date
from uuid import UUID

from succession.config import DEFAULT_RULES, ComplianceRules
from succession.repositories.interface import WillRepository
from succession.services.readiness import ReadinessReport, ReadinessTier, ReadinessValidator
from succession.services.risk import DisinheritanceRiskScorer, WillRiskReport
from succession.services.solvency import (
    Debt,
    EstateAsset,
    SolvencyAnalyzer,
    SolvencyReport,
)
from succession.services.witness_eligibility import RankedCandidate, WitnessEligibilityChecker
from succession.values.eligibility import WitnessCandidate


class WillQueryService:
    """
    Reports on stored wills.

    Example:
        >>> queries = WillQueryService(repo)
        >>> report = await queries.readiness(will_id, ReadinessTier.ATTESTATION)
        >>> report.is_valid
        True
    """

    def __init__(
        self,
        repository: WillRepository,
        *,
        rules: ComplianceRules = DEFAULT_RULES,
        risk_scorer: DisinheritanceRiskScorer | None = None,
        validator: ReadinessValidator | None = None,
        eligibility_checker: WitnessEligibilityChecker | None = None,
        solvency_analyzer: SolvencyAnalyzer | None = None,
    ) -> None:
        self._repository = repository
        self._risk = risk_scorer or DisinheritanceRiskScorer()
        self._checker = eligibility_checker or WitnessEligibilityChecker(rules)
        self._validator = validator or ReadinessValidator(rules, self._risk, self._checker)
        self._solvency = solvency_analyzer or SolvencyAnalyzer(rules)

    async def readiness(self, will_id: UUID, tier: ReadinessTier) -> ReadinessReport:
        """
        Raises:
            AggregateNotFoundError: If the will does not exist
        """
        will = await self._repository.get(will_id)
        return self._validator.validate(will, tier)

    async def witness_compliance(self, will_id: UUID) -> ReadinessReport:
        will = await self._repository.get(will_id)
        return self._validator.validate_witness_compliance(will)

    async def disinheritance_risk(self, will_id: UUID) -> WillRiskReport:
        will = await self._repository.get(will_id)
        return self._risk.assess_will(will)

    async def rank_witness_candidates(
        self,
        will_id: UUID,
        candidates: Sequence[WitnessCandidate],
        on: date | None = None,
    ) -> list[RankedCandidate]:
        """Candidates scored against the will, best first."""
        will = await self._repository.get(will_id)
        return self._checker.rank(candidates, will, on)

    async def recommended_witness_types(self, will_id: UUID) -> list[str]:
        will = await self._repository.get(will_id)
        return self._checker.recommended_witness_types(will)

    def solvency(self, assets: Iterable[EstateAsset], debts: Iterable[Debt]) -> SolvencyReport:
        """Estate solvency. Independent of any stored will."""
        return self._solvency.analyze(assets, debts)


__all__ = ["WillQueryService"]
