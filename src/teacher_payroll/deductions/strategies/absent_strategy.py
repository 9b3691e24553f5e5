from __future__ import annotations

from ...attendance.model import ReconciledOccurrence
from ...core.enums import DeductionType, OccurrenceOutcome
from ..model import DeductionConfig
from .base import DeductionDecision, DeductionStrategy


class AbsentStrategy(DeductionStrategy):
    """No matching event, a no-show, or nobody joined."""

    def decide(self, reconciled: ReconciledOccurrence, config: DeductionConfig) -> DeductionDecision:
        return DeductionDecision(
            outcome=OccurrenceOutcome.ABSENT,
            deduction_type=DeductionType.ABSENCE,
            amount=config.absence_amount,
        )
