from __future__ import annotations

from ...attendance.model import ReconciledOccurrence
from ...core.enums import OccurrenceOutcome
from ..model import DeductionConfig
from .base import DeductionDecision, DeductionStrategy


class OnTimeStrategy(DeductionStrategy):
    """Delivered without delay: kept in the ledger at zero."""

    def decide(self, reconciled: ReconciledOccurrence, config: DeductionConfig) -> DeductionDecision:
        return DeductionDecision(outcome=OccurrenceOutcome.ON_TIME)
