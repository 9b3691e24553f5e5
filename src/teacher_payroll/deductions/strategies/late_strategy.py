from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from ...attendance.model import ReconciledOccurrence
from ...core.enums import DeductionType, OccurrenceOutcome
from ..model import DeductionConfig, LatenessTier
from .base import DeductionDecision, DeductionStrategy


def tier_amount(tiers: Iterable[LatenessTier], delay_minutes: int) -> Decimal:
    """Amount of the highest tier whose threshold is <= delay.

    The top tier caps the charge; no delay, or a delay below every threshold,
    costs nothing.
    """
    if delay_minutes <= 0:
        return Decimal("0")

    amount = Decimal("0")
    for tier in sorted(tiers, key=lambda t: t.threshold_minutes):
        if tier.threshold_minutes > delay_minutes:
            break
        amount = tier.amount
    return amount


class LateStrategy(DeductionStrategy):
    """Joined after the slot start.

    A delay inside the free tier is reported as on time.
    """

    def decide(self, reconciled: ReconciledOccurrence, config: DeductionConfig) -> DeductionDecision:
        amount = tier_amount(config.lateness_tiers, reconciled.delay_minutes)
        if amount <= 0:
            return DeductionDecision(outcome=OccurrenceOutcome.ON_TIME)
        return DeductionDecision(outcome=OccurrenceOutcome.LATE, deduction_type=DeductionType.LATENESS, amount=amount)
