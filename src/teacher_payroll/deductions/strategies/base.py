from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ...attendance.model import ReconciledOccurrence
from ...core.enums import DeductionType, OccurrenceOutcome
from ..model import DeductionConfig


@dataclass(frozen=True)
class DeductionDecision:
    outcome: OccurrenceOutcome
    deduction_type: Optional[DeductionType] = None
    amount: Decimal = Decimal("0")


class DeductionStrategy(ABC):
    """Strategy Pattern: encapsulate how one occurrence is charged."""

    @abstractmethod
    def decide(self, reconciled: ReconciledOccurrence, config: DeductionConfig) -> DeductionDecision:
        raise NotImplementedError
