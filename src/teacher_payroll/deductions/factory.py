from __future__ import annotations

from dataclasses import dataclass

from ..attendance.model import ReconciledOccurrence
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import DeductionStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class DeductionStrategyFactory:
    """Factory Pattern: choose the strategy for one reconciled occurrence."""

    def for_occurrence(self, reconciled: ReconciledOccurrence) -> DeductionStrategy:
        if not reconciled.attended:
            return AbsentStrategy()
        if reconciled.delay_minutes > 0:
            return LateStrategy()
        return OnTimeStrategy()
