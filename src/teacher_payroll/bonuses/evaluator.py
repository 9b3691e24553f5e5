from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable

from .model import QualityBonus


class BonusEvaluator:
    """Sum of manager-approved bonuses whose week starts inside the period.

    A week straddling the period boundary counts fully on the side of its start.
    """

    def total(self, bonuses: Iterable[QualityBonus], *, start: date, end: date) -> Decimal:
        total = Decimal("0")
        for bonus in bonuses:
            if not bonus.manager_approved:
                continue
            if start <= bonus.week_start <= end:
                total += bonus.bonus_awarded
        return total
