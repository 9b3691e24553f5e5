from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import QualityBonus


class BonusRepository(Protocol):
    def list_bonuses(self, teacher_id: str, tenant_id: str, start: date, end: date) -> Sequence[QualityBonus]:
        raise NotImplementedError
