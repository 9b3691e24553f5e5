from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class QualityBonus:
    bonus_id: int
    tenant_id: str
    teacher_id: str
    week_start: date
    bonus_awarded: Decimal
    rating: Optional[str] = None
    manager_approved: bool = False
