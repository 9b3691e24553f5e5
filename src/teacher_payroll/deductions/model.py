from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple

from ..core.enums import DeductionType, OccurrenceOutcome


@dataclass(frozen=True)
class LatenessTier:
    threshold_minutes: int
    amount: Decimal


@dataclass(frozen=True)
class DeductionConfig:
    """Per-school deduction rules.

    ``effective_from`` / ``effective_until`` bound the dates the amounts apply
    to; a missing bound is open.
    """

    tenant_id: str
    lateness_tiers: Tuple[LatenessTier, ...]
    absence_amount: Decimal
    include_sundays: bool = True
    effective_from: Optional[date] = None
    effective_until: Optional[date] = None

    def covers(self, day: date) -> bool:
        if self.effective_from and day < self.effective_from:
            return False
        if self.effective_until and day > self.effective_until:
            return False
        return True


@dataclass(frozen=True)
class DeductionWaiver:
    """Admin override cancelling one (teacher, date, type) deduction. Never edited."""

    waiver_id: int
    tenant_id: str
    teacher_id: str
    day: date
    deduction_type: DeductionType
    reason: str
    original_amount: Decimal
    admin_id: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class LedgerEntry:
    """One occurrence's outcome in a salary period.

    ``amount`` is what the rules compute; once waived it is reported under
    ``waived_amount`` and no longer charged.
    """

    day: date
    assignment_id: int
    student_id: int
    outcome: OccurrenceOutcome
    delay_minutes: int = 0
    deduction_type: Optional[DeductionType] = None
    amount: Decimal = Decimal("0")
    event_id: Optional[int] = None
    waiver_id: Optional[int] = None
    waiver_reason: Optional[str] = None
    waived_by: Optional[str] = None

    @property
    def waived(self) -> bool:
        return self.waiver_id is not None

    @property
    def charged_amount(self) -> Decimal:
        return Decimal("0") if self.waived else self.amount

    @property
    def waived_amount(self) -> Decimal:
        return self.amount if self.waived else Decimal("0")

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "assignment_id": self.assignment_id,
            "student_id": self.student_id,
            "outcome": self.outcome.value,
            "delay_minutes": self.delay_minutes,
            "deduction_type": self.deduction_type.value if self.deduction_type else None,
            "amount": str(self.amount),
            "charged": str(self.charged_amount),
            "waived": str(self.waived_amount),
            "event_id": self.event_id,
            "waiver_id": self.waiver_id,
            "waiver_reason": self.waiver_reason,
            "waived_by": self.waived_by,
        }
