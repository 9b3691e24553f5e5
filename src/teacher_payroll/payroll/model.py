from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Tuple

from ..core.enums import PaymentStatus
from ..deductions.model import LedgerEntry


@dataclass(frozen=True)
class SalaryResult:
    """One teacher's salary for one period.

    ``net = base - lateness_deduction - absence_deduction + bonus_total``;
    the two deduction fields are what is charged, waived amounts sit in
    ``waived_total`` only.
    """

    teacher_id: str
    tenant_id: str
    period_start: date
    period_end: date
    base_salary: Decimal
    lateness_deduction: Decimal
    absence_deduction: Decimal
    waived_total: Decimal
    bonus_total: Decimal
    net_salary: Decimal
    payment_status: PaymentStatus
    ledger: Tuple[LedgerEntry, ...] = ()
    occurrences: int = 0
    on_time: int = 0
    late: int = 0
    absent: int = 0
    computed_at: datetime | None = None

    @property
    def total_deductions(self) -> Decimal:
        return self.lateness_deduction + self.absence_deduction

    def to_dict(self, *, include_ledger: bool = True) -> dict:
        data = {
            "teacher_id": self.teacher_id,
            "tenant_id": self.tenant_id,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "base_salary": str(self.base_salary),
            "lateness_deduction": str(self.lateness_deduction),
            "absence_deduction": str(self.absence_deduction),
            "total_deductions": str(self.total_deductions),
            "waived_total": str(self.waived_total),
            "bonus_total": str(self.bonus_total),
            "net_salary": str(self.net_salary),
            "payment_status": self.payment_status.value,
            "counts": {
                "occurrences": self.occurrences,
                "on_time": self.on_time,
                "late": self.late,
                "absent": self.absent,
            },
            "computed_at": self.computed_at.isoformat() if self.computed_at else None,
        }
        if include_ledger:
            data["ledger"] = [e.to_dict() for e in self.ledger]
        return data


@dataclass(frozen=True)
class BatchError:
    teacher_id: str
    error: str
    message: str

    def to_dict(self) -> dict:
        return {"teacher_id": self.teacher_id, "error": self.error, "message": self.message}


@dataclass(frozen=True)
class SalaryStatistics:
    total_teachers: int = 0
    paid_teachers: int = 0
    unpaid_teachers: int = 0
    total_salary: Decimal = Decimal("0")
    total_base: Decimal = Decimal("0")
    total_deductions: Decimal = Decimal("0")
    total_waived: Decimal = Decimal("0")
    total_bonuses: Decimal = Decimal("0")
    average_salary: Decimal = Decimal("0")
    payment_rate: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        return {
            "total_teachers": self.total_teachers,
            "paid_teachers": self.paid_teachers,
            "unpaid_teachers": self.unpaid_teachers,
            "total_salary": str(self.total_salary),
            "total_base": str(self.total_base),
            "total_deductions": str(self.total_deductions),
            "total_waived": str(self.total_waived),
            "total_bonuses": str(self.total_bonuses),
            "average_salary": str(self.average_salary),
            "payment_rate": str(self.payment_rate),
        }


@dataclass(frozen=True)
class SalaryBatchReport:
    tenant_id: str
    period_start: date
    period_end: date
    results: List[SalaryResult] = field(default_factory=list)
    errors: List[BatchError] = field(default_factory=list)
    statistics: SalaryStatistics = field(default_factory=SalaryStatistics)

    def to_dict(self) -> dict:
        return {
            "tenant_id": self.tenant_id,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "results": [r.to_dict(include_ledger=False) for r in self.results],
            "errors": [e.to_dict() for e in self.errors],
            "statistics": self.statistics.to_dict(),
        }
