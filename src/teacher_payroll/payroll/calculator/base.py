from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Sequence

from ...core.enums import PaymentStatus
from ...deductions.model import LedgerEntry
from ..model import SalaryResult


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(
        self,
        *,
        teacher_id: str,
        tenant_id: str,
        start: date,
        end: date,
        base_salary: Decimal,
        ledger: Sequence[LedgerEntry],
        bonus_total: Decimal,
        payment_status: PaymentStatus,
        computed_at: datetime,
    ) -> SalaryResult:
        raise NotImplementedError
