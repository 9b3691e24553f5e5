from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Sequence

from ...core.constants import MONEY_PLACES
from ...core.enums import DeductionType, OccurrenceOutcome, PaymentStatus
from ...deductions.model import LedgerEntry
from ..model import SalaryResult
from .base import PayrollCalculator


def _money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(MONEY_PLACES)


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: base - charged lateness - charged absence + bonuses.

    Net may go negative; it is not clamped.
    """

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
        lateness = Decimal("0")
        absence = Decimal("0")
        waived = Decimal("0")
        counts = {outcome: 0 for outcome in OccurrenceOutcome}

        for entry in ledger:
            counts[entry.outcome] += 1
            waived += entry.waived_amount
            if entry.deduction_type == DeductionType.LATENESS:
                lateness += entry.charged_amount
            elif entry.deduction_type == DeductionType.ABSENCE:
                absence += entry.charged_amount

        base = _money(base_salary)
        lateness = _money(lateness)
        absence = _money(absence)
        bonus = _money(bonus_total)

        return SalaryResult(
            teacher_id=teacher_id,
            tenant_id=tenant_id,
            period_start=start,
            period_end=end,
            base_salary=base,
            lateness_deduction=lateness,
            absence_deduction=absence,
            waived_total=_money(waived),
            bonus_total=bonus,
            net_salary=base - lateness - absence + bonus,
            payment_status=payment_status,
            ledger=tuple(ledger),
            occurrences=len(ledger),
            on_time=counts[OccurrenceOutcome.ON_TIME],
            late=counts[OccurrenceOutcome.LATE],
            absent=counts[OccurrenceOutcome.ABSENT],
            computed_at=computed_at,
        )
