from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, wait
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable, Optional

from ..bonuses.evaluator import BonusEvaluator
from ..bonuses.repository import BonusRepository
from ..common.datetime_utils import now_local, period_label
from ..common.stores import call_store
from ..common.validators import DateLike, validate_date_range
from ..core.constants import DEFAULT_BATCH_WORKERS, MONEY_PLACES
from ..core.enums import PaymentStatus
from ..core.exceptions import DomainError, ValidationError
from ..core.logging_config import get_logger
from ..deductions.ledger import LedgerBuilder
from ..deductions.waivers import WaiverLayer
from ..tenants.service import TenantService
from .cache import SalaryCache, SalaryCacheKey
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import BatchError, SalaryBatchReport, SalaryResult, SalaryStatistics
from .repository import BaseSalaryRepository, PaymentRepository

logger = get_logger("payroll.service")


def compute_statistics(results: Iterable[SalaryResult]) -> SalaryStatistics:
    results = list(results)
    if not results:
        return SalaryStatistics()

    paid = sum(1 for r in results if r.payment_status == PaymentStatus.PAID)
    total_salary = sum((r.net_salary for r in results), Decimal("0"))
    count = len(results)

    return SalaryStatistics(
        total_teachers=count,
        paid_teachers=paid,
        unpaid_teachers=count - paid,
        total_salary=total_salary,
        total_base=sum((r.base_salary for r in results), Decimal("0")),
        total_deductions=sum((r.total_deductions for r in results), Decimal("0")),
        total_waived=sum((r.waived_total for r in results), Decimal("0")),
        total_bonuses=sum((r.bonus_total for r in results), Decimal("0")),
        average_salary=(total_salary / count).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP),
        payment_rate=(Decimal(paid) * 100 / count).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP),
    )


class SalaryService:
    """Salary for one teacher or a whole school, read through the salary cache.

    Cached figures are not refreshed when the underlying data changes; call
    :meth:`clear_cache` after retroactive edits.
    """

    def __init__(
        self,
        tenants: TenantService,
        ledger: LedgerBuilder,
        waiver_layer: WaiverLayer,
        bonuses: BonusRepository,
        base_salaries: BaseSalaryRepository,
        payments: PaymentRepository,
        *,
        cache: SalaryCache,
        calculator: Optional[PayrollCalculator] = None,
        bonus_evaluator: Optional[BonusEvaluator] = None,
        max_workers: int = DEFAULT_BATCH_WORKERS,
        now: Callable[[], datetime] = now_local,
    ):
        self._tenants = tenants
        self._ledger = ledger
        self._waiver_layer = waiver_layer
        self._bonuses = bonuses
        self._base_salaries = base_salaries
        self._payments = payments
        self._cache = cache
        self._calculator = calculator or StandardPayrollCalculator()
        self._bonus_evaluator = bonus_evaluator or BonusEvaluator()
        self._max_workers = max(1, int(max_workers))
        self._now = now

    def calculate_salary(self, teacher_id: str, tenant_id: str, start: DateLike, end: DateLike) -> SalaryResult:
        start_d, end_d = validate_date_range(start, end)
        call_store("tenant", self._tenants.require_teacher, teacher_id=teacher_id, tenant_id=tenant_id)

        key = SalaryCacheKey(tenant_id=tenant_id, teacher_id=teacher_id, start=start_d, end=end_d)
        return self._cache.get_or_compute(key, lambda: self._compute(teacher_id, tenant_id, start_d, end_d))

    def _compute(self, teacher_id: str, tenant_id: str, start: date, end: date) -> SalaryResult:
        ledger = self._ledger.build(teacher_id, tenant_id, start, end)
        ledger = self._waiver_layer.apply(teacher_id, tenant_id, ledger)

        bonuses = call_store("bonus", self._bonuses.list_bonuses, teacher_id, tenant_id, start, end)
        bonus_total = self._bonus_evaluator.total(bonuses, start=start, end=end)

        base = call_store("base_salary", self._base_salaries.get_base_salary, teacher_id, tenant_id, start, end)
        if base is None:
            logger.info("no base salary for teacher %s in %s, using 0", teacher_id, period_label(start))
            base = Decimal("0")

        status = call_store(
            "payment", self._payments.get_payment_status, teacher_id, tenant_id, period_label(start)
        )

        return self._calculator.calculate(
            teacher_id=teacher_id,
            tenant_id=tenant_id,
            start=start,
            end=end,
            base_salary=base,
            ledger=ledger,
            bonus_total=bonus_total,
            payment_status=status,
            computed_at=self._now(),
        )

    def calculate_all_salaries(self, tenant_id: str, start: DateLike, end: DateLike) -> SalaryBatchReport:
        """Every teacher of the school; one failing teacher is reported, not fatal."""
        start_d, end_d = validate_date_range(start, end)
        teachers = list(call_store("tenant", self._tenants.list_teachers, tenant_id))

        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            futures = [
                (t.teacher_id, pool.submit(self.calculate_salary, t.teacher_id, tenant_id, start_d, end_d))
                for t in teachers
            ]
            wait([f for _, f in futures])

        results: list[SalaryResult] = []
        errors: list[BatchError] = []
        for teacher_id, future in futures:
            try:
                results.append(future.result())
            except DomainError as exc:
                logger.warning("salary for teacher %s failed: %s", teacher_id, exc)
                errors.append(BatchError(teacher_id=teacher_id, error=type(exc).__name__, message=str(exc)))
            except Exception as exc:
                logger.exception("salary for teacher %s failed unexpectedly", teacher_id)
                errors.append(BatchError(teacher_id=teacher_id, error=type(exc).__name__, message=str(exc)))

        statistics = compute_statistics(results)
        logger.info(
            "batch tenant=%s %s..%s teachers=%d errors=%d total=%s",
            tenant_id,
            start_d.isoformat(),
            end_d.isoformat(),
            len(results),
            len(errors),
            statistics.total_salary,
        )
        return SalaryBatchReport(
            tenant_id=tenant_id,
            period_start=start_d,
            period_end=end_d,
            results=results,
            errors=errors,
            statistics=statistics,
        )

    def clear_cache(self, tenant_id: Optional[str] = None, teacher_id: Optional[str] = None) -> int:
        if teacher_id and not tenant_id:
            raise ValidationError("tenant is required to clear one teacher")
        if teacher_id:
            return self._cache.clear_teacher(tenant_id, teacher_id)
        if tenant_id:
            return self._cache.clear_tenant(tenant_id)
        return self._cache.clear_all()
