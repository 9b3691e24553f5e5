from __future__ import annotations

from datetime import date
from typing import Callable, List, Optional

from ..attendance.reconciler import EventReconciler
from ..attendance.repository import DeliveryEventRepository
from ..common.datetime_utils import today_local
from ..common.stores import call_store
from ..core.constants import MONEY_PLACES
from ..core.logging_config import get_logger
from ..schedules.repository import ScheduleRepository
from ..schedules.resolver import ScheduleResolver
from .config import resolve_deduction_config
from .factory import DeductionStrategyFactory
from .model import LedgerEntry
from .repository import DeductionConfigRepository

logger = get_logger("deductions.ledger")


class LedgerBuilder:
    """Schedule -> events -> lateness/absence for one teacher and period.

    Produces the raw ledger; waivers are applied afterwards by WaiverLayer.
    Occurrences after ``today`` are not due yet and are left out.
    """

    def __init__(
        self,
        schedules: ScheduleRepository,
        events: DeliveryEventRepository,
        configs: DeductionConfigRepository,
        *,
        resolver: Optional[ScheduleResolver] = None,
        reconciler: Optional[EventReconciler] = None,
        strategy_factory: Optional[DeductionStrategyFactory] = None,
        today: Callable[[], date] = today_local,
    ):
        self._schedules = schedules
        self._events = events
        self._configs = configs
        self._resolver = resolver or ScheduleResolver()
        self._reconciler = reconciler or EventReconciler()
        self._strategy_factory = strategy_factory or DeductionStrategyFactory()
        self._today = today

    def build(self, teacher_id: str, tenant_id: str, start: date, end: date) -> List[LedgerEntry]:
        config = call_store("deduction_config", resolve_deduction_config, self._configs, tenant_id)
        assignments = call_store("schedule", self._schedules.list_active_assignments, teacher_id, tenant_id)

        last_due = min(end, self._today())
        if last_due < start:
            return []

        occurrences = self._resolver.resolve(
            assignments, start=start, end=last_due, include_sundays=config.include_sundays
        )
        if not occurrences:
            return []

        events = call_store(
            "delivery_event", self._events.list_delivery_events, teacher_id, tenant_id, start, last_due
        )

        entries: list[LedgerEntry] = []
        for reconciled in self._reconciler.reconcile(occurrences, events):
            occurrence = reconciled.occurrence
            strategy = self._strategy_factory.for_occurrence(reconciled)
            decision = strategy.decide(reconciled, config.for_day(occurrence.day))
            entries.append(
                LedgerEntry(
                    day=occurrence.day,
                    assignment_id=occurrence.assignment.assignment_id,
                    student_id=occurrence.student_id,
                    outcome=decision.outcome,
                    delay_minutes=reconciled.delay_minutes,
                    deduction_type=decision.deduction_type,
                    amount=decision.amount.quantize(MONEY_PLACES),
                    event_id=reconciled.event.event_id if reconciled.event else None,
                )
            )

        logger.debug(
            "ledger teacher=%s tenant=%s %s..%s occurrences=%d",
            teacher_id,
            tenant_id,
            start.isoformat(),
            last_due.isoformat(),
            len(entries),
        )
        return entries
