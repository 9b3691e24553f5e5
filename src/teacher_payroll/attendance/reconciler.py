from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Tuple

from ..schedules.model import ClassOccurrence
from .model import DeliveryEvent, ReconciledOccurrence


def _local_naive(value: datetime) -> datetime:
    # slot starts are naive school-local times
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def delay_minutes(scheduled_start: datetime, joined_at: datetime) -> int:
    """Whole minutes between the slot start and the join, never negative.

    Timezone-aware timestamps are converted to local time first.
    """
    scheduled_start = _local_naive(scheduled_start)
    joined_at = _local_naive(joined_at)
    seconds = Decimal(str((joined_at - scheduled_start).total_seconds()))
    if seconds <= 0:
        return 0
    return int((seconds / 60).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class EventReconciler:
    """Pairs each expected class with at most one delivery event.

    Candidates are events of the same teacher and student dispatched on the
    occurrence's date. Occurrences of one student on one date take candidates
    in slot order, earliest dispatch first; an event is never used twice.
    """

    def reconcile(
        self,
        occurrences: Iterable[ClassOccurrence],
        events: Iterable[DeliveryEvent],
    ) -> List[ReconciledOccurrence]:
        pool: Dict[Tuple[str, int, date], List[DeliveryEvent]] = defaultdict(list)
        for event in events:
            pool[(event.teacher_id, event.student_id, event.dispatched_at.date())].append(event)
        for candidates in pool.values():
            candidates.sort(key=lambda e: (e.dispatched_at, e.event_id))

        ordered = sorted(occurrences, key=lambda o: (o.day, o.assignment.time_slot, o.assignment.assignment_id))

        out: list[ReconciledOccurrence] = []
        for occurrence in ordered:
            candidates = pool.get((occurrence.teacher_id, occurrence.student_id, occurrence.day))
            if not candidates:
                out.append(ReconciledOccurrence(occurrence=occurrence))
                continue

            event = candidates.pop(0)
            delay = 0
            if event.joined_at is not None:
                delay = delay_minutes(occurrence.scheduled_start, event.joined_at)
            out.append(ReconciledOccurrence(occurrence=occurrence, event=event, delay_minutes=delay))

        return out
