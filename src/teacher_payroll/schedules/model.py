from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional


@dataclass(frozen=True)
class ScheduleAssignment:
    """Domain entity: a teacher's recurring slot with one student.

    ``occupied_until`` is None while the assignment is still active.
    """

    assignment_id: int
    tenant_id: str
    teacher_id: str
    student_id: int
    day_package: str
    time_slot: time
    occupied_from: date
    occupied_until: Optional[date] = None

    def is_active_on(self, day: date) -> bool:
        if day < self.occupied_from:
            return False
        return self.occupied_until is None or day <= self.occupied_until

    def overlaps(self, start: date, end: date) -> bool:
        if self.occupied_from > end:
            return False
        return self.occupied_until is None or self.occupied_until >= start


@dataclass(frozen=True)
class ClassOccurrence:
    """One expected class: an assignment expanded onto a calendar date."""

    day: date
    assignment: ScheduleAssignment

    @property
    def teacher_id(self) -> str:
        return self.assignment.teacher_id

    @property
    def student_id(self) -> int:
        return self.assignment.student_id

    @property
    def scheduled_start(self) -> datetime:
        return datetime.combine(self.day, self.assignment.time_slot)
