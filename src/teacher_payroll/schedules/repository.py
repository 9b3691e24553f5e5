from __future__ import annotations

from datetime import date, time
from typing import Protocol, Sequence

from .model import ScheduleAssignment


class ScheduleRepository(Protocol):
    def list_active_assignments(self, teacher_id: str, tenant_id: str) -> Sequence[ScheduleAssignment]:
        """Assignments of the teacher, including soft-closed ones still needed for history."""

        raise NotImplementedError

    def list_for_student(self, *, student_id: int, tenant_id: str) -> Sequence[ScheduleAssignment]:
        raise NotImplementedError

    def create_assignment(
        self,
        *,
        tenant_id: str,
        teacher_id: str,
        student_id: int,
        day_package: str,
        time_slot: time,
        occupied_from: date,
    ) -> int:
        raise NotImplementedError

    def close_assignment(self, *, assignment_id: int, occupied_until: date) -> bool:
        """Soft-close an assignment; rows are never deleted."""

        raise NotImplementedError
