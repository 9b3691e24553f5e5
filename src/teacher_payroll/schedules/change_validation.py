from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from ..common.datetime_utils import period_label
from ..core.enums import PaymentStatus
from ..payroll.repository import PaymentRepository
from .repository import ScheduleRepository

OVERLAPPING_PAYMENT = "overlapping_payment"
DUPLICATE_ASSIGNMENT = "duplicate_assignment"


@dataclass(frozen=True)
class ChangeConflict:
    conflict_type: str
    teacher_id: str
    message: str


@dataclass(frozen=True)
class ChangeValidationResult:
    conflicts: List[ChangeConflict] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    @property
    def is_blocking(self) -> bool:
        return any(c.conflict_type == DUPLICATE_ASSIGNMENT for c in self.conflicts)


class TeacherChangeValidator:
    """Checks a student's move from one teacher to another before it is applied.

    Conflicts:
    - overlapping_payment: either teacher was already paid for the period, so
      the paid salary no longer matches the schedule.
    - duplicate_assignment: the new teacher already holds the student on the
      change date.
    """

    def __init__(self, schedules: ScheduleRepository, payments: PaymentRepository):
        self._schedules = schedules
        self._payments = payments

    def validate(
        self,
        *,
        tenant_id: str,
        student_id: int,
        old_teacher_id: Optional[str],
        new_teacher_id: str,
        change_date: date,
    ) -> ChangeValidationResult:
        conflicts: list[ChangeConflict] = []
        warnings: list[str] = []
        period = period_label(change_date)

        for teacher_id in (old_teacher_id, new_teacher_id):
            if not teacher_id:
                continue
            status = self._payments.get_payment_status(teacher_id, tenant_id, period)
            if status == PaymentStatus.PAID:
                conflicts.append(
                    ChangeConflict(
                        conflict_type=OVERLAPPING_PAYMENT,
                        teacher_id=teacher_id,
                        message=f"Teacher {teacher_id} already has a paid salary for {period}; payment may need adjustment",
                    )
                )

        for assignment in self._schedules.list_for_student(student_id=student_id, tenant_id=tenant_id):
            if assignment.teacher_id == new_teacher_id and assignment.is_active_on(change_date):
                conflicts.append(
                    ChangeConflict(
                        conflict_type=DUPLICATE_ASSIGNMENT,
                        teacher_id=new_teacher_id,
                        message=f"Student {student_id} is already assigned to teacher {new_teacher_id} on {change_date.isoformat()}",
                    )
                )
                break

        last_day = calendar.monthrange(change_date.year, change_date.month)[1]
        if 1 < change_date.day < last_day:
            warnings.append(
                f"Change occurs mid-month (day {change_date.day}); both teachers are paid for their own part of {period}"
            )
        if change_date.weekday() >= 5:
            warnings.append("Change occurs on a weekend; check the class schedule")

        return ChangeValidationResult(conflicts=conflicts, warnings=warnings)
