from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional

from ..common.datetime_utils import parse_time_slot
from ..core.enums import Capability
from ..core.exceptions import ValidationError
from ..core.logging_config import get_logger
from ..tenants.service import TenantService
from ..users.model import Principal
from .change_validation import DUPLICATE_ASSIGNMENT, ChangeValidationResult, TeacherChangeValidator
from .repository import ScheduleRepository

logger = get_logger("schedules.service")


@dataclass(frozen=True)
class ReassignmentResult:
    assignment_id: int
    closed_assignment_ids: List[int] = field(default_factory=list)
    validation: ChangeValidationResult = field(default_factory=ChangeValidationResult)


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository, tenants: TenantService, validator: TeacherChangeValidator):
        self._schedules = schedules
        self._tenants = tenants
        self._validator = validator

    @staticmethod
    def _parse_slot(value: str):
        try:
            return parse_time_slot(value)
        except ValueError:
            raise ValidationError("Invalid time slot (HH:MM or H:MM AM/PM)")

    def reassign(
        self,
        *,
        principal: Principal,
        tenant_id: str,
        student_id: int,
        new_teacher_id: str,
        change_date: date,
        day_package: Optional[str] = None,
        time_slot: Optional[str] = None,
    ) -> ReassignmentResult:
        """Move a student to another teacher from ``change_date`` on.

        The current assignment is soft-closed on the day before the change so
        past occurrences keep their original teacher.
        """
        principal.require(Capability.MANAGE_SCHEDULES)
        self._tenants.require_teacher(teacher_id=new_teacher_id, tenant_id=tenant_id)

        current = [
            a
            for a in self._schedules.list_for_student(student_id=int(student_id), tenant_id=tenant_id)
            if a.is_active_on(change_date) and a.teacher_id != new_teacher_id
        ]
        old_teacher_id = current[0].teacher_id if current else None

        validation = self._validator.validate(
            tenant_id=tenant_id,
            student_id=int(student_id),
            old_teacher_id=old_teacher_id,
            new_teacher_id=new_teacher_id,
            change_date=change_date,
        )
        if validation.is_blocking:
            raise ValidationError("; ".join(c.message for c in validation.conflicts if c.conflict_type == DUPLICATE_ASSIGNMENT))

        if not current and (day_package is None or time_slot is None):
            raise ValidationError("Student has no current assignment; day package and time slot are required")

        template = current[0] if current else None
        slot = self._parse_slot(time_slot) if time_slot else template.time_slot
        package = day_package if day_package is not None else template.day_package

        closed: list[int] = []
        for assignment in current:
            if self._schedules.close_assignment(
                assignment_id=assignment.assignment_id,
                occupied_until=change_date - timedelta(days=1),
            ):
                closed.append(assignment.assignment_id)

        new_id = self._schedules.create_assignment(
            tenant_id=tenant_id,
            teacher_id=new_teacher_id,
            student_id=int(student_id),
            day_package=package,
            time_slot=slot,
            occupied_from=change_date,
        )

        logger.info(
            "student %s moved to teacher %s from %s (closed=%s, conflicts=%d)",
            student_id,
            new_teacher_id,
            change_date.isoformat(),
            closed,
            len(validation.conflicts),
        )
        return ReassignmentResult(assignment_id=new_id, closed_assignment_ids=closed, validation=validation)
