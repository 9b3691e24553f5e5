from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional

import pytest

from teacher_payroll.attendance.model import DeliveryEvent
from teacher_payroll.bonuses.model import QualityBonus
from teacher_payroll.core.enums import DeliveryStatus, PaymentStatus, Role
from teacher_payroll.container import wire_container
from teacher_payroll.deductions.model import DeductionWaiver
from teacher_payroll.schedules.model import ScheduleAssignment
from teacher_payroll.tenants.model import Teacher, Tenant
from teacher_payroll.users.service import resolve_principal

TODAY = date(2026, 3, 31)
NOW = datetime(2026, 3, 31, 18, 0, 0)


class InMemoryTenants:
    def __init__(self):
        self.tenants: dict[str, Tenant] = {}
        self.teachers: dict[tuple[str, str], Teacher] = {}

    def add_tenant(self, tenant_id: str, *, slug: Optional[str] = None, is_default: bool = False) -> Tenant:
        tenant = Tenant(tenant_id=tenant_id, slug=slug or tenant_id, name=tenant_id.title(), is_default=is_default)
        self.tenants[tenant_id] = tenant
        return tenant

    def add_teacher(self, teacher_id: str, tenant_id: str) -> Teacher:
        teacher = Teacher(teacher_id=teacher_id, tenant_id=tenant_id, full_name=f"Teacher {teacher_id}")
        self.teachers[(tenant_id, teacher_id)] = teacher
        return teacher

    def get_tenant(self, key: str) -> Optional[Tenant]:
        for t in self.tenants.values():
            if t.tenant_id == key or t.slug == key:
                return t
        return None

    def get_default_tenant(self) -> Optional[Tenant]:
        return next((t for t in self.tenants.values() if t.is_default), None)

    def get_teacher(self, *, teacher_id: str, tenant_id: str) -> Optional[Teacher]:
        return self.teachers.get((tenant_id, teacher_id))

    def list_teachers(self, tenant_id: str):
        return sorted((t for (tid, _), t in self.teachers.items() if tid == tenant_id), key=lambda t: t.teacher_id)


class InMemorySchedules:
    def __init__(self):
        self.assignments: dict[int, ScheduleAssignment] = {}
        self._id = 0

    def add(
        self,
        teacher_id: str,
        student_id: int,
        *,
        tenant_id: str = "school-a",
        day_package: str = "All days",
        time_slot: time = time(9, 0),
        occupied_from: date = date(2026, 1, 1),
        occupied_until: Optional[date] = None,
    ) -> ScheduleAssignment:
        self._id += 1
        a = ScheduleAssignment(
            assignment_id=self._id,
            tenant_id=tenant_id,
            teacher_id=teacher_id,
            student_id=student_id,
            day_package=day_package,
            time_slot=time_slot,
            occupied_from=occupied_from,
            occupied_until=occupied_until,
        )
        self.assignments[a.assignment_id] = a
        return a

    def list_active_assignments(self, teacher_id: str, tenant_id: str):
        return [a for a in self.assignments.values() if a.teacher_id == teacher_id and a.tenant_id == tenant_id]

    def list_for_student(self, *, student_id: int, tenant_id: str):
        return [a for a in self.assignments.values() if a.student_id == student_id and a.tenant_id == tenant_id]

    def create_assignment(self, *, tenant_id, teacher_id, student_id, day_package, time_slot, occupied_from) -> int:
        return self.add(
            teacher_id,
            student_id,
            tenant_id=tenant_id,
            day_package=day_package,
            time_slot=time_slot,
            occupied_from=occupied_from,
        ).assignment_id

    def close_assignment(self, *, assignment_id: int, occupied_until: date) -> bool:
        a = self.assignments.get(assignment_id)
        if not a:
            return False
        self.assignments[assignment_id] = replace(a, occupied_until=occupied_until)
        return True



class InMemoryEvents:
    def __init__(self):
        self.events: list[DeliveryEvent] = []
        self.failing_teachers: set[str] = set()

    def add(
        self,
        teacher_id: str,
        student_id: int,
        dispatched_at: datetime,
        *,
        joined_at: Optional[datetime] = None,
        status: DeliveryStatus = DeliveryStatus.ENDED,
        tenant_id: str = "school-a",
    ) -> DeliveryEvent:
        e = DeliveryEvent(
            event_id=len(self.events) + 1,
            tenant_id=tenant_id,
            teacher_id=teacher_id,
            student_id=student_id,
            dispatched_at=dispatched_at,
            joined_at=joined_at,
            duration_minutes=60 if joined_at else None,
            status=status,
        )
        self.events.append(e)
        return e

    def list_delivery_events(self, teacher_id: str, tenant_id: str, start: date, end: date):
        if teacher_id in self.failing_teachers:
            raise ConnectionError("events store timed out")
        return [
            e
            for e in self.events
            if e.teacher_id == teacher_id and e.tenant_id == tenant_id and start <= e.dispatched_at.date() <= end
        ]


class InMemoryDeductionConfigs:
    def __init__(self):
        self.configs = {}

    def get_deduction_config(self, tenant_id: str):
        return self.configs.get(tenant_id)


class InMemoryWaivers:
    def __init__(self):
        self.waivers: dict[tuple, DeductionWaiver] = {}
        self.lookups = 0

    def add(self, teacher_id, day, deduction_type, *, tenant_id="school-a", reason="approved", amount=Decimal("0")):
        waiver_id = self.create_waiver(
            tenant_id=tenant_id,
            teacher_id=teacher_id,
            day=day,
            deduction_type=deduction_type,
            reason=reason,
            original_amount=amount,
            admin_id="admin-1",
        )
        return waiver_id

    def find_waiver(self, teacher_id, tenant_id, day, deduction_type):
        self.lookups += 1
        return self.waivers.get((tenant_id, teacher_id, day, deduction_type))

    def create_waiver(self, *, tenant_id, teacher_id, day, deduction_type, reason, original_amount, admin_id) -> int:
        key = (tenant_id, teacher_id, day, deduction_type)
        if key in self.waivers:
            raise ValueError("duplicate waiver")
        waiver_id = len(self.waivers) + 1
        self.waivers[key] = DeductionWaiver(
            waiver_id=waiver_id,
            tenant_id=tenant_id,
            teacher_id=teacher_id,
            day=day,
            deduction_type=deduction_type,
            reason=reason,
            original_amount=original_amount,
            admin_id=admin_id,
            created_at=NOW,
        )
        return waiver_id


class InMemoryBonuses:
    def __init__(self):
        self.bonuses: list[QualityBonus] = []

    def add(self, teacher_id, week_start, amount, *, approved=True, tenant_id="school-a"):
        self.bonuses.append(
            QualityBonus(
                bonus_id=len(self.bonuses) + 1,
                tenant_id=tenant_id,
                teacher_id=teacher_id,
                week_start=week_start,
                bonus_awarded=Decimal(str(amount)),
                rating="excellent",
                manager_approved=approved,
            )
        )

    def list_bonuses(self, teacher_id, tenant_id, start, end):
        return [b for b in self.bonuses if b.teacher_id == teacher_id and b.tenant_id == tenant_id]


class InMemoryBaseSalaries:
    def __init__(self):
        self.amounts: dict[tuple[str, str], Decimal] = {}

    def get_base_salary(self, teacher_id, tenant_id, start, end):
        return self.amounts.get((tenant_id, teacher_id))


class InMemoryPayments:
    def __init__(self):
        self.statuses: dict[tuple[str, str, str], PaymentStatus] = {}

    def get_payment_status(self, teacher_id, tenant_id, period):
        return self.statuses.get((tenant_id, teacher_id, period), PaymentStatus.UNPAID)


@pytest.fixture
def env():
    """Fake stores for one school (``school-a``, default) with teacher ``t1``."""
    tenants = InMemoryTenants()
    tenants.add_tenant("school-a", slug="alpha", is_default=True)
    tenants.add_tenant("school-b", slug="beta")
    tenants.add_teacher("t1", "school-a")

    ns = SimpleNamespace(
        tenants=tenants,
        schedules=InMemorySchedules(),
        events=InMemoryEvents(),
        configs=InMemoryDeductionConfigs(),
        waivers=InMemoryWaivers(),
        bonuses=InMemoryBonuses(),
        base_salaries=InMemoryBaseSalaries(),
        payments=InMemoryPayments(),
    )
    ns.base_salaries.amounts[("school-a", "t1")] = Decimal("1000")

    def build(**kwargs):
        return wire_container(
            tenants_repo=ns.tenants,
            schedules_repo=ns.schedules,
            events_repo=ns.events,
            deduction_configs_repo=ns.configs,
            waivers_repo=ns.waivers,
            bonuses_repo=ns.bonuses,
            base_salaries_repo=ns.base_salaries,
            payments_repo=ns.payments,
            default_tenant_id="school-a",
            batch_workers=kwargs.pop("batch_workers", 2),
            today=kwargs.pop("today", lambda: TODAY),
            now=kwargs.pop("now", lambda: NOW),
            **kwargs,
        )

    ns.build = build
    return ns


@pytest.fixture
def admin():
    return resolve_principal(user_id="admin-1", role=Role.ADMIN.value, tenant_id="school-a")
