from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal

import pytest

from teacher_payroll.core.enums import DeductionType, DeliveryStatus, OccurrenceOutcome, PaymentStatus
from teacher_payroll.core.exceptions import InvalidRange, PartialDataUnavailable, UnknownTeacher
from teacher_payroll.deductions.model import DeductionConfig, LatenessTier
from teacher_payroll.payroll.calculator.standard_calculator import StandardPayrollCalculator

DAY = date(2025, 1, 6)


class _CountingTenants:
    def __init__(self, inner):
        self.inner = inner
        self.calls = 0

    def __getattr__(self, name):
        self.calls += 1
        return getattr(self.inner, name)


def _one_class(env, joined: time | None = time(9, 7), *, status=DeliveryStatus.ENDED):
    env.schedules.add("t1", 1, day_package="Monday", time_slot=time(9, 0), occupied_from=DAY, occupied_until=DAY)
    if joined is not None or status == DeliveryStatus.NO_SHOW:
        env.events.add(
            "t1",
            1,
            datetime.combine(DAY, time(8, 58)),
            joined_at=datetime.combine(DAY, joined) if joined else None,
            status=status,
        )


def test_late_join_charged_by_tier(env):
    _one_class(env)
    result = env.build().salary_service.calculate_salary("t1", "school-a", DAY, DAY)

    assert result.lateness_deduction == Decimal("10.00")
    assert result.net_salary == Decimal("990.00")
    [entry] = result.ledger
    assert entry.outcome == OccurrenceOutcome.LATE
    assert entry.delay_minutes == 7


def test_waived_lateness_restores_base(env):
    _one_class(env)
    env.waivers.add("t1", DAY, DeductionType.LATENESS, reason="link sent late by platform")
    result = env.build().salary_service.calculate_salary("t1", "school-a", DAY, DAY)

    assert result.lateness_deduction == 0
    assert result.waived_total == Decimal("10.00")
    assert result.net_salary == result.base_salary
    assert result.ledger[0].waiver_reason == "link sent late by platform"


def test_on_time_entry_is_kept_at_zero(env):
    _one_class(env, joined=time(8, 59))
    result = env.build().salary_service.calculate_salary("t1", "school-a", DAY, DAY)
    assert result.on_time == 1
    assert result.ledger[0].amount == 0
    assert result.net_salary == Decimal("1000.00")


def test_missing_class_charged_default_absence(env):
    _one_class(env, joined=None)
    result = env.build().salary_service.calculate_salary("t1", "school-a", DAY, DAY)
    assert result.absent == 1
    assert result.absence_deduction == Decimal("30.00")


def test_no_show_is_an_absence(env):
    _one_class(env, joined=None, status=DeliveryStatus.NO_SHOW)
    result = env.build().salary_service.calculate_salary("t1", "school-a", DAY, DAY)
    assert result.absent == 1
    assert result.ledger[0].event_id is not None


def test_configured_absence_amount(env):
    _one_class(env, joined=None)
    env.configs.configs["school-a"] = DeductionConfig(
        tenant_id="school-a",
        lateness_tiers=(LatenessTier(1, Decimal("15")),),
        absence_amount=Decimal("45"),
    )
    result = env.build().salary_service.calculate_salary("t1", "school-a", DAY, DAY)
    assert result.absence_deduction == Decimal("45.00")


def test_approved_bonuses_added(env):
    env.bonuses.add("t1", date(2026, 3, 2), 50)
    env.bonuses.add("t1", date(2026, 3, 9), 75)
    env.bonuses.add("t1", date(2026, 3, 16), 100, approved=False)
    result = env.build().salary_service.calculate_salary("t1", "school-a", "2026-03-01", "2026-03-31")
    assert result.bonus_total == Decimal("125.00")
    assert result.net_salary == Decimal("1125.00")


def test_zero_assignments_net_equals_base(env):
    result = env.build().salary_service.calculate_salary("t1", "school-a", "2026-03-01", "2026-03-31")
    assert result.occurrences == 0
    assert result.net_salary == result.base_salary == Decimal("1000.00")


def test_missing_base_salary_is_zero(env):
    env.tenants.add_teacher("t2", "school-a")
    result = env.build().salary_service.calculate_salary("t2", "school-a", "2026-03-01", "2026-03-31")
    assert result.base_salary == 0
    assert result.net_salary == 0


def test_future_dates_are_not_charged(env):
    env.schedules.add("t1", 1)
    container = env.build(today=lambda: date(2026, 3, 10))
    result = container.salary_service.calculate_salary("t1", "school-a", "2026-03-01", "2026-03-31")
    assert result.occurrences == 10
    assert max(e.day for e in result.ledger) == date(2026, 3, 10)


def test_payment_status_reported(env):
    env.payments.statuses[("school-a", "t1", "2026-03")] = PaymentStatus.PAID
    result = env.build().salary_service.calculate_salary("t1", "school-a", "2026-03-01", "2026-03-31")
    assert result.payment_status == PaymentStatus.PAID


@pytest.mark.parametrize(
    "start,end",
    [("2026-03-31", "2026-03-01"), ("not-a-date", "2026-03-31"), ("", "2026-03-31"), ("2026-02-30", "2026-03-31")],
)
def test_invalid_range_rejected_before_any_lookup(env, start, end):
    counting = _CountingTenants(env.tenants)
    env.tenants = counting
    with pytest.raises(InvalidRange):
        env.build().salary_service.calculate_salary("t1", "school-a", start, end)
    assert counting.calls == 0


def test_unknown_teacher(env):
    with pytest.raises(UnknownTeacher):
        env.build().salary_service.calculate_salary("ghost", "school-a", "2026-03-01", "2026-03-31")


def test_teacher_of_other_school_is_unknown(env):
    with pytest.raises(UnknownTeacher):
        env.build().salary_service.calculate_salary("t1", "school-b", "2026-03-01", "2026-03-31")


def test_store_failure_names_the_store(env):
    env.schedules.add("t1", 1)
    env.events.failing_teachers.add("t1")
    with pytest.raises(PartialDataUnavailable) as exc:
        env.build().salary_service.calculate_salary("t1", "school-a", "2026-03-01", "2026-03-31")
    assert exc.value.store == "delivery_event"


def test_results_are_cached_until_cleared(env):
    container = env.build()
    first = container.salary_service.calculate_salary("t1", "school-a", "2026-03-01", "2026-03-31")
    env.bonuses.add("t1", date(2026, 3, 2), 50)

    assert container.salary_service.calculate_salary("t1", "school-a", "2026-03-01", "2026-03-31") is first

    assert container.salary_service.clear_cache(tenant_id="school-a") == 1
    refreshed = container.salary_service.calculate_salary("t1", "school-a", "2026-03-01", "2026-03-31")
    assert refreshed.bonus_total == Decimal("50.00")


def _batch_env(env):
    for teacher_id, base in (("t2", "800"), ("t3", "1200")):
        env.tenants.add_teacher(teacher_id, "school-a")
        env.base_salaries.amounts[("school-a", teacher_id)] = Decimal(base)
    env.schedules.add("t1", 1, day_package="MWF")
    env.schedules.add("t2", 2, day_package="TTS")
    env.events.add("t1", 1, datetime(2026, 3, 2, 9, 0), joined_at=datetime(2026, 3, 2, 9, 12))
    env.bonuses.add("t3", date(2026, 3, 9), 75)
    env.payments.statuses[("school-a", "t3", "2026-03")] = PaymentStatus.PAID


def test_batch_matches_individual_results(env):
    _batch_env(env)
    batch = env.build().salary_service.calculate_all_salaries("school-a", "2026-03-01", "2026-03-31")

    fresh = env.build().salary_service
    individual = [fresh.calculate_salary(t, "school-a", "2026-03-01", "2026-03-31") for t in ("t1", "t2", "t3")]

    assert [r.teacher_id for r in batch.results] == ["t1", "t2", "t3"]
    assert [r.net_salary for r in batch.results] == [r.net_salary for r in individual]
    assert batch.statistics.total_salary == sum((r.net_salary for r in individual), Decimal("0"))
    assert batch.errors == []


def test_batch_statistics(env):
    _batch_env(env)
    stats = env.build().salary_service.calculate_all_salaries("school-a", "2026-03-01", "2026-03-31").statistics

    assert stats.total_teachers == 3
    assert stats.paid_teachers == 1
    assert stats.unpaid_teachers == 2
    assert stats.total_base == Decimal("3000.00")
    assert stats.total_bonuses == Decimal("75.00")
    assert stats.total_salary == stats.total_base - stats.total_deductions + stats.total_bonuses
    assert stats.payment_rate == Decimal("33.33")


def test_batch_records_failing_teacher_and_continues(env):
    _batch_env(env)
    env.events.failing_teachers.add("t2")
    report = env.build().salary_service.calculate_all_salaries("school-a", "2026-03-01", "2026-03-31")

    assert [r.teacher_id for r in report.results] == ["t1", "t3"]
    assert [(e.teacher_id, e.error) for e in report.errors] == [("t2", "PartialDataUnavailable")]
    assert report.statistics.total_teachers == 2


class _BrokenFor(StandardPayrollCalculator):
    def __init__(self, teacher_id):
        self.teacher_id = teacher_id

    def calculate(self, **kwargs):
        if kwargs["teacher_id"] == self.teacher_id:
            raise RuntimeError("bad row")
        return super().calculate(**kwargs)


def test_batch_records_unexpected_failure_and_continues(env):
    _batch_env(env)
    report = env.build(calculator=_BrokenFor("t2")).salary_service.calculate_all_salaries(
        "school-a", "2026-03-01", "2026-03-31"
    )

    assert [r.teacher_id for r in report.results] == ["t1", "t3"]
    assert [(e.teacher_id, e.error, e.message) for e in report.errors] == [("t2", "RuntimeError", "bad row")]


def test_batch_accepts_timezone_aware_join_times(env):
    _batch_env(env)
    joined = datetime(2026, 3, 3, 9, 7).astimezone()
    env.events.add("t2", 2, datetime(2026, 3, 3, 9, 0), joined_at=joined)
    report = env.build().salary_service.calculate_all_salaries("school-a", "2026-03-01", "2026-03-31")

    assert report.errors == []
    t2 = next(r for r in report.results if r.teacher_id == "t2")
    assert [e.delay_minutes for e in t2.ledger if e.event_id is not None] == [7]


def test_batch_of_empty_school(env):
    report = env.build().salary_service.calculate_all_salaries("school-b", "2026-03-01", "2026-03-31")
    assert report.results == []
    assert report.statistics.total_salary == 0
    assert report.statistics.average_salary == 0
