from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from .attendance.mysql_delivery_repository import MySQLDeliveryEventRepository
from .attendance.repository import DeliveryEventRepository
from .bonuses.mysql_bonus_repository import MySQLBonusRepository
from .bonuses.repository import BonusRepository
from .common.datetime_utils import now_local, today_local
from .core.constants import DEFAULT_BATCH_WORKERS, DEFAULT_TENANT_ID
from .database.connection import DBConfig, DatabaseConnection
from .deductions.ledger import LedgerBuilder
from .deductions.mysql_deduction_repository import MySQLDeductionConfigRepository, MySQLWaiverRepository
from .deductions.repository import DeductionConfigRepository, WaiverRepository
from .deductions.service import WaiverService
from .deductions.waivers import WaiverLayer
from .payroll.cache import InMemorySalaryCache, SalaryCache
from .payroll.calculator.base import PayrollCalculator
from .payroll.mysql_payroll_repository import MySQLBaseSalaryRepository, MySQLPaymentRepository
from .payroll.repository import BaseSalaryRepository, PaymentRepository
from .payroll.service import SalaryService
from .schedules.change_validation import TeacherChangeValidator
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .tenants.mysql_tenant_repository import MySQLTenantRepository
from .tenants.repository import TenantRepository
from .tenants.service import TenantService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    tenants_repo: TenantRepository
    schedules_repo: ScheduleRepository
    events_repo: DeliveryEventRepository
    deduction_configs_repo: DeductionConfigRepository
    waivers_repo: WaiverRepository
    bonuses_repo: BonusRepository
    base_salaries_repo: BaseSalaryRepository
    payments_repo: PaymentRepository

    salary_cache: SalaryCache

    tenant_service: TenantService
    salary_service: SalaryService
    waiver_service: WaiverService
    schedule_service: ScheduleService


def wire_container(
    *,
    tenants_repo: TenantRepository,
    schedules_repo: ScheduleRepository,
    events_repo: DeliveryEventRepository,
    deduction_configs_repo: DeductionConfigRepository,
    waivers_repo: WaiverRepository,
    bonuses_repo: BonusRepository,
    base_salaries_repo: BaseSalaryRepository,
    payments_repo: PaymentRepository,
    conn: Optional[DatabaseConnection] = None,
    cache: Optional[SalaryCache] = None,
    calculator: Optional[PayrollCalculator] = None,
    default_tenant_id: str = DEFAULT_TENANT_ID,
    batch_workers: int = DEFAULT_BATCH_WORKERS,
    today: Callable[[], date] = today_local,
    now: Callable[[], datetime] = now_local,
) -> Container:
    """Assemble services over any set of repositories (MySQL in the app, fakes in tests)."""
    cache = cache if cache is not None else InMemorySalaryCache()

    tenant_service = TenantService(tenants_repo, default_tenant_id=default_tenant_id)
    ledger = LedgerBuilder(schedules_repo, events_repo, deduction_configs_repo, today=today)
    salary_service = SalaryService(
        tenant_service,
        ledger,
        WaiverLayer(waivers_repo),
        bonuses_repo,
        base_salaries_repo,
        payments_repo,
        cache=cache,
        calculator=calculator,
        max_workers=batch_workers,
        now=now,
    )
    waiver_service = WaiverService(ledger, waivers_repo, tenant_service)
    schedule_service = ScheduleService(
        schedules_repo,
        tenant_service,
        TeacherChangeValidator(schedules_repo, payments_repo),
    )

    return Container(
        conn=conn,
        tenants_repo=tenants_repo,
        schedules_repo=schedules_repo,
        events_repo=events_repo,
        deduction_configs_repo=deduction_configs_repo,
        waivers_repo=waivers_repo,
        bonuses_repo=bonuses_repo,
        base_salaries_repo=base_salaries_repo,
        payments_repo=payments_repo,
        salary_cache=cache,
        tenant_service=tenant_service,
        salary_service=salary_service,
        waiver_service=waiver_service,
        schedule_service=schedule_service,
    )


def build_container(
    *,
    db_config: dict,
    default_tenant_id: str = DEFAULT_TENANT_ID,
    batch_workers: int = DEFAULT_BATCH_WORKERS,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return wire_container(
        conn=conn,
        tenants_repo=MySQLTenantRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        events_repo=MySQLDeliveryEventRepository(conn),
        deduction_configs_repo=MySQLDeductionConfigRepository(conn),
        waivers_repo=MySQLWaiverRepository(conn),
        bonuses_repo=MySQLBonusRepository(conn),
        base_salaries_repo=MySQLBaseSalaryRepository(conn),
        payments_repo=MySQLPaymentRepository(conn),
        default_tenant_id=default_tenant_id,
        batch_workers=batch_workers,
    )
