from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import period_label
from ..core.enums import PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, to_decimal
from .repository import BaseSalaryRepository, PaymentRepository


class MySQLBaseSalaryRepository(BaseSalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_base_salary(self, teacher_id: str, tenant_id: str, start: date, end: date) -> Optional[Decimal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT amount
                FROM teacher_base_salaries
                WHERE tenant_id=%s AND teacher_id=%s AND period=%s
                """,
                (tenant_id, teacher_id, period_label(start)),
            )
            r = fetchone(cur)
            return to_decimal(r["amount"]) if r else None


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_payment_status(self, teacher_id: str, tenant_id: str, period: str) -> PaymentStatus:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status
                FROM salary_payments
                WHERE tenant_id=%s AND teacher_id=%s AND period=%s
                """,
                (tenant_id, teacher_id, period),
            )
            r = fetchone(cur)
            if not r:
                return PaymentStatus.UNPAID
            return PaymentStatus(r["status"])
