from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import DeductionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import DeductionConfig, DeductionWaiver, LatenessTier
from .repository import DeductionConfigRepository, WaiverRepository

_WAIVER_COLUMNS = """
    waiver_id, tenant_id, teacher_id, deduction_date, deduction_type,
    reason, original_amount, admin_id, created_at
"""


def _row_to_waiver(r: dict) -> DeductionWaiver:
    return DeductionWaiver(
        waiver_id=int(r["waiver_id"]),
        tenant_id=str(r["tenant_id"]),
        teacher_id=str(r["teacher_id"]),
        day=r["deduction_date"],
        deduction_type=DeductionType(r["deduction_type"]),
        reason=r.get("reason") or "",
        original_amount=to_decimal(r.get("original_amount")),
        admin_id=str(r["admin_id"]),
        created_at=r.get("created_at"),
    )


class MySQLDeductionConfigRepository(DeductionConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_deduction_config(self, tenant_id: str) -> Optional[DeductionConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT tenant_id, absence_amount, include_sundays, effective_from, effective_until
                FROM deduction_configs
                WHERE tenant_id=%s
                """,
                (tenant_id,),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute(
                """
                SELECT threshold_minutes, amount
                FROM lateness_tiers
                WHERE tenant_id=%s
                ORDER BY threshold_minutes ASC
                """,
                (tenant_id,),
            )
            tiers = tuple(
                LatenessTier(threshold_minutes=int(t["threshold_minutes"]), amount=to_decimal(t["amount"]))
                for t in fetchall(cur)
            )

        return DeductionConfig(
            tenant_id=str(r["tenant_id"]),
            lateness_tiers=tiers,
            absence_amount=to_decimal(r["absence_amount"]),
            include_sundays=bool(r.get("include_sundays", 1)),
            effective_from=r.get("effective_from"),
            effective_until=r.get("effective_until"),
        )


class MySQLWaiverRepository(WaiverRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_waiver(
        self, teacher_id: str, tenant_id: str, day: date, deduction_type: DeductionType
    ) -> Optional[DeductionWaiver]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_WAIVER_COLUMNS}
                FROM deduction_waivers
                WHERE tenant_id=%s AND teacher_id=%s AND deduction_date=%s AND deduction_type=%s
                """,
                (tenant_id, teacher_id, day, deduction_type.value),
            )
            r = fetchone(cur)
            return _row_to_waiver(r) if r else None

    def create_waiver(
        self,
        *,
        tenant_id: str,
        teacher_id: str,
        day: date,
        deduction_type: DeductionType,
        reason: str,
        original_amount: Decimal,
        admin_id: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO deduction_waivers
                    (tenant_id, teacher_id, deduction_date, deduction_type, reason, original_amount, admin_id)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (tenant_id, teacher_id, day, deduction_type.value, reason, original_amount, admin_id),
            )
            return int(cur.lastrowid)
