from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, to_decimal
from .model import QualityBonus
from .repository import BonusRepository


class MySQLBonusRepository(BonusRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_bonuses(self, teacher_id: str, tenant_id: str, start: date, end: date) -> Sequence[QualityBonus]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT bonus_id, tenant_id, teacher_id, week_start, bonus_awarded, rating, manager_approved
                FROM quality_bonuses
                WHERE tenant_id=%s AND teacher_id=%s AND week_start BETWEEN %s AND %s
                ORDER BY week_start ASC, bonus_id ASC
                """,
                (tenant_id, teacher_id, start, end),
            )
            rows = fetchall(cur)

        return [
            QualityBonus(
                bonus_id=int(r["bonus_id"]),
                tenant_id=str(r["tenant_id"]),
                teacher_id=str(r["teacher_id"]),
                week_start=r["week_start"],
                bonus_awarded=to_decimal(r.get("bonus_awarded")),
                rating=r.get("rating"),
                manager_approved=bool(r.get("manager_approved")),
            )
            for r in rows
        ]
