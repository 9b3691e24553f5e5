from __future__ import annotations

from datetime import date, time
from typing import Sequence

from ..common.datetime_utils import parse_time_slot
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import ScheduleAssignment
from .repository import ScheduleRepository

_COLUMNS = """
    assignment_id, tenant_id, teacher_id, student_id, day_package,
    time_slot, occupied_from, occupied_until
"""


def _row_to_assignment(r: dict) -> ScheduleAssignment:
    return ScheduleAssignment(
        assignment_id=int(r["assignment_id"]),
        tenant_id=str(r["tenant_id"]),
        teacher_id=str(r["teacher_id"]),
        student_id=int(r["student_id"]),
        day_package=r.get("day_package") or "",
        time_slot=parse_time_slot(r["time_slot"]),
        occupied_from=r["occupied_from"],
        occupied_until=r.get("occupied_until"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_assignments(self, teacher_id: str, tenant_id: str) -> Sequence[ScheduleAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM schedule_assignments
                WHERE tenant_id=%s AND teacher_id=%s
                ORDER BY occupied_from ASC, assignment_id ASC
                """,
                (tenant_id, teacher_id),
            )
            return [_row_to_assignment(r) for r in fetchall(cur)]

    def list_for_student(self, *, student_id: int, tenant_id: str) -> Sequence[ScheduleAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM schedule_assignments
                WHERE tenant_id=%s AND student_id=%s
                ORDER BY occupied_from ASC, assignment_id ASC
                """,
                (tenant_id, int(student_id)),
            )
            return [_row_to_assignment(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedule_assignments
                    (tenant_id, teacher_id, student_id, day_package, time_slot, occupied_from)
                VALUES (%s,%s,%s,%s,%s,%s)
                """,
                (tenant_id, teacher_id, int(student_id), day_package, time_slot.strftime("%H:%M"), occupied_from),
            )
            return int(cur.lastrowid)

    def close_assignment(self, *, assignment_id: int, occupied_until: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE schedule_assignments
                SET occupied_until=%s
                WHERE assignment_id=%s AND (occupied_until IS NULL OR occupied_until > %s)
                """,
                (occupied_until, int(assignment_id), occupied_until),
            )
            return cur.rowcount > 0
