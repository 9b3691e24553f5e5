from __future__ import annotations

from datetime import date, timedelta
from typing import Sequence

from ..core.enums import DeliveryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import DeliveryEvent
from .repository import DeliveryEventRepository


def _status(value) -> DeliveryStatus:
    try:
        return DeliveryStatus(value)
    except ValueError:
        return DeliveryStatus.UNKNOWN


class MySQLDeliveryEventRepository(DeliveryEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_delivery_events(self, teacher_id: str, tenant_id: str, start: date, end: date) -> Sequence[DeliveryEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT event_id, tenant_id, teacher_id, student_id,
                       dispatched_at, joined_at, duration_minutes, status
                FROM delivery_events
                WHERE tenant_id=%s AND teacher_id=%s
                  AND dispatched_at >= %s AND dispatched_at < %s
                ORDER BY dispatched_at ASC, event_id ASC
                """,
                (tenant_id, teacher_id, start, end + timedelta(days=1)),
            )
            rows = fetchall(cur)

        return [
            DeliveryEvent(
                event_id=int(r["event_id"]),
                tenant_id=str(r["tenant_id"]),
                teacher_id=str(r["teacher_id"]),
                student_id=int(r["student_id"]),
                dispatched_at=r["dispatched_at"],
                joined_at=r.get("joined_at"),
                duration_minutes=int(r["duration_minutes"]) if r.get("duration_minutes") is not None else None,
                status=_status(r.get("status") or DeliveryStatus.UNKNOWN.value),
            )
            for r in rows
        ]
