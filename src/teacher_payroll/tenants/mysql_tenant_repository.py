from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Teacher, Tenant
from .repository import TenantRepository


def _tenant(r: dict) -> Tenant:
    return Tenant(
        tenant_id=str(r["tenant_id"]),
        slug=r["slug"],
        name=r["name"],
        is_default=bool(r.get("is_default")),
    )


def _teacher(r: dict) -> Teacher:
    return Teacher(
        teacher_id=str(r["teacher_id"]),
        tenant_id=str(r["tenant_id"]),
        full_name=r["full_name"],
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLTenantRepository(TenantRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_tenant(self, key: str) -> Optional[Tenant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT tenant_id, slug, name, is_default
                FROM tenants
                WHERE tenant_id=%s OR slug=%s
                LIMIT 1
                """,
                (key, key),
            )
            r = fetchone(cur)
            return _tenant(r) if r else None

    def get_default_tenant(self) -> Optional[Tenant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT tenant_id, slug, name, is_default FROM tenants WHERE is_default=1 LIMIT 1")
            r = fetchone(cur)
            return _tenant(r) if r else None

    def get_teacher(self, *, teacher_id: str, tenant_id: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT teacher_id, tenant_id, full_name, is_active
                FROM teachers
                WHERE tenant_id=%s AND teacher_id=%s
                """,
                (tenant_id, teacher_id),
            )
            r = fetchone(cur)
            return _teacher(r) if r else None

    def list_teachers(self, tenant_id: str) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT teacher_id, tenant_id, full_name, is_active
                FROM teachers
                WHERE tenant_id=%s AND is_active=1
                ORDER BY teacher_id
                """,
                (tenant_id,),
            )
            return [_teacher(r) for r in fetchall(cur)]
