from __future__ import annotations

from typing import Sequence

from ..core.exceptions import UnknownTeacher, UnknownTenant
from .model import DefaultTenant, SchoolTenant, Teacher, TenantScope
from .repository import TenantRepository


class TenantService:
    """Resolves request scopes to concrete tenant ids.

    The engine below this point always works with a concrete tenant id; it never
    sees a missing/legacy scope.
    """

    def __init__(self, tenants: TenantRepository, *, default_tenant_id: str):
        self._tenants = tenants
        self._default_tenant_id = default_tenant_id

    def resolve(self, scope: TenantScope) -> str:
        if isinstance(scope, DefaultTenant):
            tenant = self._tenants.get_default_tenant() or self._tenants.get_tenant(self._default_tenant_id)
            if not tenant:
                raise UnknownTenant("No default school configured")
            return tenant.tenant_id

        if isinstance(scope, SchoolTenant):
            tenant = self._tenants.get_tenant(scope.key)
            if not tenant:
                raise UnknownTenant(f"School not found: {scope.key}")
            return tenant.tenant_id

        raise TypeError(f"Unsupported tenant scope: {scope!r}")

    def require_teacher(self, *, teacher_id: str, tenant_id: str) -> Teacher:
        teacher = self._tenants.get_teacher(teacher_id=teacher_id, tenant_id=tenant_id)
        if not teacher:
            raise UnknownTeacher(f"Teacher {teacher_id} not found in school {tenant_id}")
        return teacher

    def list_teachers(self, tenant_id: str) -> Sequence[Teacher]:
        return self._tenants.list_teachers(tenant_id)
