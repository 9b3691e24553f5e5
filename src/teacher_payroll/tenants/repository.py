from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Teacher, Tenant


class TenantRepository(Protocol):
    def get_tenant(self, key: str) -> Optional[Tenant]:
        """Look a tenant up by id or slug."""

        raise NotImplementedError

    def get_default_tenant(self) -> Optional[Tenant]:
        raise NotImplementedError

    def get_teacher(self, *, teacher_id: str, tenant_id: str) -> Optional[Teacher]:
        raise NotImplementedError

    def list_teachers(self, tenant_id: str) -> Sequence[Teacher]:
        raise NotImplementedError
