from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from ..core.enums import Capability, Role
from ..core.exceptions import AuthorizationError

ROLE_CAPABILITIES: dict[Role, FrozenSet[Capability]] = {
    Role.ADMIN: frozenset(
        {
            Capability.VIEW_ALL_SALARIES,
            Capability.VIEW_OWN_SALARY,
            Capability.MANAGE_WAIVERS,
            Capability.MANAGE_CACHE,
            Capability.MANAGE_SCHEDULES,
            Capability.EXPORT_SALARIES,
        }
    ),
    Role.CONTROLLER: frozenset({Capability.VIEW_ALL_SALARIES}),
    Role.REGISTRAR: frozenset({Capability.MANAGE_SCHEDULES}),
    Role.TEACHER: frozenset({Capability.VIEW_OWN_SALARY}),
}


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, resolved once at the API boundary.

    Note: Services check capabilities on the principal; the evaluators never
    branch on roles.
    """

    user_id: str
    role: Role
    tenant_id: Optional[str] = None
    capabilities: FrozenSet[Capability] = field(default_factory=frozenset)

    def can(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def require(self, capability: Capability) -> None:
        if not self.can(capability):
            raise AuthorizationError(f"{self.role.value} may not {capability.value.replace('_', ' ')}")

    def require_salary_access(self, teacher_id: str) -> None:
        if self.can(Capability.VIEW_ALL_SALARIES):
            return
        if self.can(Capability.VIEW_OWN_SALARY) and self.user_id == teacher_id:
            return
        raise AuthorizationError("You may only view your own salary")
