from __future__ import annotations

from typing import Mapping, Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .model import ROLE_CAPABILITIES, Principal


def resolve_principal(*, user_id: Optional[str], role: Optional[str], tenant_id: Optional[str] = None) -> Principal:
    """Turn session values into a Principal with its capability set."""
    if not user_id or not role:
        raise AuthorizationError("Login required")

    try:
        kind = Role(str(role).lower())
    except ValueError:
        raise AuthorizationError(f"Unknown role: {role}")

    return Principal(
        user_id=str(user_id),
        role=kind,
        tenant_id=str(tenant_id) if tenant_id else None,
        capabilities=ROLE_CAPABILITIES[kind],
    )


def principal_from_session(session: Mapping) -> Principal:
    return resolve_principal(
        user_id=session.get("user_id"),
        role=session.get("role"),
        tenant_id=session.get("tenant_id"),
    )
