from __future__ import annotations

import calendar
from functools import wraps
from typing import Optional, Tuple

from flask import g, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    PartialDataUnavailable,
    UnknownTeacher,
    UnknownTenant,
    ValidationError,
)
from ..core.logging_config import get_logger
from ..tenants.model import DefaultTenant, SchoolTenant, scope_from
from ..tenants.service import TenantService
from ..users.model import Principal
from ..users.service import principal_from_session
from .datetime_utils import today_local

logger = get_logger("http")

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (UnknownTenant, 404),
    (UnknownTeacher, 404),
    (PartialDataUnavailable, 503),
)


def error_response(exc: DomainError):
    status = 400
    for kind, code in _STATUS_BY_ERROR:
        if isinstance(exc, kind):
            status = code
            break
    body = {"success": False, "error": type(exc).__name__, "message": str(exc)}
    if isinstance(exc, PartialDataUnavailable):
        body["store"] = exc.store
        logger.warning("request failed on %s store: %s", exc.store, exc)
    return jsonify(body), status


def principal_required(view):
    """Resolve the session into ``g.principal`` or answer 401/403 as JSON."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Login required"}), 401
        try:
            g.principal = principal_from_session(session)
        except AuthorizationError as e:
            return error_response(e)
        return view(*args, **kwargs)

    return wrapper


def resolve_tenant(tenants: TenantService, principal: Principal, school: Optional[str] = None) -> str:
    """Concrete tenant for a request: explicit school, else the principal's, else the default."""
    scope = SchoolTenant(school) if school else scope_from(principal.tenant_id)
    tenant_id = tenants.resolve(scope)
    if principal.role == Role.ADMIN:
        return tenant_id
    # a non-admin without a school is bound to the default one
    own = principal.tenant_id or tenants.resolve(DefaultTenant())
    if tenant_id != own:
        raise AuthorizationError("You may not access another school")
    return tenant_id


def period_args(source=None) -> Tuple[Optional[str], Optional[str]]:
    """``start``/``end`` from the request; the current month when both are missing."""
    source = source if source is not None else request.args
    start = source.get("start")
    end = source.get("end")
    if not start and not end:
        today = today_local()
        last = calendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1).isoformat(), today.replace(day=last).isoformat()
    return start, end
