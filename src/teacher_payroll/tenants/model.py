from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Tenant:
    """Domain entity: a school, the isolation boundary for all payroll data."""

    tenant_id: str
    slug: str
    name: str
    is_default: bool = False


@dataclass(frozen=True)
class Teacher:
    teacher_id: str
    tenant_id: str
    full_name: str
    is_active: bool = True


@dataclass(frozen=True)
class DefaultTenant:
    """Request carried no school scope (legacy single-school data)."""


@dataclass(frozen=True)
class SchoolTenant:
    """Request named a school by id or slug."""

    key: str


TenantScope = Union[DefaultTenant, SchoolTenant]


def scope_from(value: str | None) -> TenantScope:
    value = (value or "").strip()
    return SchoolTenant(value) if value else DefaultTenant()
