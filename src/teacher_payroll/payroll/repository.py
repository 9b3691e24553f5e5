from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol

from ..core.enums import PaymentStatus


class BaseSalaryRepository(Protocol):
    def get_base_salary(self, teacher_id: str, tenant_id: str, start: date, end: date) -> Optional[Decimal]:
        """Base pay for the period (tenant/package derived upstream); None when not set."""

        raise NotImplementedError


class PaymentRepository(Protocol):
    def get_payment_status(self, teacher_id: str, tenant_id: str, period: str) -> PaymentStatus:
        """Status of the salary payment for a ``YYYY-MM`` period."""

        raise NotImplementedError
