from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol

from ..core.enums import DeductionType
from .model import DeductionConfig, DeductionWaiver


class DeductionConfigRepository(Protocol):
    def get_deduction_config(self, tenant_id: str) -> Optional[DeductionConfig]:
        """None (or ConfigMissing) when the school never configured deductions."""

        raise NotImplementedError


class WaiverRepository(Protocol):
    def find_waiver(
        self, teacher_id: str, tenant_id: str, day: date, deduction_type: DeductionType
    ) -> Optional[DeductionWaiver]:
        raise NotImplementedError

    def create_waiver(
        self,
        *,
        tenant_id: str,
        teacher_id: str,
        day: date,
        deduction_type: DeductionType,
        reason: str,
        original_amount: Decimal,
        admin_id: str,
    ) -> int:
        raise NotImplementedError
