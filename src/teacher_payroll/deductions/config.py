"""Deduction config resolution.

The documented defaults (``core.constants``) are applied in exactly one place:
:func:`resolve_deduction_config`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.constants import DEFAULT_ABSENCE_AMOUNT, DEFAULT_INCLUDE_SUNDAYS, DEFAULT_LATENESS_TIERS
from ..core.exceptions import ConfigMissing
from ..core.logging_config import get_logger
from .model import DeductionConfig, LatenessTier
from .repository import DeductionConfigRepository

logger = get_logger("deductions.config")


def default_deduction_config(tenant_id: str) -> DeductionConfig:
    return DeductionConfig(
        tenant_id=tenant_id,
        lateness_tiers=tuple(LatenessTier(threshold_minutes=m, amount=a) for m, a in DEFAULT_LATENESS_TIERS),
        absence_amount=DEFAULT_ABSENCE_AMOUNT,
        include_sundays=DEFAULT_INCLUDE_SUNDAYS,
    )


@dataclass(frozen=True)
class EffectiveDeductionConfig:
    """The tenant's configured rules plus the defaults for dates they don't cover."""

    configured: Optional[DeductionConfig]
    defaults: DeductionConfig

    @property
    def include_sundays(self) -> bool:
        return (self.configured or self.defaults).include_sundays

    def for_day(self, day: date) -> DeductionConfig:
        if self.configured is not None and self.configured.covers(day):
            return self.configured
        return self.defaults


def resolve_deduction_config(configs: DeductionConfigRepository, tenant_id: str) -> EffectiveDeductionConfig:
    defaults = default_deduction_config(tenant_id)
    try:
        configured = configs.get_deduction_config(tenant_id)
    except ConfigMissing:
        configured = None

    if configured is None:
        logger.warning("no deduction config for tenant %s, using defaults", tenant_id)
        return EffectiveDeductionConfig(configured=None, defaults=defaults)

    if not configured.lateness_tiers:
        logger.warning("deduction config for tenant %s has no lateness tiers, using default tiers", tenant_id)
        configured = DeductionConfig(
            tenant_id=configured.tenant_id,
            lateness_tiers=defaults.lateness_tiers,
            absence_amount=configured.absence_amount,
            include_sundays=configured.include_sundays,
            effective_from=configured.effective_from,
            effective_until=configured.effective_until,
        )

    return EffectiveDeductionConfig(configured=configured, defaults=defaults)
