from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional, Union

from ..common.stores import call_store
from ..common.validators import DateLike, require_non_empty, validate_date_range
from ..core.enums import Capability, DeductionType
from ..core.exceptions import ValidationError
from ..core.logging_config import get_logger
from ..tenants.service import TenantService
from ..users.model import Principal
from .ledger import LedgerBuilder
from .repository import WaiverRepository

logger = get_logger("deductions.service")


@dataclass(frozen=True)
class WaiverCandidate:
    teacher_id: str
    day: date
    deduction_type: DeductionType
    amount: Decimal
    existing_waiver_id: Optional[int] = None

    @property
    def already_waived(self) -> bool:
        return self.existing_waiver_id is not None

    def to_dict(self) -> dict:
        return {
            "teacher_id": self.teacher_id,
            "date": self.day.isoformat(),
            "deduction_type": self.deduction_type.value,
            "amount": str(self.amount),
            "already_waived": self.already_waived,
            "waiver_id": self.existing_waiver_id,
        }


@dataclass(frozen=True)
class WaiverOutcome:
    created_ids: List[int] = field(default_factory=list)
    skipped: int = 0
    affected_teacher_ids: List[str] = field(default_factory=list)


def parse_deduction_type(value: Union[str, DeductionType, None]) -> Optional[DeductionType]:
    if value is None or isinstance(value, DeductionType):
        return value
    value = value.strip().lower()
    if not value or value == "all":
        return None
    try:
        return DeductionType(value)
    except ValueError:
        raise ValidationError(f"Unknown deduction type: {value}")


class WaiverService:
    """Deduction adjustments: waive the charged deductions of a range.

    Creating waivers does not touch the salary cache. The affected teacher ids
    are returned so an admin can clear them.
    """

    def __init__(self, ledger: LedgerBuilder, waivers: WaiverRepository, tenants: TenantService):
        self._ledger = ledger
        self._waivers = waivers
        self._tenants = tenants

    def _candidates(
        self,
        *,
        tenant_id: str,
        start: date,
        end: date,
        teacher_id: Optional[str],
        deduction_type: Optional[DeductionType],
    ) -> List[WaiverCandidate]:
        if teacher_id:
            teachers = [self._tenants.require_teacher(teacher_id=teacher_id, tenant_id=tenant_id)]
        else:
            teachers = list(call_store("tenant", self._tenants.list_teachers, tenant_id))

        out: list[WaiverCandidate] = []
        for teacher in teachers:
            totals: "OrderedDict[tuple[date, DeductionType], Decimal]" = OrderedDict()
            for entry in self._ledger.build(teacher.teacher_id, tenant_id, start, end):
                if entry.deduction_type is None or entry.amount <= 0:
                    continue
                if deduction_type is not None and entry.deduction_type != deduction_type:
                    continue
                key = (entry.day, entry.deduction_type)
                totals[key] = totals.get(key, Decimal("0")) + entry.amount

            for (day, kind), amount in totals.items():
                existing = call_store("waiver", self._waivers.find_waiver, teacher.teacher_id, tenant_id, day, kind)
                out.append(
                    WaiverCandidate(
                        teacher_id=teacher.teacher_id,
                        day=day,
                        deduction_type=kind,
                        amount=amount,
                        existing_waiver_id=existing.waiver_id if existing else None,
                    )
                )
        return out

    def preview(
        self,
        *,
        principal: Principal,
        tenant_id: str,
        start: DateLike,
        end: DateLike,
        teacher_id: Optional[str] = None,
        deduction_type: Union[str, DeductionType, None] = None,
    ) -> List[WaiverCandidate]:
        principal.require(Capability.MANAGE_WAIVERS)
        start_d, end_d = validate_date_range(start, end)
        return self._candidates(
            tenant_id=tenant_id,
            start=start_d,
            end=end_d,
            teacher_id=teacher_id,
            deduction_type=parse_deduction_type(deduction_type),
        )

    def waive(
        self,
        *,
        principal: Principal,
        tenant_id: str,
        start: DateLike,
        end: DateLike,
        reason: str,
        teacher_id: Optional[str] = None,
        deduction_type: Union[str, DeductionType, None] = None,
    ) -> WaiverOutcome:
        principal.require(Capability.MANAGE_WAIVERS)
        start_d, end_d = validate_date_range(start, end)
        reason = require_non_empty(reason, "reason")

        candidates = self._candidates(
            tenant_id=tenant_id,
            start=start_d,
            end=end_d,
            teacher_id=teacher_id,
            deduction_type=parse_deduction_type(deduction_type),
        )

        created: list[int] = []
        skipped = 0
        affected: list[str] = []
        for c in candidates:
            if c.already_waived:
                skipped += 1
                continue
            waiver_id = call_store(
                "waiver",
                self._waivers.create_waiver,
                tenant_id=tenant_id,
                teacher_id=c.teacher_id,
                day=c.day,
                deduction_type=c.deduction_type,
                reason=reason,
                original_amount=c.amount,
                admin_id=principal.user_id,
            )
            created.append(waiver_id)
            if c.teacher_id not in affected:
                affected.append(c.teacher_id)

        logger.info(
            "waivers by %s tenant=%s %s..%s created=%d skipped=%d",
            principal.user_id,
            tenant_id,
            start_d.isoformat(),
            end_d.isoformat(),
            len(created),
            skipped,
        )
        return WaiverOutcome(created_ids=created, skipped=skipped, affected_teacher_ids=affected)
