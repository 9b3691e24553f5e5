from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from ..common.stores import call_store
from ..core.enums import DeductionType
from .model import DeductionWaiver, LedgerEntry
from .repository import WaiverRepository


class WaiverLayer:
    """Moves waived deductions from charged to waived on the ledger.

    Only entries with a positive amount are looked up. A waiver covers every
    entry sharing its (teacher, date, type) key; re-applying is a no-op.
    """

    def __init__(self, waivers: WaiverRepository):
        self._waivers = waivers

    def apply(self, teacher_id: str, tenant_id: str, entries: Iterable[LedgerEntry]) -> List[LedgerEntry]:
        found: Dict[Tuple[date, DeductionType], Optional[DeductionWaiver]] = {}
        out: list[LedgerEntry] = []

        for entry in entries:
            if entry.waived or entry.deduction_type is None or entry.amount <= 0:
                out.append(entry)
                continue

            key = (entry.day, entry.deduction_type)
            if key not in found:
                found[key] = call_store(
                    "waiver", self._waivers.find_waiver, teacher_id, tenant_id, entry.day, entry.deduction_type
                )

            waiver = found[key]
            if waiver is None:
                out.append(entry)
            else:
                out.append(
                    replace(
                        entry,
                        waiver_id=waiver.waiver_id,
                        waiver_reason=waiver.reason,
                        waived_by=waiver.admin_id,
                    )
                )

        return out
