from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import DeliveryStatus
from ..schedules.model import ClassOccurrence


@dataclass(frozen=True)
class DeliveryEvent:
    """A class link sent to a student, with whatever the session reported back."""

    event_id: int
    tenant_id: str
    teacher_id: str
    student_id: int
    dispatched_at: datetime
    joined_at: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    status: DeliveryStatus = DeliveryStatus.UNKNOWN

    @property
    def attended(self) -> bool:
        return self.status != DeliveryStatus.NO_SHOW and self.joined_at is not None


@dataclass(frozen=True)
class ReconciledOccurrence:
    occurrence: ClassOccurrence
    event: Optional[DeliveryEvent] = None
    delay_minutes: int = 0

    @property
    def matched(self) -> bool:
        return self.event is not None

    @property
    def attended(self) -> bool:
        return self.event is not None and self.event.attended
