from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import DeliveryEvent


class DeliveryEventRepository(Protocol):
    def list_delivery_events(self, teacher_id: str, tenant_id: str, start: date, end: date) -> Sequence[DeliveryEvent]:
        """Events dispatched by the teacher between start and end (calendar dates, inclusive)."""

        raise NotImplementedError
