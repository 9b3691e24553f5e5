from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Principal kind resolved once at the API boundary."""

    ADMIN = "admin"
    CONTROLLER = "controller"
    TEACHER = "teacher"
    REGISTRAR = "registrar"


class Capability(str, Enum):
    VIEW_ALL_SALARIES = "view_all_salaries"
    VIEW_OWN_SALARY = "view_own_salary"
    MANAGE_WAIVERS = "manage_waivers"
    MANAGE_CACHE = "manage_cache"
    MANAGE_SCHEDULES = "manage_schedules"
    EXPORT_SALARIES = "export_salaries"


class DeliveryStatus(str, Enum):
    """Terminal status of a delivery event, set by the meeting subsystem."""

    ENDED = "ended"
    NO_SHOW = "no_show"
    UNKNOWN = "unknown"


class DeductionType(str, Enum):
    LATENESS = "lateness"
    ABSENCE = "absence"


class OccurrenceOutcome(str, Enum):
    ON_TIME = "on_time"
    LATE = "late"
    ABSENT = "absent"


class PaymentStatus(str, Enum):
    PAID = "Paid"
    UNPAID = "Unpaid"
