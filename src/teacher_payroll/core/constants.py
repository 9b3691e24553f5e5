"""Constants and defaults.

Note: Keep defaults here so deduction amounts are not repeated across call sites.
"""

from decimal import Decimal

# Deduction defaults used when a tenant has no DeductionConfig row (or the
# row's effective period does not cover a date).
DEFAULT_ABSENCE_AMOUNT = Decimal("30")
DEFAULT_LATENESS_TIERS = (
    (0, Decimal("0")),
    (5, Decimal("10")),
    (10, Decimal("20")),
)
DEFAULT_INCLUDE_SUNDAYS = True

DEFAULT_BATCH_WORKERS = 4
DEFAULT_TENANT_ID = "default"

MONEY_PLACES = Decimal("0.01")
