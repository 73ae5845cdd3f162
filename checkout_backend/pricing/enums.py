"""
Types énumérés du moteur de prix (remplacent les chaînes "recurring", "percentage", ...).
Les valeurs inconnues sont ramenées vers une valeur par défaut explicite via `parse`.
"""
from enum import Enum
from typing import Any


class _ParsableEnum(str, Enum):
    @classmethod
    def parse(cls, value: Any, default: "_ParsableEnum"):
        if isinstance(value, cls):
            return value
        raw = str(value or "").strip().lower()
        for member in cls:
            if member.value == raw:
                return member
        return default


class MembershipType(_ParsableEnum):
    RECURRING = "recurring"
    ONE_TIME = "onetime"


class DiscountType(_ParsableEnum):
    PERCENTAGE = "percentage"
    AMOUNT = "amount"


class PaymentType(_ParsableEnum):
    PAID = "paid"
    FREE = "free"
    DONATION = "donation"


class ProductType(_ParsableEnum):
    PAID_EVENT = "paidevent"
    FREE_EVENT = "freeevent"
    DONATION_EVENT = "donationevent"
    PLAN = "plan"


class PricingMode(_ParsableEnum):
    ONE_TIME = "one_time"
    RECURRING = "recurring"
    RECURRING_DONATION = "recurring_donation"
