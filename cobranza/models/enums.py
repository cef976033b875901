"""Enumeration types for credit collection entities."""

from enum import Enum


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: "Frequency | str | None") -> "Frequency":
        """Parse a stored frequency value, mapping unknown values to CUSTOM."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.CUSTOM


class CreditStatus(str, Enum):
    PENDING_APPROVAL = "pending_approval"
    WAITING_DELIVERY = "waiting_delivery"
    ACTIVE = "active"
    COMPLETED = "completed"
    DEFAULTED = "defaulted"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    ON_HOLD = "on_hold"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    PARTIAL = "partial"
    CANCELLED = "cancelled"
    FAILED = "failed"


# Statuses whose amounts were actually applied to the credit.
SETTLED_PAYMENT_STATUSES = frozenset({PaymentStatus.COMPLETED, PaymentStatus.PARTIAL})


class PaymentMethod(str, Enum):
    CASH = "cash"
    TRANSFER = "transfer"
    CARD = "card"
    MOBILE_PAYMENT = "mobile_payment"


class PaymentType(str, Enum):
    REGULAR = "regular"
    DOWN_PAYMENT = "down_payment"
    EXTRA = "extra"


class InstallmentStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"


class PaymentStanding(str, Enum):
    COMPLETED = "completed"
    AHEAD = "ahead"
    CURRENT = "current"
    WARNING = "warning"
    DANGER = "danger"


class OverdueSeverity(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    SEVERE = "severe"
