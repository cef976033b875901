"""Payment model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from cobranza.models.enums import (
    SETTLED_PAYMENT_STATUSES,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
)


@dataclass
class Payment:
    """Payment transaction recorded against a credit."""

    payment_id: str
    credit_id: str
    amount: Decimal
    payment_date: date | datetime
    status: PaymentStatus
    installment_number: int | None = None  # Several partials may share one
    client_id: str | None = None
    cobrador_id: str | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_type: PaymentType = PaymentType.REGULAR
    created_at: datetime | None = None

    @property
    def is_settled(self) -> bool:
        """Whether the amount was actually applied to the credit."""
        try:
            status = PaymentStatus(self.status)
        except ValueError:
            return False
        return status in SETTLED_PAYMENT_STATUSES
