"""Domain models for credit collection."""

from cobranza.models.base import Event
from cobranza.models.client import Client, Cobrador
from cobranza.models.credit import Credit
from cobranza.models.enums import (
    SETTLED_PAYMENT_STATUSES,
    CreditStatus,
    Frequency,
    InstallmentStatus,
    OverdueSeverity,
    PaymentMethod,
    PaymentStanding,
    PaymentStatus,
    PaymentType,
)
from cobranza.models.payment import Payment

__all__ = [
    "Client",
    "Cobrador",
    "Credit",
    "CreditStatus",
    "Event",
    "Frequency",
    "InstallmentStatus",
    "OverdueSeverity",
    "Payment",
    "PaymentMethod",
    "PaymentStanding",
    "PaymentStatus",
    "PaymentType",
    "SETTLED_PAYMENT_STATUSES",
]
