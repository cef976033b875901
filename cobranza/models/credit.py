"""Credit agreement model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from cobranza.models.enums import CreditStatus, Frequency


@dataclass
class Credit:
    """Credit (loan) agreement between a tenant and a client.

    ``paid_installments`` is a denormalized counter maintained by the
    payment workflow; when it is set it is taken as ground truth.
    """

    credit_id: str
    client_id: str
    amount: Decimal  # Principal disbursed
    total_amount: Decimal  # Principal + interest
    balance: Decimal
    frequency: Frequency | str
    start_date: date
    end_date: date
    status: CreditStatus
    installment_amount: Decimal | None = None
    total_installments: int | None = None
    paid_installments: int | None = None
    interest_rate: Decimal | None = None
    created_by: str | None = None  # Cobrador who originated the credit
    delivered_by: str | None = None
    created_at: datetime | None = None

    @property
    def collector_id(self) -> str | None:
        """Cobrador in charge: whoever delivered the money, else the originator."""
        return self.delivered_by or self.created_by
