"""In-memory credit store with referential integrity."""

from dataclasses import dataclass, field
from datetime import date, datetime, time

from cobranza.exceptions import DuplicateEntityError, EntityNotFoundError, ReferentialIntegrityError
from cobranza.models import Client, Cobrador, Credit, CreditStatus, Payment


@dataclass
class CreditStore:
    """In-memory store for collection entities with relationship tracking."""

    # Primary entities
    cobradores: dict[str, Cobrador] = field(default_factory=dict)
    clients: dict[str, Client] = field(default_factory=dict)
    credits: dict[str, Credit] = field(default_factory=dict)

    # Payments, append-only
    payments: list[Payment] = field(default_factory=list)

    # Relationship indexes
    _client_credits: dict[str, list[str]] = field(default_factory=dict)
    _credit_payments: dict[str, list[int]] = field(default_factory=dict)

    def add_cobrador(self, cobrador: Cobrador) -> None:
        """Add a cobrador to the store."""
        self.cobradores[cobrador.cobrador_id] = cobrador

    def add_client(self, client: Client) -> None:
        """Add a client to the store."""
        if client.assigned_cobrador_id and client.assigned_cobrador_id not in self.cobradores:
            raise ReferentialIntegrityError(f"Cobrador {client.assigned_cobrador_id} not found")

        if client.created_at is None:
            client.created_at = datetime.now()
        self.clients[client.client_id] = client
        self._client_credits.setdefault(client.client_id, [])

    def add_credit(self, credit: Credit) -> None:
        """Add a credit to the store.

        Raises
        ------
        DuplicateEntityError
            If the credit ID is already stored; its payments are kept.
        ReferentialIntegrityError
            If the client or a cobrador is unknown.
        """
        if credit.credit_id in self.credits:
            raise DuplicateEntityError(f"Credit {credit.credit_id} already exists")
        if credit.client_id not in self.clients:
            raise ReferentialIntegrityError(f"Client {credit.client_id} not found")

        for cobrador_id in (credit.created_by, credit.delivered_by):
            if cobrador_id and cobrador_id not in self.cobradores:
                raise ReferentialIntegrityError(f"Cobrador {cobrador_id} not found")

        if credit.created_at is None:
            credit.created_at = datetime.now()
        self.credits[credit.credit_id] = credit
        self._client_credits[credit.client_id].append(credit.credit_id)
        self._credit_payments[credit.credit_id] = []

    def add_payment(self, payment: Payment) -> None:
        """Add a payment to the store."""
        if payment.credit_id not in self.credits:
            raise ReferentialIntegrityError(f"Credit {payment.credit_id} not found")

        if payment.created_at is None:
            payment.created_at = datetime.now()
        idx = len(self.payments)
        self.payments.append(payment)
        self._credit_payments[payment.credit_id].append(idx)

    # Query methods
    def get_cobrador(self, cobrador_id: str) -> Cobrador:
        """Get a cobrador by ID."""
        try:
            return self.cobradores[cobrador_id]
        except KeyError:
            raise EntityNotFoundError(f"Cobrador {cobrador_id} not found") from None

    def get_client(self, client_id: str) -> Client:
        """Get a client by ID."""
        try:
            return self.clients[client_id]
        except KeyError:
            raise EntityNotFoundError(f"Client {client_id} not found") from None

    def get_credit(self, credit_id: str) -> Credit:
        """Get a credit by ID."""
        try:
            return self.credits[credit_id]
        except KeyError:
            raise EntityNotFoundError(f"Credit {credit_id} not found") from None

    def get_credit_payments(self, credit_id: str) -> list[Payment]:
        """Get all payments for a credit ordered by payment date."""
        if credit_id not in self.credits:
            raise EntityNotFoundError(f"Credit {credit_id} not found")
        indices = self._credit_payments.get(credit_id, [])
        return sorted((self.payments[i] for i in indices), key=_payment_sort_key)

    def get_client_credits(self, client_id: str) -> list[Credit]:
        """Get all credits for a client."""
        credit_ids = self._client_credits.get(client_id, [])
        return [self.credits[cid] for cid in credit_ids]

    def list_credits(self, status: CreditStatus | None = None) -> list[Credit]:
        """List credits, optionally filtered by status."""
        if status is None:
            return list(self.credits.values())
        return [c for c in self.credits.values() if c.status == status]

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "cobradores": len(self.cobradores),
            "clients": len(self.clients),
            "credits": len(self.credits),
            "payments": len(self.payments),
        }


def _payment_sort_key(payment: Payment) -> datetime:
    value: date | datetime = payment.payment_date
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime.combine(value, time.min)
