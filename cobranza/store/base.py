"""Persistence interface consumed by the engine service."""

from typing import Protocol

from cobranza.models import Client, Credit, CreditStatus, Payment


class CreditRepository(Protocol):
    """Lookups the engine needs from a persistence backend."""

    def get_credit(self, credit_id: str) -> Credit:
        """Return a credit or raise EntityNotFoundError."""
        ...

    def get_credit_payments(self, credit_id: str) -> list[Payment]:
        """Return every payment of a credit, any status, oldest first."""
        ...

    def get_client(self, client_id: str) -> Client:
        """Return a client or raise EntityNotFoundError."""
        ...

    def list_credits(self, status: CreditStatus | None = None) -> list[Credit]:
        """Return credits, optionally restricted to one status."""
        ...
