"""Pytest configuration and fixtures."""

import itertools
from datetime import date
from decimal import Decimal
from typing import Any, Callable

import pytest

from cobranza.models import (
    Client,
    Cobrador,
    Credit,
    CreditStatus,
    Frequency,
    Payment,
    PaymentStatus,
)
from cobranza.service import CreditEngineService
from cobranza.store.memory import CreditStore

AS_OF = date(2024, 3, 15)


@pytest.fixture
def as_of() -> date:
    """Fixed reference date for reproducible tests."""
    return AS_OF


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def make_credit() -> Callable[..., Credit]:
    """Factory for credits; keyword arguments override the defaults.

    Default: daily credit of 24 installments of 50 started 2024-03-01.
    """

    def _make(**overrides: Any) -> Credit:
        values: dict[str, Any] = {
            "credit_id": "cred-001",
            "client_id": "cli-001",
            "amount": Decimal("1000.00"),
            "total_amount": Decimal("1200.00"),
            "balance": Decimal("1200.00"),
            "frequency": Frequency.DAILY,
            "start_date": date(2024, 3, 1),
            "end_date": date(2024, 3, 24),
            "status": CreditStatus.ACTIVE,
            "installment_amount": Decimal("50.00"),
            "total_installments": 24,
            "created_by": "cob-001",
        }
        values.update(overrides)
        return Credit(**values)

    return _make


@pytest.fixture
def make_payment() -> Callable[..., Payment]:
    """Factory for payments with sequential IDs."""
    counter = itertools.count(1)

    def _make(
        installment_number: int | None = 1,
        amount: Decimal | str = "50.00",
        status: PaymentStatus | str = PaymentStatus.COMPLETED,
        payment_date: date = date(2024, 3, 1),
        credit_id: str = "cred-001",
        **overrides: Any,
    ) -> Payment:
        return Payment(
            payment_id=f"pay-{next(counter):03d}",
            credit_id=credit_id,
            amount=Decimal(amount),
            payment_date=payment_date,
            status=status,
            installment_number=installment_number,
            **overrides,
        )

    return _make


@pytest.fixture
def store() -> CreditStore:
    """Store with one cobrador and one client, no credits."""
    store = CreditStore()
    store.add_cobrador(Cobrador(cobrador_id="cob-001", name="Ana Cobradora"))
    store.add_client(
        Client(
            client_id="cli-001",
            name="Juan Pérez",
            phone="+59170000000",
            client_category="A",
            assigned_cobrador_id="cob-001",
        )
    )
    return store


@pytest.fixture
def service(store: CreditStore, as_of: date) -> CreditEngineService:
    """Engine service over the store with a frozen clock."""
    return CreditEngineService(store, clock=lambda: as_of)
