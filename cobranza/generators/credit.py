"""Synthetic credit portfolio generator."""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from cobranza.config import EngineConfig
from cobranza.engine.accrual import ZERO, AccrualEngine
from cobranza.engine.periods import due_date, elapsed_periods
from cobranza.generators.base import BaseGenerator
from cobranza.models import (
    Client,
    Cobrador,
    Credit,
    CreditStatus,
    Frequency,
    Payment,
    PaymentMethod,
    PaymentStatus,
)
from cobranza.store.memory import CreditStore

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# Planned installments and share of the portfolio per frequency
FREQUENCY_PLANS = {
    Frequency.DAILY: (24, 0.50),
    Frequency.WEEKLY: (12, 0.25),
    Frequency.BIWEEKLY: (6, 0.10),
    Frequency.MONTHLY: (6, 0.15),
}

INTEREST_RATES = [Decimal("0.10"), Decimal("0.15"), Decimal("0.20")]

CLIENT_CATEGORIES = ["A", "B", "C"]
CLIENT_CATEGORY_WEIGHTS = [0.5, 0.3, 0.2]


class PortfolioGenerator(BaseGenerator):
    """Generate clients, collectors, credits and payment histories.

    Payment histories follow one of four behaviors:
    - on_time: every expected installment paid within 2 days
    - late: paid with delay and 1-3 installments behind
    - partial: installments split in several payments, last one open
    - defaulter: pays a few installments, then stops
    """

    BEHAVIORS = ["on_time", "late", "partial", "defaulter"]
    BEHAVIOR_WEIGHTS = [0.55, 0.20, 0.15, 0.10]

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "es_MX",
        config: EngineConfig | None = None,
    ) -> None:
        super().__init__(seed, locale)
        self.config = config or EngineConfig()
        self._engine = AccrualEngine(self.config)

    def generate(
        self,
        num_clients: int,
        as_of: date | None = None,
        clients_per_cobrador: int = 10,
    ) -> CreditStore:
        """Generate a portfolio with one credit per client.

        Parameters
        ----------
        num_clients : int
            Number of clients (and credits) to generate.
        as_of : date | None
            Date the payment histories run up to (default: today).
        clients_per_cobrador : int
            Approximate number of clients assigned to each cobrador.

        Returns
        -------
        CreditStore
            Store containing all generated entities.
        """
        as_of = as_of or date.today()
        store = CreditStore()

        num_cobradores = max(1, -(-num_clients // clients_per_cobrador))
        cobradores = [self.generate_cobrador() for _ in range(num_cobradores)]
        for cobrador in cobradores:
            store.add_cobrador(cobrador)

        for _ in range(num_clients):
            cobrador = self.rng.choice(cobradores)
            client = self.generate_client(cobrador.cobrador_id, as_of)
            store.add_client(client)

            credit, payments = self.generate_credit(client, cobrador.cobrador_id, as_of)
            store.add_credit(credit)
            for payment in payments:
                store.add_payment(payment)

        logger.info(
            "Generated portfolio: %d cobradores, %d clients, %d credits, %d payments",
            len(store.cobradores),
            len(store.clients),
            len(store.credits),
            len(store.payments),
        )
        return store

    def generate_cobrador(self) -> Cobrador:
        """Generate a cobrador."""
        return Cobrador(cobrador_id=self.new_id(), name=self.fake.name())

    def generate_client(self, cobrador_id: str | None = None, as_of: date | None = None) -> Client:
        """Generate a client registered 1 month to 2 years before ``as_of``."""
        as_of = as_of or date.today()
        category = self.rng.choices(CLIENT_CATEGORIES, weights=CLIENT_CATEGORY_WEIGHTS, k=1)[0]
        return Client(
            client_id=self.new_id(),
            name=self.fake.name(),
            phone=self.fake.phone_number(),
            client_category=category,
            assigned_cobrador_id=cobrador_id,
            created_at=datetime.combine(as_of, time.min) - timedelta(days=self.rng.randint(30, 2 * 365)),
        )

    def generate_credit(
        self,
        client: Client,
        cobrador_id: str | None,
        as_of: date,
    ) -> tuple[Credit, list[Payment]]:
        """Generate a credit and its payment history up to ``as_of``."""
        frequency = self.rng.choices(
            list(FREQUENCY_PLANS),
            weights=[weight for _, weight in FREQUENCY_PLANS.values()],
            k=1,
        )[0]
        total_installments = FREQUENCY_PLANS[frequency][0]

        amount = Decimal(self.rng.randint(5, 100) * 100)
        rate = self.rng.choice(INTEREST_RATES)
        installment_amount = (amount * (1 + rate) / total_installments).quantize(CENT)
        total_amount = installment_amount * total_installments

        # Anywhere from brand new to 20% past the planned term
        term_days = (due_date(frequency, as_of, total_installments + 1) - as_of).days
        start_date = as_of - timedelta(days=self.rng.randint(0, int(term_days * 1.2)))

        credit = Credit(
            credit_id=self.new_id(),
            client_id=client.client_id,
            amount=amount,
            total_amount=total_amount,
            balance=total_amount,
            frequency=frequency,
            start_date=start_date,
            end_date=due_date(frequency, start_date, total_installments),
            status=CreditStatus.ACTIVE,
            installment_amount=installment_amount,
            total_installments=total_installments,
            interest_rate=rate,
            created_by=cobrador_id,
            delivered_by=cobrador_id,
            created_at=datetime.combine(start_date, time.min),
        )

        payments = self._generate_payments(credit, as_of)

        applied = sum((p.amount for p in payments if p.is_settled), ZERO)
        credit.balance = max(ZERO, total_amount - applied)
        if credit.balance == ZERO:
            credit.status = CreditStatus.COMPLETED

        # Some records carry the denormalized counter, kept consistent here
        if self.rng.random() < 0.2:
            credit.paid_installments = self._engine.completed_installments_count(credit, payments)

        return credit, payments

    def _generate_payments(self, credit: Credit, as_of: date) -> list[Payment]:
        """Generate the payment history of a credit."""
        behavior = self.rng.choices(self.BEHAVIORS, weights=self.BEHAVIOR_WEIGHTS, k=1)[0]
        expected = min(
            credit.total_installments,
            elapsed_periods(credit.frequency, credit.start_date, as_of),
        )

        if behavior == "on_time" or behavior == "partial":
            to_pay = expected
        elif behavior == "late":
            to_pay = max(0, expected - self.rng.randint(1, 3))
        else:  # defaulter
            to_pay = min(expected, self.rng.randint(0, 3))

        payments: list[Payment] = []
        amount = credit.installment_amount
        for number in range(1, to_pay + 1):
            delay = self.rng.randint(0, 2) if behavior != "late" else self.rng.randint(1, 10)
            paid_on = min(as_of, due_date(credit.frequency, credit.start_date, number) + timedelta(days=delay))

            if behavior == "partial" and self.rng.random() < 0.4:
                first = (amount * Decimal("0.6")).quantize(CENT)
                # Unreconciled splits keep the partial status on the first piece
                first_status = PaymentStatus.PARTIAL if self.rng.random() < 0.5 else PaymentStatus.COMPLETED
                payments.append(self._payment(credit, number, first, paid_on, first_status))
                payments.append(self._payment(credit, number, amount - first, paid_on, PaymentStatus.COMPLETED))
            else:
                payments.append(self._payment(credit, number, amount, paid_on, PaymentStatus.COMPLETED))

        # Open partial payment on the next installment
        if behavior == "partial" and to_pay < credit.total_installments:
            number = to_pay + 1
            paid_on = min(as_of, due_date(credit.frequency, credit.start_date, number))
            partial = (amount * Decimal("0.4")).quantize(CENT)
            payments.append(self._payment(credit, number, partial, paid_on, PaymentStatus.PARTIAL))

        # Voided attempts that must not count toward anything
        if payments and self.rng.random() < 0.1:
            void_status = self.rng.choice([PaymentStatus.CANCELLED, PaymentStatus.FAILED])
            first_paid = payments[0]
            payments.append(
                self._payment(credit, first_paid.installment_number, amount, first_paid.payment_date, void_status)
            )

        return payments

    def _payment(
        self,
        credit: Credit,
        number: int | None,
        amount: Decimal,
        paid_on: date,
        status: PaymentStatus,
    ) -> Payment:
        return Payment(
            payment_id=self.new_id(),
            credit_id=credit.credit_id,
            amount=amount,
            payment_date=paid_on,
            status=status,
            installment_number=number,
            client_id=credit.client_id,
            cobrador_id=credit.created_by,
            payment_method=self.rng.choice(list(PaymentMethod)),
            created_at=datetime.combine(paid_on, time.min),
        )
