"""Credit-id based access to the accrual engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Callable

from cobranza.config import EngineConfig
from cobranza.engine.accrual import AccrualEngine
from cobranza.engine.schedule import ScheduledInstallment, build_schedule
from cobranza.engine.standing import (
    classify_standing,
    completion_rate,
    days_overdue,
    severity_for,
)
from cobranza.exceptions import MissingScheduleData
from cobranza.models import Credit, OverdueSeverity, Payment, PaymentStanding
from cobranza.store.base import CreditRepository

logger = logging.getLogger(__name__)


@dataclass
class CreditSnapshot:
    """All derived metrics of one credit at one reference date."""

    credit_id: str
    as_of: date
    expected_installments: int
    completed_installments: int
    pending_installments: int | None  # None: credit has no planned installment count
    overdue_installments: int
    is_overdue: bool
    overdue_amount: Decimal
    completion_rate: float
    days_overdue: int
    severity: OverdueSeverity | None  # None unless overdue
    standing: PaymentStanding

    @property
    def pending_available(self) -> bool:
        return self.pending_installments is not None


class CreditEngineService:
    """Resolve credits and payments through a repository and run the engine.

    Parameters
    ----------
    repository : CreditRepository
        Persistence backend (in-memory store or PostgreSQL).
    config : EngineConfig | None
        Policy settings.
    clock : Callable[[], date] | None
        Source of "today" for calls without ``as_of``.
    """

    def __init__(
        self,
        repository: CreditRepository,
        config: EngineConfig | None = None,
        clock: Callable[[], date | datetime] | None = None,
    ) -> None:
        self.repository = repository
        self.config = config or EngineConfig()
        self.engine = AccrualEngine(self.config, clock=clock)

    def _load(self, credit_id: str) -> tuple[Credit, list[Payment]]:
        credit = self.repository.get_credit(credit_id)
        return credit, self.repository.get_credit_payments(credit_id)

    def expected_installments(self, credit_id: str, as_of: date | datetime | None = None) -> int:
        credit = self.repository.get_credit(credit_id)
        return self.engine.expected_installments(credit, as_of)

    def completed_installments_count(self, credit_id: str) -> int:
        credit = self.repository.get_credit(credit_id)
        if credit.paid_installments is not None:
            # Counter is authoritative, skip the payment lookup
            return credit.paid_installments
        return self.engine.completed_installments_count(
            credit, self.repository.get_credit_payments(credit_id)
        )

    def is_overdue(self, credit_id: str, as_of: date | datetime | None = None) -> bool:
        credit, payments = self._load(credit_id)
        return self.engine.is_overdue(credit, payments, as_of)

    def overdue_amount(self, credit_id: str, as_of: date | datetime | None = None) -> Decimal:
        credit, payments = self._load(credit_id)
        return self.engine.overdue_amount(credit, payments, as_of)

    def pending_installments(self, credit_id: str) -> int:
        """Planned installments not yet completed.

        Raises
        ------
        MissingScheduleData
            If the credit has no ``total_installments``.
        """
        credit, payments = self._load(credit_id)
        return self.engine.pending_installments(credit, payments)

    def schedule(
        self, credit_id: str, as_of: date | datetime | None = None
    ) -> list[ScheduledInstallment]:
        credit, payments = self._load(credit_id)
        return build_schedule(self.engine, credit, payments, as_of)

    def standing(self, credit_id: str, as_of: date | datetime | None = None) -> CreditSnapshot:
        credit, payments = self._load(credit_id)
        return self.snapshot(credit, payments, as_of)

    def snapshot(
        self,
        credit: Credit,
        payments: list[Payment],
        as_of: date | datetime | None = None,
    ) -> CreditSnapshot:
        """Compute every metric of an already loaded credit."""
        reference = self.engine.today() if as_of is None else as_of
        if isinstance(reference, datetime):
            reference = reference.date()

        expected = self.engine.expected_installments(credit, reference)
        completed = self.engine.completed_installments_count(credit, payments)
        try:
            pending: int | None = self.engine.pending_installments(credit, payments)
        except MissingScheduleData:
            logger.debug("Credit %s has no total_installments", credit.credit_id)
            pending = None

        behind = max(0, expected - completed)
        overdue = expected > completed
        days = days_overdue(credit, payments, reference) if overdue else 0

        return CreditSnapshot(
            credit_id=credit.credit_id,
            as_of=reference,
            expected_installments=expected,
            completed_installments=completed,
            pending_installments=pending,
            overdue_installments=behind,
            is_overdue=overdue,
            overdue_amount=self.engine.overdue_amount(credit, payments, reference),
            completion_rate=completion_rate(expected, completed),
            days_overdue=days,
            severity=severity_for(days, self.config) if overdue else None,
            standing=classify_standing(credit, expected, completed, pending, self.config),
        )
