"""Installment accrual and delinquency computation for a single credit.

Every method recomputes from the credit fields and the payment records it
is given; nothing is cached and neither argument is mutated, so repeated
calls with the same inputs and the same ``as_of`` return the same result.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterable

from cobranza.config import EngineConfig
from cobranza.engine.periods import elapsed_periods, to_date
from cobranza.exceptions import MissingScheduleData
from cobranza.models import Credit, Payment

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def installment_totals(payments: Iterable[Payment]) -> dict[int, Decimal]:
    """Sum settled payment amounts per installment number.

    Cancelled, failed and pending payments are left out, as are legacy
    payments without an installment number.
    """
    totals: dict[int, Decimal] = defaultdict(lambda: ZERO)
    for payment in payments:
        if not payment.is_settled or payment.installment_number is None:
            continue
        totals[payment.installment_number] += Decimal(payment.amount)
    return dict(totals)


class AccrualEngine:
    """Derive schedule-adherence metrics for credits.

    Parameters
    ----------
    config : EngineConfig | None
        Policy settings (custom period length).
    clock : Callable[[], date] | None
        Source of "today" used when ``as_of`` is omitted.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        clock: Callable[[], date | datetime] | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self._clock = clock or date.today

    def today(self) -> date:
        """Current date according to the engine clock."""
        return to_date(self._clock())

    def expected_installments(
        self, credit: Credit, as_of: date | datetime | None = None
    ) -> int:
        """Installments that should have been paid by ``as_of`` (inclusive).

        Not bounded by ``total_installments``: a credit whose term has run
        out without being closed keeps accruing.
        """
        reference = self.today() if as_of is None else as_of
        return elapsed_periods(
            credit.frequency,
            credit.start_date,
            reference,
            custom_period_days=self.config.custom_period_days,
        )

    def completed_installments_count(
        self, credit: Credit, payments: Iterable[Payment]
    ) -> int:
        """Number of fully paid installment slots.

        A set ``paid_installments`` counter wins over the payment history.
        Otherwise settled payments are grouped by installment number and a
        group counts once its total reaches ``installment_amount``.
        """
        if credit.paid_installments is not None:
            logger.debug(
                "Credit %s: using paid_installments counter (%d)",
                credit.credit_id,
                credit.paid_installments,
            )
            return credit.paid_installments

        threshold = credit.installment_amount
        if threshold is None or Decimal(threshold) <= ZERO:
            return 0
        threshold = Decimal(threshold)

        totals = installment_totals(payments)
        return sum(1 for total in totals.values() if total >= threshold)

    def is_overdue(
        self,
        credit: Credit,
        payments: Iterable[Payment],
        as_of: date | datetime | None = None,
    ) -> bool:
        """Whether fewer installments are completed than the schedule expects."""
        expected = self.expected_installments(credit, as_of)
        if expected == 0:
            return False
        return expected > self.completed_installments_count(credit, payments)

    def overdue_installments(
        self,
        credit: Credit,
        payments: Iterable[Payment],
        as_of: date | datetime | None = None,
    ) -> int:
        """Expected minus completed installments, floored at 0."""
        expected = self.expected_installments(credit, as_of)
        return max(0, expected - self.completed_installments_count(credit, payments))

    def overdue_amount(
        self,
        credit: Credit,
        payments: Iterable[Payment],
        as_of: date | datetime | None = None,
    ) -> Decimal:
        """Money owed for the installments behind schedule.

        Without an ``installment_amount`` the delinquency cannot be
        quantified and the result is 0.
        """
        if credit.installment_amount is None:
            return ZERO
        behind = self.overdue_installments(credit, payments, as_of)
        if behind == 0:
            return ZERO
        return behind * Decimal(credit.installment_amount)

    def pending_installments(self, credit: Credit, payments: Iterable[Payment]) -> int:
        """Planned installments not yet completed.

        Raises
        ------
        MissingScheduleData
            If the credit has no ``total_installments``.
        """
        if credit.total_installments is None:
            raise MissingScheduleData(credit.credit_id)
        completed = self.completed_installments_count(credit, payments)
        return max(0, credit.total_installments - completed)
