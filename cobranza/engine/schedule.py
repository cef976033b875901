"""Installment-by-installment payment schedule of a credit."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable

from cobranza.engine.accrual import ZERO, AccrualEngine, installment_totals
from cobranza.engine.periods import due_date, elapsed_periods, resolve_frequency, to_date
from cobranza.exceptions import MissingScheduleData
from cobranza.models import Credit, InstallmentStatus, Payment


@dataclass
class ScheduledInstallment:
    """One planned installment and how much of it has been paid."""

    credit_id: str
    installment_number: int
    due_date: date
    amount: Decimal
    paid_amount: Decimal
    status: InstallmentStatus

    @property
    def remaining_amount(self) -> Decimal:
        """Amount still owed on this installment."""
        return max(ZERO, self.amount - self.paid_amount)


def build_schedule(
    engine: AccrualEngine,
    credit: Credit,
    payments: Iterable[Payment],
    as_of: date | datetime | None = None,
) -> list[ScheduledInstallment]:
    """Build the full schedule of a credit as of a reference date.

    An unpaid installment is ``overdue`` when its number is within
    ``expected_installments``, so the schedule agrees with the accrual
    counts even for monthly credits started late in a month.

    Raises
    ------
    MissingScheduleData
        If the credit has no ``total_installments``.
    """
    if credit.total_installments is None:
        raise MissingScheduleData(credit.credit_id)

    frequency = resolve_frequency(credit.frequency)
    reference = engine.today() if as_of is None else as_of
    expected = elapsed_periods(
        frequency,
        credit.start_date,
        reference,
        custom_period_days=engine.config.custom_period_days,
    )
    totals = installment_totals(payments)
    amount = Decimal(credit.installment_amount) if credit.installment_amount else ZERO

    schedule = []
    for number in range(1, credit.total_installments + 1):
        paid = totals.get(number, ZERO)
        if amount > ZERO and paid >= amount:
            status = InstallmentStatus.PAID
        elif paid > ZERO:
            status = InstallmentStatus.PARTIAL
        elif number <= expected:
            status = InstallmentStatus.OVERDUE
        else:
            status = InstallmentStatus.PENDING

        schedule.append(
            ScheduledInstallment(
                credit_id=credit.credit_id,
                installment_number=number,
                due_date=due_date(
                    frequency,
                    credit.start_date,
                    number,
                    custom_period_days=engine.config.custom_period_days,
                ),
                amount=amount,
                paid_amount=paid,
                status=status,
            )
        )
    return schedule


def upcoming(
    schedule: Iterable[ScheduledInstallment],
    until: date | datetime,
) -> list[ScheduledInstallment]:
    """Unpaid installments due on or before ``until``, in due-date order."""
    limit = to_date(until)
    pending = [
        item
        for item in schedule
        if item.status is not InstallmentStatus.PAID and item.due_date <= limit
    ]
    return sorted(pending, key=lambda item: (item.due_date, item.installment_number))
