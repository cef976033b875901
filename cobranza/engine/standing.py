"""Payment standing and delinquency severity of a credit."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from cobranza.config import EngineConfig
from cobranza.engine.periods import to_date
from cobranza.models import Credit, CreditStatus, OverdueSeverity, Payment, PaymentStanding


def classify_standing(
    credit: Credit,
    expected: int,
    completed: int,
    pending: int | None,
    config: EngineConfig | None = None,
) -> PaymentStanding:
    """Classify how a credit is keeping up with its schedule.

    ``pending`` is None when the credit has no planned installment count;
    the credit is then judged on expected vs completed only.
    """
    config = config or EngineConfig()

    if credit.status == CreditStatus.COMPLETED or pending == 0:
        return PaymentStanding.COMPLETED

    behind = max(0, expected - completed)
    if behind == 0:
        return PaymentStanding.AHEAD if completed > expected else PaymentStanding.CURRENT
    if behind <= config.warning_max_installments:
        return PaymentStanding.WARNING
    return PaymentStanding.DANGER


def last_payment_date(payments: Iterable[Payment]) -> date | None:
    """Date of the most recent settled payment, if any."""
    dates = [to_date(p.payment_date) for p in payments if p.is_settled]
    return max(dates) if dates else None


def days_overdue(
    credit: Credit,
    payments: Iterable[Payment],
    as_of: date | datetime,
) -> int:
    """Days since the last settled payment, or since the start date without one."""
    since = last_payment_date(payments) or to_date(credit.start_date)
    return max(0, (to_date(as_of) - since).days)


def severity_for(days: int, config: EngineConfig | None = None) -> OverdueSeverity:
    """Bucket a days-overdue figure into a severity level."""
    config = config or EngineConfig()
    if days <= config.light_max_days:
        return OverdueSeverity.LIGHT
    if days <= config.moderate_max_days:
        return OverdueSeverity.MODERATE
    return OverdueSeverity.SEVERE


def completion_rate(expected: int, completed: int) -> float:
    """Completed over expected installments as a percentage (2 decimals)."""
    if expected <= 0:
        return 0.0
    return round(completed / expected * 100, 2)
