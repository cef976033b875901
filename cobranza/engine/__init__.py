"""Accrual, schedule and delinquency computations."""

from cobranza.engine.accrual import AccrualEngine, installment_totals
from cobranza.engine.audit import BalanceIssue, audit_balance, partial_payments_to_promote
from cobranza.engine.periods import due_date, elapsed_periods
from cobranza.engine.schedule import ScheduledInstallment, build_schedule, upcoming
from cobranza.engine.standing import (
    classify_standing,
    completion_rate,
    days_overdue,
    severity_for,
)

__all__ = [
    "AccrualEngine",
    "BalanceIssue",
    "ScheduledInstallment",
    "audit_balance",
    "build_schedule",
    "classify_standing",
    "completion_rate",
    "days_overdue",
    "due_date",
    "elapsed_periods",
    "installment_totals",
    "partial_payments_to_promote",
    "severity_for",
    "upcoming",
]
