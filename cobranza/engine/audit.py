"""Read-only consistency checks between credits and their payments.

These checks only report. Correcting a credit or promoting a payment is
left to the payment-recording workflow.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from cobranza.engine.accrual import ZERO, installment_totals
from cobranza.models import Credit, CreditStatus, Payment, PaymentStatus

BALANCE_TOLERANCE = Decimal("0.01")


@dataclass
class BalanceIssue:
    """A detected inconsistency on a credit."""

    credit_id: str
    code: str  # balance_mismatch, should_be_completed, should_not_be_completed
    message: str
    difference: Decimal = ZERO


def partial_payments_to_promote(
    credit: Credit, payments: Iterable[Payment]
) -> list[Payment]:
    """Partial payments whose installment has since been fully covered.

    Returns the payments in input order; an empty list when the credit has
    no usable ``installment_amount``.
    """
    threshold = credit.installment_amount
    if threshold is None or Decimal(threshold) <= ZERO:
        return []
    threshold = Decimal(threshold)

    payments = list(payments)
    totals = installment_totals(payments)
    return [
        p
        for p in payments
        if p.status == PaymentStatus.PARTIAL
        and p.installment_number is not None
        and totals.get(p.installment_number, ZERO) >= threshold
    ]


def settled_total(payments: Iterable[Payment]) -> Decimal:
    """Sum of amounts applied to the credit (completed and partial payments)."""
    return sum((Decimal(p.amount) for p in payments if p.is_settled), ZERO)


def audit_balance(credit: Credit, payments: Iterable[Payment]) -> list[BalanceIssue]:
    """Check ``balance`` against applied payments and the credit status."""
    issues = []
    balance = Decimal(credit.balance)

    expected_balance = Decimal(credit.total_amount) - settled_total(payments)
    difference = balance - expected_balance
    if abs(difference) > BALANCE_TOLERANCE:
        issues.append(
            BalanceIssue(
                credit_id=credit.credit_id,
                code="balance_mismatch",
                message=f"balance {balance} differs from expected {expected_balance}",
                difference=difference,
            )
        )

    if balance <= ZERO and credit.status == CreditStatus.ACTIVE:
        issues.append(
            BalanceIssue(
                credit_id=credit.credit_id,
                code="should_be_completed",
                message="credit is fully paid but still active",
            )
        )
    elif balance > ZERO and credit.status == CreditStatus.COMPLETED:
        issues.append(
            BalanceIssue(
                credit_id=credit.credit_id,
                code="should_not_be_completed",
                message=f"credit is completed with balance {balance}",
            )
        )

    return issues
