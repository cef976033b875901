"""Tests for payment standing and delinquency severity."""

from datetime import date
from typing import Callable

import pytest

from cobranza.config import EngineConfig
from cobranza.engine.standing import (
    classify_standing,
    completion_rate,
    days_overdue,
    last_payment_date,
    severity_for,
)
from cobranza.models import Credit, CreditStatus, OverdueSeverity, Payment, PaymentStanding, PaymentStatus

AS_OF = date(2024, 3, 15)


class TestClassifyStanding:
    """Tests for classify_standing."""

    @pytest.mark.parametrize(
        ("expected", "completed", "standing"),
        [
            (5, 5, PaymentStanding.CURRENT),
            (5, 7, PaymentStanding.AHEAD),
            (5, 4, PaymentStanding.WARNING),
            (5, 2, PaymentStanding.WARNING),
            (5, 1, PaymentStanding.DANGER),
            (0, 0, PaymentStanding.CURRENT),
        ],
    )
    def test_boundaries(
        self,
        expected: int,
        completed: int,
        standing: PaymentStanding,
        make_credit: Callable[..., Credit],
    ) -> None:
        """Up to three installments behind is a warning, four is danger."""
        credit = make_credit()
        assert classify_standing(credit, expected, completed, pending=10) is standing

    def test_completed_status(self, make_credit: Callable[..., Credit]) -> None:
        """Completed credits are completed regardless of counts."""
        credit = make_credit(status=CreditStatus.COMPLETED)
        assert classify_standing(credit, 10, 0, pending=10) is PaymentStanding.COMPLETED

    def test_nothing_pending(self, make_credit: Callable[..., Credit]) -> None:
        """A credit with nothing pending is completed."""
        assert classify_standing(make_credit(), 30, 24, pending=0) is PaymentStanding.COMPLETED

    def test_pending_unknown(self, make_credit: Callable[..., Credit]) -> None:
        """Without a planned count the credit is judged on expected vs completed."""
        assert classify_standing(make_credit(), 10, 2, pending=None) is PaymentStanding.DANGER

    def test_configurable_threshold(self, make_credit: Callable[..., Credit]) -> None:
        """The warning threshold comes from configuration."""
        config = EngineConfig(warning_max_installments=1)
        assert classify_standing(make_credit(), 5, 3, pending=10, config=config) is PaymentStanding.DANGER


class TestSeverity:
    """Tests for severity_for."""

    @pytest.mark.parametrize(
        ("days", "severity"),
        [
            (0, OverdueSeverity.LIGHT),
            (7, OverdueSeverity.LIGHT),
            (8, OverdueSeverity.MODERATE),
            (30, OverdueSeverity.MODERATE),
            (31, OverdueSeverity.SEVERE),
        ],
    )
    def test_boundaries(self, days: int, severity: OverdueSeverity) -> None:
        """Light up to a week, moderate up to a month, severe beyond."""
        assert severity_for(days) is severity

    def test_configurable(self) -> None:
        """Thresholds come from configuration."""
        config = EngineConfig(light_max_days=3, moderate_max_days=10)
        assert severity_for(4, config) is OverdueSeverity.MODERATE
        assert severity_for(11, config) is OverdueSeverity.SEVERE


class TestDaysOverdue:
    """Tests for days_overdue and last_payment_date."""

    def test_since_last_settled_payment(
        self,
        make_credit: Callable[..., Credit],
        make_payment: Callable[..., Payment],
    ) -> None:
        """Days are counted from the latest applied payment."""
        payments = [
            make_payment(payment_date=date(2024, 3, 2)),
            make_payment(payment_date=date(2024, 3, 5), status=PaymentStatus.PARTIAL),
            make_payment(payment_date=date(2024, 3, 10), status=PaymentStatus.CANCELLED),
        ]

        assert last_payment_date(payments) == date(2024, 3, 5)
        assert days_overdue(make_credit(), payments, AS_OF) == 10

    def test_since_start_without_payments(self, make_credit: Callable[..., Credit]) -> None:
        """Without payments days are counted from the start date."""
        assert last_payment_date([]) is None
        assert days_overdue(make_credit(), [], AS_OF) == 14

    def test_never_negative(
        self,
        make_credit: Callable[..., Credit],
        make_payment: Callable[..., Payment],
    ) -> None:
        """A reference date before the last payment gives zero."""
        payments = [make_payment(payment_date=date(2024, 3, 20))]
        assert days_overdue(make_credit(), payments, AS_OF) == 0


class TestCompletionRate:
    """Tests for completion_rate."""

    def test_rate(self) -> None:
        """Percentage rounded to two decimals."""
        assert completion_rate(3, 1) == 33.33
        assert completion_rate(4, 5) == 125.0

    def test_nothing_expected(self) -> None:
        """Nothing expected yet gives 0."""
        assert completion_rate(0, 0) == 0.0
