"""Portfolio report: schedule progress of every active credit."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from cobranza.exceptions import EntityNotFoundError
from cobranza.models import CreditStatus, PaymentStanding
from cobranza.service import CreditEngineService
from cobranza.sinks.serialization import dataclass_to_dict

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
NOT_AVAILABLE = "N/A"


@dataclass
class PortfolioRow:
    """Progress of one credit."""

    credit_id: str
    client_name: str | None
    amount: Decimal
    balance: Decimal
    expected_installments: int
    completed_installments: int
    pending_installments: int | None
    completion_rate: float
    standing: PaymentStanding

    def as_record(self) -> dict[str, Any]:
        """Serialize the row; an unknown pending count is shown as "N/A"."""
        record = dataclass_to_dict(self)
        if self.pending_installments is None:
            record["pending_installments"] = NOT_AVAILABLE
        return record


@dataclass
class PortfolioReport:
    """Active-credit portfolio with aggregate figures."""

    rows: list[PortfolioRow]
    summary: dict[str, Any]
    as_of: date
    generated_at: datetime = field(default_factory=datetime.now)


class PortfolioReportBuilder:
    """Build portfolio reports from a credit repository."""

    def __init__(self, service: CreditEngineService) -> None:
        self.service = service
        self.repository = service.repository

    def generate(
        self,
        cobrador_id: str | None = None,
        as_of: date | datetime | None = None,
    ) -> PortfolioReport:
        reference = self.service.engine.today() if as_of is None else as_of
        if isinstance(reference, datetime):
            reference = reference.date()

        rows = []
        for credit in self.repository.list_credits(CreditStatus.ACTIVE):
            if cobrador_id and cobrador_id not in (credit.created_by, credit.delivered_by):
                continue

            payments = self.repository.get_credit_payments(credit.credit_id)
            snapshot = self.service.snapshot(credit, payments, reference)
            try:
                client_name: str | None = self.repository.get_client(credit.client_id).name
            except EntityNotFoundError:
                client_name = None

            rows.append(
                PortfolioRow(
                    credit_id=credit.credit_id,
                    client_name=client_name,
                    amount=Decimal(credit.amount),
                    balance=Decimal(credit.balance),
                    expected_installments=snapshot.expected_installments,
                    completed_installments=snapshot.completed_installments,
                    pending_installments=snapshot.pending_installments,
                    completion_rate=snapshot.completion_rate,
                    standing=snapshot.standing,
                )
            )

        logger.info("Portfolio report: %d active credits", len(rows))
        at_risk = self.service.config.at_risk_completion_rate
        return PortfolioReport(rows=rows, summary=summarize(rows, at_risk), as_of=reference)


def summarize(rows: list[PortfolioRow], at_risk_completion_rate: float = 50.0) -> dict[str, Any]:
    """Aggregate figures of a portfolio report."""
    rates = [r.completion_rate for r in rows]
    return {
        "total_active_credits": len(rows),
        "total_portfolio_amount": sum((r.amount for r in rows), Decimal("0")).quantize(CENT),
        "total_pending_balance": sum((r.balance for r in rows), Decimal("0")).quantize(CENT),
        "portfolio_completion_rate": round(sum(rates) / len(rates), 2) if rates else 0.0,
        "at_risk_count": sum(1 for rate in rates if rate < at_risk_completion_rate),
        "pending_not_available": sum(1 for r in rows if r.pending_installments is None),
    }
