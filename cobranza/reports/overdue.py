"""Overdue (mora) report over active credits."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from cobranza.exceptions import EntityNotFoundError
from cobranza.models import Client, Credit, CreditStatus, Event, OverdueSeverity
from cobranza.service import CreditEngineService
from cobranza.sinks.serialization import dataclass_to_dict

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
EVENT_SOURCE = "cobranza.reports.overdue"


@dataclass
class OverdueFilters:
    """Optional restrictions applied to the overdue report."""

    cobrador_id: str | None = None  # matches created_by or delivered_by
    client_id: str | None = None
    client_category: str | None = None
    min_days_overdue: int | None = None
    max_days_overdue: int | None = None
    min_overdue_amount: Decimal | None = None


@dataclass
class OverdueRow:
    """One overdue credit."""

    credit_id: str
    client_id: str
    client_name: str | None
    client_category: str | None
    cobrador_id: str | None
    amount: Decimal
    balance: Decimal
    start_date: date
    days_overdue: int
    overdue_amount: Decimal
    overdue_installments: int
    completion_rate: float
    severity: OverdueSeverity

    def as_record(self) -> dict[str, Any]:
        return dataclass_to_dict(self)


@dataclass
class OverdueReport:
    """Overdue credits, most delinquent first, with aggregate figures."""

    rows: list[OverdueRow]
    summary: dict[str, Any]
    as_of: date
    generated_at: datetime = field(default_factory=datetime.now)

    def attention_events(self) -> list[Event]:
        """One ``credit.requires_attention`` event per overdue credit."""
        return [
            Event(
                event_id=uuid.uuid4().hex,
                event_type="credit.requires_attention",
                event_time=self.generated_at,
                source=EVENT_SOURCE,
                subject=row.credit_id,
                data=row.as_record(),
                metadata={"reason": "overdue", "cobrador_id": row.cobrador_id},
            )
            for row in self.rows
        ]


class OverdueReportBuilder:
    """Build overdue reports from a credit repository."""

    def __init__(self, service: CreditEngineService) -> None:
        self.service = service
        self.repository = service.repository

    def generate(
        self,
        filters: OverdueFilters | None = None,
        as_of: date | datetime | None = None,
    ) -> OverdueReport:
        """Generate the overdue report.

        Only active credits with a positive balance are considered.
        """
        filters = filters or OverdueFilters()
        reference = self.service.engine.today() if as_of is None else as_of
        if isinstance(reference, datetime):
            reference = reference.date()

        credits = [
            c
            for c in self.repository.list_credits(CreditStatus.ACTIVE)
            if Decimal(c.balance) > 0 and self._matches_credit(c, filters)
        ]
        logger.info("Evaluating %d active credits for overdue report", len(credits))

        rows = []
        for credit in credits:
            client = self._client(credit)
            if filters.client_category and (
                client is None or client.client_category != filters.client_category
            ):
                continue

            payments = self.repository.get_credit_payments(credit.credit_id)
            snapshot = self.service.snapshot(credit, payments, reference)
            if not snapshot.is_overdue:
                continue
            if not self._matches_snapshot(snapshot.days_overdue, snapshot.overdue_amount, filters):
                continue

            rows.append(
                OverdueRow(
                    credit_id=credit.credit_id,
                    client_id=credit.client_id,
                    client_name=client.name if client else None,
                    client_category=client.client_category if client else None,
                    cobrador_id=credit.collector_id,
                    amount=Decimal(credit.amount),
                    balance=Decimal(credit.balance),
                    start_date=credit.start_date,
                    days_overdue=snapshot.days_overdue,
                    overdue_amount=snapshot.overdue_amount.quantize(CENT),
                    overdue_installments=snapshot.overdue_installments,
                    completion_rate=snapshot.completion_rate,
                    severity=snapshot.severity,
                )
            )

        rows.sort(key=lambda r: r.days_overdue, reverse=True)
        logger.info("Overdue report: %d of %d credits overdue", len(rows), len(credits))
        return OverdueReport(rows=rows, summary=summarize(rows), as_of=reference)

    def _client(self, credit: Credit) -> Client | None:
        try:
            return self.repository.get_client(credit.client_id)
        except EntityNotFoundError:
            logger.warning(
                "Client %s not found, reporting without client data",
                credit.client_id,
                extra={"client_id": credit.client_id, "credit_id": credit.credit_id},
            )
            return None

    @staticmethod
    def _matches_credit(credit: Credit, filters: OverdueFilters) -> bool:
        if filters.cobrador_id and filters.cobrador_id not in (
            credit.created_by,
            credit.delivered_by,
        ):
            return False
        if filters.client_id and credit.client_id != filters.client_id:
            return False
        return True

    @staticmethod
    def _matches_snapshot(days: int, amount: Decimal, filters: OverdueFilters) -> bool:
        if filters.min_days_overdue is not None and days < filters.min_days_overdue:
            return False
        if filters.max_days_overdue is not None and days > filters.max_days_overdue:
            return False
        if filters.min_overdue_amount is not None and amount < Decimal(filters.min_overdue_amount):
            return False
        return True


def summarize(rows: list[OverdueRow]) -> dict[str, Any]:
    """Aggregate figures of an overdue report."""
    days = [r.days_overdue for r in rows]
    total_overdue = sum((r.overdue_amount for r in rows), Decimal("0"))
    total_balance = sum((r.balance for r in rows), Decimal("0"))

    return {
        "total_overdue_credits": len(rows),
        "total_overdue_amount": total_overdue.quantize(CENT),
        "total_balance_overdue": total_balance.quantize(CENT),
        "average_days_overdue": round(sum(days) / len(days), 2) if days else 0.0,
        "max_days_overdue": max(days, default=0),
        "min_days_overdue": min(days, default=0),
        "by_severity": {
            severity.value: sum(1 for r in rows if r.severity is severity)
            for severity in OverdueSeverity
        },
    }
