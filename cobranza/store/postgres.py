"""PostgreSQL-backed credit repository."""

from __future__ import annotations

import logging
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

import psycopg
from psycopg.rows import dict_row

from cobranza.config import PostgresConfig
from cobranza.exceptions import EntityNotFoundError, RepositoryError
from cobranza.models import (
    Client,
    Credit,
    CreditStatus,
    Frequency,
    Payment,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

CREDIT_QUERY = """
    SELECT id, client_id, created_by, delivered_by, amount, total_amount, balance,
           installment_amount, total_installments, paid_installments, interest_rate,
           frequency, start_date, end_date, status, created_at
    FROM credits
"""

PAYMENT_QUERY = """
    SELECT id, credit_id, client_id, cobrador_id, amount, installment_number,
           payment_date, status, payment_method, payment_type, created_at
    FROM payments
    WHERE credit_id = %s
    ORDER BY payment_date ASC, id ASC
"""

CLIENT_QUERY = """
    SELECT id, name, phone, client_category, assigned_cobrador_id, created_at
    FROM users
    WHERE id = %s
"""


class PostgresCreditRepository:
    """Read credits, payments and clients from the collection database.

    Every lookup opens its own short-lived connection. Callers that need a
    consistent snapshot across several lookups should read inside one
    repeatable-read window of their own.
    """

    def __init__(self, config: PostgresConfig | str) -> None:
        """Initialize repository.

        Parameters
        ----------
        config : PostgresConfig | str
            Connection configuration or a connection string.
        """
        if isinstance(config, PostgresConfig):
            config = config.connection_string
        self.conninfo = config

    def get_credit(self, credit_id: str) -> Credit:
        """Get a credit by ID."""
        rows = self._fetch_all(CREDIT_QUERY + " WHERE id = %s", (credit_id,))
        if not rows:
            raise EntityNotFoundError(f"Credit {credit_id} not found")
        return _credit_from_row(rows[0])

    def get_credit_payments(self, credit_id: str) -> list[Payment]:
        """Get all payments for a credit ordered by payment date."""
        rows = self._fetch_all(PAYMENT_QUERY, (credit_id,))
        return [_payment_from_row(row) for row in rows]

    def get_client(self, client_id: str) -> Client:
        """Get a client by ID."""
        rows = self._fetch_all(CLIENT_QUERY, (client_id,))
        if not rows:
            raise EntityNotFoundError(f"Client {client_id} not found")
        return _client_from_row(rows[0])

    def list_credits(self, status: CreditStatus | None = None) -> list[Credit]:
        """List credits, optionally filtered by status."""
        if status is None:
            rows = self._fetch_all(CREDIT_QUERY + " ORDER BY start_date ASC", ())
        else:
            rows = self._fetch_all(
                CREDIT_QUERY + " WHERE status = %s ORDER BY start_date ASC",
                (CreditStatus(status).value,),
            )
        return [_credit_from_row(row) for row in rows]

    def _fetch_all(self, query: str, params: tuple[Any, ...]) -> list[dict[str, Any]]:
        try:
            with psycopg.connect(self.conninfo, row_factory=dict_row) as conn:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    rows = cur.fetchall()
        except psycopg.Error as e:
            logger.error("PostgreSQL query failed: %s", e)
            raise RepositoryError(f"PostgreSQL query failed: {e}") from e
        logger.debug("Fetched %d rows", len(rows))
        return rows


def _str_or_none(value: Any) -> str | None:
    return None if value is None else str(value)


def _decimal_or_none(value: Any) -> Decimal | None:
    return None if value is None else Decimal(str(value))


def _parse_enum(enum_cls: type[E], value: Any) -> E | str:
    """Map a stored value to its enum member, keeping unknown values as text."""
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning("Unknown %s value %r", enum_cls.__name__, value)
        return str(value)


def _credit_from_row(row: dict[str, Any]) -> Credit:
    return Credit(
        credit_id=str(row["id"]),
        client_id=str(row["client_id"]),
        amount=Decimal(str(row["amount"])),
        # Older rows predate total_amount; principal is the best known total
        total_amount=Decimal(str(row["amount"] if row["total_amount"] is None else row["total_amount"])),
        balance=Decimal(str(row["balance"])),
        frequency=_parse_enum(Frequency, row["frequency"]),
        start_date=row["start_date"],
        end_date=row["end_date"],
        status=_parse_enum(CreditStatus, row["status"]),
        installment_amount=_decimal_or_none(row["installment_amount"]),
        total_installments=row["total_installments"],
        paid_installments=row["paid_installments"],
        interest_rate=_decimal_or_none(row["interest_rate"]),
        created_by=_str_or_none(row["created_by"]),
        delivered_by=_str_or_none(row["delivered_by"]),
        created_at=row["created_at"],
    )


def _payment_from_row(row: dict[str, Any]) -> Payment:
    return Payment(
        payment_id=str(row["id"]),
        credit_id=str(row["credit_id"]),
        amount=Decimal(str(row["amount"])),
        payment_date=row["payment_date"],
        status=_parse_enum(PaymentStatus, row["status"]),
        installment_number=row["installment_number"],
        client_id=_str_or_none(row["client_id"]),
        cobrador_id=_str_or_none(row["cobrador_id"]),
        payment_method=_parse_enum(PaymentMethod, row["payment_method"] or PaymentMethod.CASH.value),
        payment_type=_parse_enum(PaymentType, row["payment_type"] or PaymentType.REGULAR.value),
        created_at=row["created_at"],
    )


def _client_from_row(row: dict[str, Any]) -> Client:
    return Client(
        client_id=str(row["id"]),
        name=row["name"],
        phone=row["phone"],
        client_category=row["client_category"],
        assigned_cobrador_id=_str_or_none(row["assigned_cobrador_id"]),
        created_at=row["created_at"],
    )
