#!/usr/bin/env python3
"""Generate the overdue (mora) report.

Credits are read from PostgreSQL or from a generated sample portfolio.
Report rows and summary are written as JSON files; overdue credits can
also be published to Kafka as ``credit.requires_attention`` events.

Examples:
    python scripts/overdue_report.py --sample 200 --seed 7
    python scripts/overdue_report.py --postgres --as-of 2024-06-30 --min-days 8
    python scripts/overdue_report.py --postgres --kafka --portfolio --audit
"""

import argparse
import logging
import sys
import time
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cobranza.config import CobranzaConfig
from cobranza.engine.audit import audit_balance
from cobranza.exceptions import CobranzaError, ConfigurationError
from cobranza.generators import PortfolioGenerator
from cobranza.logging import setup_logging
from cobranza.reports import OverdueFilters, OverdueReportBuilder, PortfolioReportBuilder
from cobranza.service import CreditEngineService
from cobranza.sinks import JsonFileSink, KafkaSink
from cobranza.store.base import CreditRepository

logger = logging.getLogger(__name__)


def parse_date(value: str) -> date:
    """argparse type for ISO dates."""
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from e


def parse_amount(value: str) -> Decimal:
    """argparse type for money amounts."""
    try:
        return Decimal(value)
    except InvalidOperation as e:
        raise argparse.ArgumentTypeError(f"invalid amount {value!r}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate the overdue credit report")

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Generate a sample portfolio of N clients instead of reading a database",
    )
    source.add_argument(
        "--postgres",
        action="store_true",
        help="Read credits from PostgreSQL (POSTGRES_* environment variables)",
    )
    parser.add_argument(
        "--postgres-url",
        type=str,
        default=None,
        help="PostgreSQL connection string (overrides POSTGRES_* variables)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for --sample (default: 42)",
    )
    parser.add_argument(
        "--as-of",
        type=parse_date,
        default=None,
        help="Reference date YYYY-MM-DD (default: today)",
    )

    filters = parser.add_argument_group("filters")
    filters.add_argument("--cobrador", type=str, default=None, help="Only credits created or delivered by this cobrador")
    filters.add_argument("--client", type=str, default=None, help="Only credits of this client")
    filters.add_argument("--category", type=str, default=None, help="Only clients of this category (A, B, C)")
    filters.add_argument("--min-days", type=int, default=None, help="Minimum days overdue")
    filters.add_argument("--max-days", type=int, default=None, help="Maximum days overdue")
    filters.add_argument("--min-amount", type=parse_amount, default=None, help="Minimum overdue amount")

    output = parser.add_argument_group("output")
    output.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for JSON files (default: OUTPUT_DIR or ./output)",
    )
    output.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print JSON files",
    )
    output.add_argument(
        "--kafka",
        action="store_true",
        help="Publish credit.requires_attention events to Kafka",
    )
    output.add_argument(
        "--portfolio",
        action="store_true",
        help="Also write the portfolio report",
    )
    output.add_argument(
        "--audit",
        action="store_true",
        help="Also write balance consistency issues",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-format",
        type=str,
        choices=["standard", "json"],
        default=None,
        help="Log format (default: LOG_FORMAT or standard)",
    )
    return parser


def build_repository(args: argparse.Namespace, config: CobranzaConfig, as_of: date) -> CreditRepository:
    """Open the credit source selected on the command line."""
    if args.sample is not None:
        logger.info("Generating sample portfolio: %d clients (seed=%d)", args.sample, args.seed)
        generator = PortfolioGenerator(seed=args.seed, config=config.engine)
        return generator.generate(args.sample, as_of=as_of)

    from cobranza.store.postgres import PostgresCreditRepository

    return PostgresCreditRepository(args.postgres_url or config.postgres)


def write_audit(service: CreditEngineService, sink: JsonFileSink) -> int:
    """Write balance issues of every credit; return how many were found."""
    repository = service.repository
    issues = []
    for credit in repository.list_credits():
        issues.extend(audit_balance(credit, repository.get_credit_payments(credit.credit_id)))
    sink.write_batch("balance_issues", issues)
    if issues:
        logger.warning("Found %d balance issues", len(issues))
    return len(issues)


def main() -> None:
    """Main entry point."""
    args = build_parser().parse_args()

    try:
        config = CobranzaConfig.from_env()
        setup_logging(args.log_level or config.log_level, args.log_format or config.log_format)
    except ConfigurationError as e:
        setup_logging(args.log_level or "INFO", args.log_format or "standard")
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    as_of = args.as_of or date.today()
    filters = OverdueFilters(
        cobrador_id=args.cobrador,
        client_id=args.client,
        client_category=args.category,
        min_days_overdue=args.min_days,
        max_days_overdue=args.max_days,
        min_overdue_amount=args.min_amount,
    )

    logger.info("=" * 60)
    logger.info("Overdue report as of %s", as_of.isoformat())
    logger.info("Source: %s", "sample" if args.sample is not None else "PostgreSQL")
    logger.info("=" * 60)

    start = time.perf_counter()
    try:
        repository = build_repository(args, config, as_of)
        service = CreditEngineService(repository, config.engine)
        report = OverdueReportBuilder(service).generate(filters, as_of=as_of)

        sink = JsonFileSink(args.output_dir or config.output.json_output_dir, pretty=args.pretty)
        sink.write_batch("overdue_credits", [row.as_record() for row in report.rows])
        sink.write_document("overdue_summary", {"as_of": report.as_of, **report.summary})

        if args.portfolio:
            portfolio = PortfolioReportBuilder(service).generate(cobrador_id=args.cobrador, as_of=as_of)
            sink.write_batch("portfolio", [row.as_record() for row in portfolio.rows])
            sink.write_document("portfolio_summary", {"as_of": portfolio.as_of, **portfolio.summary})

        if args.audit:
            write_audit(service, sink)

        sink.close()

        if args.kafka:
            kafka = KafkaSink(config.kafka)
            kafka.publish_alerts(report.attention_events())
            kafka.close()
    except CobranzaError as e:
        logger.error("Report failed: %s", e)
        sys.exit(1)

    summary = report.summary
    logger.info("Overdue credits: %d", summary["total_overdue_credits"])
    logger.info("Overdue amount: %s %s", config.engine.currency, summary["total_overdue_amount"])
    logger.info("By severity: %s", summary["by_severity"])
    logger.info("Completed in %.2fs", time.perf_counter() - start)


if __name__ == "__main__":
    main()
