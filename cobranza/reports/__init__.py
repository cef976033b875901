"""Collection reports built on the accrual engine."""

from cobranza.reports.overdue import OverdueFilters, OverdueReport, OverdueReportBuilder, OverdueRow
from cobranza.reports.portfolio import (
    NOT_AVAILABLE,
    PortfolioReport,
    PortfolioReportBuilder,
    PortfolioRow,
)

__all__ = [
    "NOT_AVAILABLE",
    "OverdueFilters",
    "OverdueReport",
    "OverdueReportBuilder",
    "OverdueRow",
    "PortfolioReport",
    "PortfolioReportBuilder",
    "PortfolioRow",
]
