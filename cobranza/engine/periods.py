"""Installment period arithmetic per payment frequency."""

import logging
from datetime import date, datetime

from dateutil.relativedelta import relativedelta

from cobranza.models.enums import Frequency

logger = logging.getLogger(__name__)

# Fixed-length frequencies, in days. CUSTOM takes its length from configuration.
PERIOD_DAYS = {
    Frequency.DAILY: 1,
    Frequency.WEEKLY: 7,
    Frequency.BIWEEKLY: 14,
}


def to_date(value: date | datetime) -> date:
    """Reduce a datetime to its calendar date; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def resolve_frequency(value: Frequency | str | None) -> Frequency:
    """Parse a stored frequency, falling back to CUSTOM for unknown values."""
    if isinstance(value, Frequency):
        return value
    frequency = Frequency.parse(value)
    if frequency is Frequency.CUSTOM and str(value).strip().lower() != Frequency.CUSTOM.value:
        logger.warning("Unrecognized frequency %r, applying the custom period rule", value)
    return frequency


def period_days(frequency: Frequency, custom_period_days: int = 1) -> int | None:
    """Length in days of one period, or None for calendar-based frequencies."""
    if frequency is Frequency.CUSTOM:
        return custom_period_days
    return PERIOD_DAYS.get(frequency)


def elapsed_periods(
    frequency: Frequency | str,
    start: date | datetime,
    as_of: date | datetime,
    custom_period_days: int = 1,
) -> int:
    """Count periods from ``start`` up to and including ``as_of``.

    The period containing ``start`` counts as 1. Returns 0 when ``as_of``
    falls before ``start``.

    Parameters
    ----------
    frequency : Frequency | str
        Payment frequency of the schedule.
    start : date | datetime
        First day of the schedule.
    as_of : date | datetime
        Reference instant.
    custom_period_days : int
        Period length used for the CUSTOM frequency.

    Returns
    -------
    int
        Number of elapsed periods, never negative.
    """
    start = to_date(start)
    as_of = to_date(as_of)
    if as_of < start:
        return 0

    freq = resolve_frequency(frequency)
    if freq is Frequency.MONTHLY:
        return (as_of.year - start.year) * 12 + (as_of.month - start.month) + 1
    if freq is Frequency.YEARLY:
        return (as_of.year - start.year) + 1

    days = (as_of - start).days
    return days // period_days(freq, custom_period_days) + 1


def due_date(
    frequency: Frequency | str,
    start: date | datetime,
    number: int,
    custom_period_days: int = 1,
) -> date:
    """Nominal due date of installment ``number`` (1-based).

    Monthly and yearly schedules keep the start day of month, clamped to the
    last day of shorter months.
    """
    if number < 1:
        raise ValueError(f"Installment number must be positive, got {number}")

    start = to_date(start)
    offset = number - 1
    freq = resolve_frequency(frequency)
    if freq is Frequency.MONTHLY:
        return start + relativedelta(months=offset)
    if freq is Frequency.YEARLY:
        return start + relativedelta(years=offset)
    return start + relativedelta(days=offset * period_days(freq, custom_period_days))
