"""Tests for installment period arithmetic."""

import logging
from datetime import date, datetime

import pytest

from cobranza.engine.periods import (
    due_date,
    elapsed_periods,
    period_days,
    resolve_frequency,
    to_date,
)
from cobranza.models import Frequency

AS_OF = date(2024, 3, 15)


class TestElapsedPeriods:
    """Tests for elapsed_periods."""

    def test_daily_counts_start_day(self) -> None:
        """Ten days after the start, eleven daily periods have begun."""
        assert elapsed_periods(Frequency.DAILY, date(2024, 3, 5), AS_OF) == 11

    def test_same_day_is_first_period(self) -> None:
        """The start day itself is period 1."""
        assert elapsed_periods(Frequency.DAILY, AS_OF, AS_OF) == 1
        assert elapsed_periods(Frequency.MONTHLY, AS_OF, AS_OF) == 1

    def test_before_start_is_zero(self) -> None:
        """No period has elapsed before the schedule starts."""
        for frequency in Frequency:
            assert elapsed_periods(frequency, date(2024, 3, 16), AS_OF) == 0

    def test_weekly(self) -> None:
        """Three weeks after the start, four weekly periods have begun."""
        assert elapsed_periods(Frequency.WEEKLY, date(2024, 2, 23), AS_OF) == 4

    def test_weekly_partial_week(self) -> None:
        """Days inside the current week do not add a period."""
        assert elapsed_periods(Frequency.WEEKLY, date(2024, 3, 9), AS_OF) == 1
        assert elapsed_periods(Frequency.WEEKLY, date(2024, 3, 8), AS_OF) == 2

    def test_biweekly(self) -> None:
        """Twenty-eight days cover three biweekly periods."""
        assert elapsed_periods(Frequency.BIWEEKLY, date(2024, 2, 16), AS_OF) == 3

    def test_monthly(self) -> None:
        """Two months after the start, three monthly periods have begun."""
        assert elapsed_periods(Frequency.MONTHLY, date(2024, 1, 15), AS_OF) == 3

    def test_monthly_uses_calendar_months(self) -> None:
        """Monthly periods count month boundaries, not the day of month."""
        assert elapsed_periods(Frequency.MONTHLY, date(2024, 1, 31), AS_OF) == 3
        assert elapsed_periods(Frequency.MONTHLY, date(2023, 12, 20), AS_OF) == 4

    def test_yearly(self) -> None:
        """Yearly periods count calendar years."""
        assert elapsed_periods(Frequency.YEARLY, date(2022, 6, 1), AS_OF) == 3

    def test_custom_defaults_to_daily_rule(self) -> None:
        """With a one-day custom period the daily rule applies."""
        assert elapsed_periods(Frequency.CUSTOM, date(2024, 3, 5), AS_OF) == 11

    def test_custom_period_length(self) -> None:
        """A configured custom period length is honored."""
        assert elapsed_periods(Frequency.CUSTOM, date(2024, 3, 5), AS_OF, custom_period_days=5) == 3

    def test_accepts_datetimes(self) -> None:
        """Datetimes are reduced to their calendar date."""
        start = datetime(2024, 3, 5, 23, 59)
        as_of = datetime(2024, 3, 15, 0, 1)
        assert elapsed_periods(Frequency.DAILY, start, as_of) == 11

    def test_accepts_stored_strings(self) -> None:
        """Frequencies read as text are parsed."""
        assert elapsed_periods("weekly", date(2024, 2, 23), AS_OF) == 4

    def test_unknown_frequency_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        """Unknown frequencies use the custom rule and log a warning."""
        with caplog.at_level(logging.WARNING, logger="cobranza.engine.periods"):
            result = elapsed_periods("fortnightly", date(2024, 3, 5), AS_OF)

        assert result == 11
        assert "fortnightly" in caplog.text


class TestFrequencyHelpers:
    """Tests for frequency parsing and period lengths."""

    def test_resolve_known(self) -> None:
        """Known values map to their members."""
        assert resolve_frequency("Monthly") is Frequency.MONTHLY
        assert resolve_frequency(Frequency.DAILY) is Frequency.DAILY

    def test_resolve_unknown(self) -> None:
        """Unknown and missing values map to CUSTOM."""
        assert resolve_frequency("quarterly") is Frequency.CUSTOM
        assert resolve_frequency(None) is Frequency.CUSTOM

    def test_period_days(self) -> None:
        """Fixed-length frequencies have a day count."""
        assert period_days(Frequency.DAILY) == 1
        assert period_days(Frequency.WEEKLY) == 7
        assert period_days(Frequency.BIWEEKLY) == 14
        assert period_days(Frequency.CUSTOM, 3) == 3
        assert period_days(Frequency.MONTHLY) is None

    def test_to_date(self) -> None:
        """Datetimes are truncated, dates pass through."""
        assert to_date(datetime(2024, 3, 15, 12, 30)) == AS_OF
        assert to_date(AS_OF) is AS_OF


class TestDueDate:
    """Tests for due_date."""

    def test_first_installment_on_start(self) -> None:
        """Installment 1 is due on the start date."""
        assert due_date(Frequency.WEEKLY, date(2024, 3, 1), 1) == date(2024, 3, 1)

    def test_weekly(self) -> None:
        """Weekly installments are seven days apart."""
        assert due_date(Frequency.WEEKLY, date(2024, 3, 1), 3) == date(2024, 3, 15)

    def test_biweekly(self) -> None:
        """Biweekly installments are fourteen days apart."""
        assert due_date(Frequency.BIWEEKLY, date(2024, 3, 1), 2) == date(2024, 3, 15)

    def test_monthly_clamps_to_month_end(self) -> None:
        """A start on the 31st falls due on the last day of shorter months."""
        start = date(2024, 1, 31)
        assert due_date(Frequency.MONTHLY, start, 2) == date(2024, 2, 29)
        assert due_date(Frequency.MONTHLY, start, 3) == date(2024, 3, 31)

    def test_yearly(self) -> None:
        """Yearly installments keep the start day."""
        assert due_date(Frequency.YEARLY, date(2024, 2, 29), 2) == date(2025, 2, 28)

    def test_custom_period(self) -> None:
        """Custom schedules step by the configured period."""
        assert due_date(Frequency.CUSTOM, date(2024, 3, 1), 3, custom_period_days=10) == date(2024, 3, 21)

    def test_invalid_number(self) -> None:
        """Installment numbers start at 1."""
        with pytest.raises(ValueError, match="must be positive"):
            due_date(Frequency.DAILY, date(2024, 3, 1), 0)
