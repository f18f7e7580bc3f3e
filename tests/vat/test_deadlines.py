"""
Tests for the VAT filing calendar.

Reference days are chosen so the expected period can be read off the
calendar: monthly returns are due on the 25th of the following month,
rolled forward over weekends and fixed Slovak holidays.
"""

from datetime import date

import pytest

from statutory_modules.vat.config import VatConfig
from statutory_modules.vat.deadlines import (
    is_business_day,
    next_business_day,
    next_filing_deadline,
    warning_level,
)
from statutory_modules.vat.models import DeadlineWarning, FilingFrequency


class TestBusinessDays:

    def test_weekday_is_business_day(self):
        assert is_business_day(date(2025, 3, 25))

    def test_weekend_is_not(self):
        assert not is_business_day(date(2025, 5, 24))
        assert not is_business_day(date(2025, 5, 25))

    def test_fixed_holiday_is_not(self):
        assert not is_business_day(date(2025, 1, 1))
        assert not is_business_day(date(2025, 9, 1))

    def test_next_business_day_keeps_business_day(self):
        assert next_business_day(date(2025, 3, 25)) == date(2025, 3, 25)

    def test_holiday_then_weekend(self):
        # 25 and 26 Dec are holidays, 27/28 a weekend
        assert next_business_day(date(2025, 12, 25)) == date(2025, 12, 29)

    def test_new_year_and_epiphany(self):
        assert next_business_day(date(2025, 1, 1)) == date(2025, 1, 2)
        assert next_business_day(date(2025, 1, 6)) == date(2025, 1, 7)


class TestMonthly:

    def test_previous_month_due_this_month(self):
        deadline = next_filing_deadline("monthly", date(2025, 3, 10))

        assert deadline.period_label == "február 2025"
        assert deadline.period_from == date(2025, 2, 1)
        assert deadline.period_to == date(2025, 2, 28)
        assert deadline.deadline == date(2025, 3, 25)
        assert deadline.days_remaining == 15
        assert deadline.warning_level == DeadlineWarning.OK

    def test_weekend_deadline_rolls_to_monday(self):
        deadline = next_filing_deadline(FilingFrequency.MONTHLY, date(2025, 5, 26))

        assert deadline.period_label == "apríl 2025"
        assert deadline.deadline == date(2025, 5, 26)
        assert deadline.days_remaining == 0
        assert deadline.warning_level == DeadlineWarning.URGENT

    def test_holiday_deadline_rolls_forward(self):
        deadline = next_filing_deadline("monthly", date(2025, 12, 26))

        assert deadline.period_label == "november 2025"
        assert deadline.deadline == date(2025, 12, 29)
        assert deadline.warning_level == DeadlineWarning.URGENT

    def test_year_boundary(self):
        deadline = next_filing_deadline("monthly", date(2026, 1, 5))

        assert deadline.period_label == "december 2025"
        assert deadline.deadline == date(2026, 1, 26)

    def test_missed_deadline_stays_visible_as_overdue(self):
        deadline = next_filing_deadline("monthly", date(2025, 4, 28))

        assert deadline.period_label == "marec 2025"
        assert deadline.deadline == date(2025, 4, 25)
        assert deadline.days_remaining == -3
        assert deadline.is_overdue
        assert deadline.warning_level == DeadlineWarning.OVERDUE

    def test_deadline_older_than_grace_is_dropped(self):
        config = VatConfig(overdue_grace_days=0)

        deadline = next_filing_deadline("monthly", date(2025, 4, 28), config)

        assert deadline.period_label == "apríl 2025"
        assert deadline.deadline == date(2025, 5, 26)
        assert deadline.days_remaining == 28

    def test_frequency_from_config(self):
        config = VatConfig(filing_frequency="quarterly")
        assert next_filing_deadline(None, date(2025, 1, 10), config).period_label == "Q4 2024"


class TestQuarterly:

    def test_fourth_quarter_due_in_january(self):
        deadline = next_filing_deadline("quarterly", date(2025, 1, 10))

        assert deadline.period_label == "Q4 2024"
        assert deadline.period_from == date(2024, 10, 1)
        assert deadline.period_to == date(2024, 12, 31)
        # 25 Jan 2025 is a Saturday
        assert deadline.deadline == date(2025, 1, 27)
        assert deadline.days_remaining == 17

    def test_first_quarter(self):
        deadline = next_filing_deadline("quarterly", date(2025, 4, 2))

        assert deadline.period_label == "Q1 2025"
        assert deadline.period_to == date(2025, 3, 31)
        assert deadline.deadline == date(2025, 4, 25)

    def test_recently_missed_quarter_stays_overdue(self):
        deadline = next_filing_deadline("quarterly", date(2025, 5, 15))
        assert deadline.period_label == "Q1 2025"
        assert deadline.is_overdue

    def test_unknown_frequency_rejected(self):
        with pytest.raises(ValueError):
            next_filing_deadline("weekly", date(2025, 1, 10))


class TestWarningLevel:

    @pytest.mark.parametrize(
        "days, expected",
        [
            (-1, DeadlineWarning.OVERDUE),
            (0, DeadlineWarning.URGENT),
            (3, DeadlineWarning.URGENT),
            (4, DeadlineWarning.WARNING),
            (7, DeadlineWarning.WARNING),
            (8, DeadlineWarning.OK),
        ],
    )
    def test_levels(self, days, expected):
        assert warning_level(days, VatConfig()) == expected
