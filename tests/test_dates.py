"""
Tests for date parsing.

Run with: pytest tests/ -v
"""

import pytest

from receipt_normalizer.parser.dates import DateNormalizer, parse_date


class TestNumericDates:
    """Tests for all-numeric dates."""

    def setup_method(self):
        self.normalizer = DateNormalizer()

    def test_day_above_twelve_forces_day_first(self):
        assert self.normalizer.normalize("15.12.2025").value == "2025-12-15"

    def test_us_format(self):
        assert self.normalizer.normalize("12/15/2025").value == "2025-12-15"

    def test_ambiguous_defaults_to_month_first(self):
        assert self.normalizer.normalize("05/06/2025").value == "2025-05-06"
        assert self.normalizer.normalize("05.06.2025").value == "2025-05-06"

    def test_iso_format(self):
        assert self.normalizer.normalize("2025-01-15").value == "2025-01-15"
        assert self.normalizer.normalize("2025/01/05").value == "2025-01-05"

    def test_single_digit_components(self):
        assert self.normalizer.normalize("1/5/2025").value == "2025-01-05"

    def test_surrounding_whitespace(self):
        assert self.normalizer.normalize("  12/15/2025 ").value == "2025-12-15"


class TestTwoDigitYears:
    """Tests for the fixed 70 pivot."""

    def test_seventy_is_last_century(self):
        assert parse_date("01/01/70").value == "1970-01-01"

    def test_ninety_nine(self):
        assert parse_date("12/31/99").value == "1999-12-31"

    def test_sixty_nine_is_this_century(self):
        assert parse_date("01/01/69").value == "2069-01-01"

    def test_zero_zero(self):
        assert parse_date("15-03-00").value == "2000-03-15"


class TestNamedMonths:
    """Tests for dates with month names."""

    def test_month_day_year(self):
        assert parse_date("Jan 15, 2025").value == "2025-01-15"

    def test_day_month_year(self):
        assert parse_date("15 Jan 2025").value == "2025-01-15"

    def test_full_names_and_case(self):
        assert parse_date("SEPTEMBER 3 2024").value == "2024-09-03"
        assert parse_date("3-sept-2024").value == "2024-09-03"

    def test_ordinal_suffix(self):
        assert parse_date("March 1st, 2025").value == "2025-03-01"

    def test_two_digit_year_with_name(self):
        assert parse_date("15 Jan 25").value == "2025-01-15"

    def test_year_first_with_name(self):
        assert parse_date("2025 Feb 28").value == "2025-02-28"

    def test_unknown_word(self):
        assert not parse_date("15 Foo 2025").ok

    def test_two_month_names(self):
        assert not parse_date("Jan Feb 2025").ok


class TestRejection:
    """Dates that must never be guessed."""

    @pytest.mark.parametrize("raw", [
        "02/30/2025",    # not a calendar date
        "13/13/2025",    # neither can be the month
        "45/40/2025",
        "00/10/2025",    # month zero
        "10/00/2025",    # day zero
        "2/29/2025",     # not a leap year
        "12/15",         # no year
        "2025",
        "12/15/2025/1",
        "12/15/1",       # one-digit year
        "12/15/202",     # three-digit year
        "2025/12/2026",  # two years
        "123/1/2025",
        "12/15/1850",    # out of range
        "today",
        "",
        "12:15:2025",
    ])
    def test_unparseable(self, raw):
        outcome = parse_date(raw)
        assert not outcome.ok
        assert outcome.value is None

    @pytest.mark.parametrize("raw", [None, 20250115, object()])
    def test_non_string_input(self, raw):
        assert not parse_date(raw).ok

    def test_leap_day_accepted(self):
        assert parse_date("2/29/2024").value == "2024-02-29"


class TestDayFirstPreference:
    """Tests for the day-first option."""

    def setup_method(self):
        self.normalizer = DateNormalizer(prefer_day_first=True)

    def test_ambiguous_read_day_first(self):
        assert self.normalizer.normalize("05/06/2025").value == "2025-06-05"

    def test_unambiguous_unchanged(self):
        assert self.normalizer.normalize("12/15/2025").value == "2025-12-15"
        assert self.normalizer.normalize("15.12.2025").value == "2025-12-15"

    def test_year_first_stays_year_month_day(self):
        assert self.normalizer.normalize("2025-05-06").value == "2025-05-06"


class TestIdempotence:

    def test_same_input_same_outcome(self):
        assert parse_date("15.12.2025") == parse_date("15.12.2025")
        assert parse_date("02/30/2025") == parse_date("02/30/2025")
