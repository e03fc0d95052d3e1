"""
Date Parser

Turns a date string read off a receipt into an ISO 8601 calendar date
(YYYY-MM-DD).

Receipts print dates in whatever order the till was configured for, so the
parser reasons about the components rather than trying a list of formats:
  - A 4-digit component is always the year, wherever it sits.
  - Without one, the last component is a 2-digit year (00-69 -> 20xx,
    70-99 -> 19xx).
  - Of the two remaining numbers, one above 12 must be the day. When both
    are 12 or less the default convention is month first.
  - Named months ("Jan", "September", "sept") fix the month outright.

Out-of-range values are rejected, never clamped: "02/30/2025" does not
become March 2nd or February 28th.
"""

import re
from datetime import date
from types import MappingProxyType
from typing import Any, Optional

from loguru import logger

from .outcome import ParseOutcome

MONTH_NAMES = MappingProxyType({
    'jan': 1, 'january': 1,
    'feb': 2, 'february': 2,
    'mar': 3, 'march': 3,
    'apr': 4, 'april': 4,
    'may': 5,
    'jun': 6, 'june': 6,
    'jul': 7, 'july': 7,
    'aug': 8, 'august': 8,
    'sep': 9, 'sept': 9, 'september': 9,
    'oct': 10, 'october': 10,
    'nov': 11, 'november': 11,
    'dec': 12, 'december': 12,
})

# Two-digit years below the pivot belong to this century
YEAR_PIVOT = 70
MIN_YEAR = 1900
MAX_YEAR = 2100

_ALLOWED_CHARS = re.compile(r'^[A-Za-z0-9\s,/.\-]+$')
_SEPARATORS = re.compile(r'[\s,/.\-]+')
_ORDINAL = re.compile(r'^(\d{1,2})(?:st|nd|rd|th)$', re.IGNORECASE)


class DateNormalizer:
    """
    Parses receipt dates into ISO format.

    Args:
        prefer_day_first: Read ambiguous numeric dates (both parts <= 12) as
            day-first instead of the default month-first. Dates that start
            with the year are always read year-month-day.
    """

    def __init__(self, prefer_day_first: bool = False):
        self.prefer_day_first = prefer_day_first

    def normalize(self, value: Any) -> ParseOutcome[str]:
        """
        Parse a raw date string.

        Args:
            value: Raw text from the analysis service

        Returns:
            ParseOutcome holding "YYYY-MM-DD", or the reason it was rejected
        """
        outcome = self._parse(value)
        if not outcome.ok:
            logger.debug(f"Could not parse date {value!r}: {outcome.reason}")
        return outcome

    def _parse(self, value: Any) -> ParseOutcome[str]:
        if not isinstance(value, str):
            return ParseOutcome.unparseable('not a string')

        text = value.strip()
        if not text:
            return ParseOutcome.unparseable('empty')

        if not _ALLOWED_CHARS.match(text):
            return ParseOutcome.unparseable('unexpected characters')

        tokens = [t for t in _SEPARATORS.split(text) if t]
        if len(tokens) != 3:
            return ParseOutcome.unparseable('expected three date components')

        numbers: list[tuple[int, str]] = []
        months: list[tuple[int, int]] = []

        for position, token in enumerate(tokens):
            if token.isdigit():
                numbers.append((position, token))
                continue

            ordinal = _ORDINAL.match(token)
            if ordinal:
                numbers.append((position, ordinal.group(1)))
                continue

            month = MONTH_NAMES.get(token.lower())
            if month is None:
                return ParseOutcome.unparseable(f"unrecognized component '{token}'")
            months.append((position, month))

        if len(months) > 1:
            return ParseOutcome.unparseable('more than one month name')

        if months:
            return self._resolve_named_month(months[0], numbers)
        return self._resolve_numeric(numbers)

    def _resolve_named_month(
        self,
        month: tuple[int, int],
        numbers: list[tuple[int, str]]
    ) -> ParseOutcome[str]:
        """Resolve "Jan 15, 2025" / "15 Jan 25" style dates."""
        month_position, month_number = month

        four_digit = [n for n in numbers if len(n[1]) == 4]
        if len(four_digit) > 1:
            return ParseOutcome.unparseable('more than one 4-digit year')

        if four_digit:
            year_token = four_digit[0][1]
            day_token = next(n[1] for n in numbers if n is not four_digit[0])
        elif month_position == len(numbers):
            # "15 25 Jan": nothing says which number is the year
            return ParseOutcome.unparseable('year position is ambiguous')
        else:
            day_token, year_token = numbers[0][1], numbers[1][1]

        if len(day_token) > 2:
            return ParseOutcome.unparseable('day has too many digits')

        return self._build(year_token, month_number, int(day_token))

    def _resolve_numeric(self, numbers: list[tuple[int, str]]) -> ParseOutcome[str]:
        """Resolve all-numeric dates such as 12/15/2025 or 15.12.25."""
        four_digit = [n for n in numbers if len(n[1]) == 4]
        if len(four_digit) > 1:
            return ParseOutcome.unparseable('more than one 4-digit year')

        if four_digit:
            year_entry = four_digit[0]
        else:
            year_entry = numbers[-1]
        rest = [n for n in numbers if n is not year_entry]

        if any(len(token) > 2 for _, token in rest):
            return ParseOutcome.unparseable('day or month has too many digits')

        first, second = int(rest[0][1]), int(rest[1][1])
        year_first = year_entry[0] == 0

        if first > 12 and second > 12:
            return ParseOutcome.unparseable('neither component can be the month')
        if first > 12:
            month_number, day = second, first
        elif second > 12:
            month_number, day = first, second
        elif self.prefer_day_first and not year_first:
            month_number, day = second, first
        else:
            month_number, day = first, second

        return self._build(year_entry[1], month_number, day)

    def _build(self, year_token: str, month: int, day: int) -> ParseOutcome[str]:
        year = self._expand_year(year_token)
        if year is None:
            return ParseOutcome.unparseable(f"invalid year '{year_token}'")

        if not MIN_YEAR <= year <= MAX_YEAR:
            return ParseOutcome.unparseable(f'year {year} out of range')

        try:
            parsed = date(year, month, day)
        except ValueError:
            return ParseOutcome.unparseable(f'{year}-{month}-{day} is not a calendar date')

        return ParseOutcome.success(parsed.isoformat())

    @staticmethod
    def _expand_year(token: str) -> Optional[int]:
        if len(token) == 4:
            return int(token)
        if len(token) == 2:
            short = int(token)
            return 2000 + short if short < YEAR_PIVOT else 1900 + short
        return None


_DEFAULT_NORMALIZER = DateNormalizer()


def parse_date(raw: Any) -> ParseOutcome[str]:
    """Parse a raw date string into ISO YYYY-MM-DD, month-first when ambiguous."""
    return _DEFAULT_NORMALIZER.normalize(raw)
