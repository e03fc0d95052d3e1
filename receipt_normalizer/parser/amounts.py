"""
Amount Parser

Turns a monetary string read off a receipt into a number in the document's
base currency unit.

The hard part is the separators. The same characters mean opposite things
depending on where the receipt was printed:
  - "1,234.56"  US/UK: comma groups thousands, dot is decimal
  - "1.234,56"  Europe: dot groups thousands, comma is decimal
  - "1,234"     one thousand two hundred thirty-four
  - "12,5"      twelve and a half

Resolution rules:
  1. Both "." and "," present: whichever appears last is the decimal
     separator, the other is grouping.
  2. Only one kind present: it is decimal when followed by exactly 1-2
     trailing digits, otherwise grouping.
  3. Anything else that is left (letters, stray punctuation, a decimal
     separator used twice) is rejected rather than guessed at.

Negative values ("-12.50", "(12.50)") are kept; expenses can be refunds.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

from loguru import logger

from .outcome import ParseOutcome

CURRENCY_SYMBOLS = '$€£¥₹₪'
CURRENCY_CODES = ('USD', 'EUR', 'GBP', 'ILS', 'JPY', 'INR', 'CHF')

_CURRENCY = '[' + re.escape(CURRENCY_SYMBOLS) + ']|' + '|'.join(CURRENCY_CODES)

# Currency markers only count at either end, outside any sign or parenthesis
_LEADING_CURRENCY = re.compile(r'^([\s(\-]*)(?:' + _CURRENCY + ')', re.IGNORECASE)
_TRAILING_CURRENCY = re.compile('(?:' + _CURRENCY + r')([\s)]*)$', re.IGNORECASE)
_NUMBER_BODY = re.compile(r'^[0-9.,]+$')
_CENTS = Decimal('0.01')


class AmountNormalizer:
    """
    Parses currency strings into amounts rounded to 2 decimal places.

    Usage:
        normalizer = AmountNormalizer()
        normalizer.normalize("€1.234,56").value   # 1234.56
        normalizer.normalize("abc").ok            # False
    """

    def normalize(self, value: Any) -> ParseOutcome[float]:
        """
        Parse a raw amount string.

        Args:
            value: Raw text from the analysis service

        Returns:
            ParseOutcome holding the amount, or the reason it was rejected
        """
        outcome = self._parse(value)
        if not outcome.ok:
            logger.debug(f"Could not parse amount {value!r}: {outcome.reason}")
        return outcome

    def _parse(self, value: Any) -> ParseOutcome[float]:
        if not isinstance(value, str):
            return ParseOutcome.unparseable('not a string')

        text = _LEADING_CURRENCY.sub(r'\1', value, count=1)
        text = _TRAILING_CURRENCY.sub(r'\1', text, count=1).strip()
        if not text:
            return ParseOutcome.unparseable('empty')

        # Accounting negative: (12.50)
        negative = False
        if text.startswith('(') and text.endswith(')'):
            negative = True
            text = text[1:-1].strip()

        if text.startswith('-'):
            if negative:
                return ParseOutcome.unparseable('conflicting signs')
            negative = True
            text = text[1:].strip()

        if not _NUMBER_BODY.match(text):
            return ParseOutcome.unparseable('unexpected characters')

        if not any(c.isdigit() for c in text):
            return ParseOutcome.unparseable('no digits')

        normalized = self._normalize_number_format(text)
        if normalized is None:
            return ParseOutcome.unparseable('ambiguous separators')

        try:
            amount = Decimal(normalized).quantize(_CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            # More digits than the decimal context can hold
            return ParseOutcome.unparseable('out of range')
        if negative:
            amount = -amount

        # float(Decimal('-0.00')) would give -0.0
        return ParseOutcome.success(float(amount) if amount else 0.0)

    def _normalize_number_format(self, value: str) -> Optional[str]:
        """
        Rewrite a digits-and-separators string as "1234.56".

        Returns None when the separators cannot be resolved to a single
        decimal point.
        """
        has_dot = '.' in value
        has_comma = ',' in value

        if not has_dot and not has_comma:
            return value

        if has_dot and has_comma:
            # Last separator wins the decimal role
            decimal_sep = '.' if value.rfind('.') > value.rfind(',') else ','
            group_sep = ',' if decimal_sep == '.' else '.'

            if value.count(decimal_sep) != 1:
                return None

            integer_part, fraction = value.split(decimal_sep)
            return self._join(integer_part, fraction, group_sep)

        sep = '.' if has_dot else ','
        integer_part, _, fraction = value.rpartition(sep)

        if 1 <= len(fraction) <= 2:
            if value.count(sep) > 1:
                # "1.234.56": a decimal separator cannot also group
                return None
            return self._join(integer_part, fraction, None)

        if value.count(sep) == 1 and not integer_part.strip('0'):
            # "0.500" or ".500": nothing to group on the left
            return self._join(integer_part, fraction, None)

        return self._join(value, '', sep)

    @staticmethod
    def _join(integer_part: str, fraction: str, group_sep: Optional[str]) -> Optional[str]:
        if group_sep:
            groups = integer_part.split(group_sep)
            if len(groups) > 1 and not all(groups):
                return None
            integer_part = ''.join(groups)

        integer_part = integer_part or '0'
        if fraction:
            return f'{integer_part}.{fraction}'
        return integer_part


_DEFAULT_NORMALIZER = AmountNormalizer()


def parse_amount(raw: Any) -> ParseOutcome[float]:
    """Parse a raw monetary string into an amount rounded to cents."""
    return _DEFAULT_NORMALIZER.normalize(raw)
