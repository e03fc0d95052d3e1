"""
Parse Outcome

Uniform result type shared by the amount and date parsers.

A parser either produces a canonical value or says, explicitly, that the
input could not be parsed. There is no third option: no exception escapes a
parser and no placeholder value (0, today's date, NaN) is ever returned in
place of a real one.

Usage:
    outcome = parse_amount("$1,234.56")
    if outcome.ok:
        print(outcome.value)      # 1234.56
    else:
        print(outcome.reason)     # why it was rejected
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class ParseOutcome(Generic[T]):
    """Either a parsed value or an unparseable signal with a reason."""
    value: Optional[T] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True when a value was parsed."""
        return self.reason is None

    @classmethod
    def success(cls, value: T) -> 'ParseOutcome[T]':
        return cls(value=value)

    @classmethod
    def unparseable(cls, reason: str) -> 'ParseOutcome[T]':
        return cls(value=None, reason=reason)

    def value_or_none(self) -> Optional[T]:
        return self.value if self.ok else None

    def __bool__(self) -> bool:
        return self.ok
