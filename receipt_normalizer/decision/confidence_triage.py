"""
Confidence Triage

Turns the raw 0-100 confidence scores of an ExtractionResult into something
a review screen can act on.

The extractor never applies a threshold itself. Whether a low score blocks
auto-save is the caller's decision; this module is the helper callers use to
make it:

    report = triage_extraction(result, threshold=80)
    if report.needs_review:
        show_review_form(report.low_confidence_fields, report.unparsed_fields)

Levels:
- HIGH:   >= 90, shown as confident
- MEDIUM: >= 80, acceptable
- LOW:    below 80, flag for the user
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from ..parser.field_mapper import ExtractionResult

DEFAULT_REVIEW_THRESHOLD = 80.0
DEFAULT_HIGH_THRESHOLD = 90.0


class ConfidenceLevel(Enum):
    """Display tier for a confidence score."""

    HIGH = auto()
    MEDIUM = auto()
    LOW = auto()

    @classmethod
    def from_score(
        cls,
        score: float,
        high: float = DEFAULT_HIGH_THRESHOLD,
        medium: float = DEFAULT_REVIEW_THRESHOLD,
    ) -> ConfidenceLevel:
        if score >= high:
            return cls.HIGH
        if score >= medium:
            return cls.MEDIUM
        return cls.LOW

    @property
    def display_name(self) -> str:
        names = {
            ConfidenceLevel.HIGH: "High confidence",
            ConfidenceLevel.MEDIUM: "Medium confidence",
            ConfidenceLevel.LOW: "Low confidence - please verify",
        }
        return names.get(self, self.name)


@dataclass
class FieldTriage:
    """Triage of a single canonical field."""
    name: str
    value: Any
    confidence: float
    level: ConfidenceLevel
    parsed: bool
    threshold: float = DEFAULT_REVIEW_THRESHOLD

    @property
    def needs_review(self) -> bool:
        return self.confidence < self.threshold or not self.parsed

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'value': self.value,
            'confidence': self.confidence,
            'level': self.level.name.lower(),
            'parsed': self.parsed,
            'needs_review': self.needs_review,
        }


@dataclass
class TriageReport:
    """Review summary for one extraction."""
    threshold: float
    fields: List[FieldTriage] = field(default_factory=list)
    average_confidence: Optional[int] = None

    @property
    def low_confidence_fields(self) -> List[str]:
        return [f.name for f in self.fields if f.confidence < self.threshold]

    @property
    def unparsed_fields(self) -> List[str]:
        return [f.name for f in self.fields if not f.parsed]

    @property
    def needs_review(self) -> bool:
        return any(f.needs_review for f in self.fields)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'threshold': self.threshold,
            'average_confidence': self.average_confidence,
            'needs_review': self.needs_review,
            'low_confidence_fields': self.low_confidence_fields,
            'unparsed_fields': self.unparsed_fields,
            'fields': [f.to_dict() for f in self.fields],
        }


def triage_extraction(
    result: ExtractionResult,
    threshold: float = DEFAULT_REVIEW_THRESHOLD,
    high_threshold: float = DEFAULT_HIGH_THRESHOLD,
) -> TriageReport:
    """
    Grade every scored field of an extraction.

    Args:
        result: Output of the field mapper
        threshold: Scores below this are flagged for review
        high_threshold: Scores at or above this are HIGH

    Returns:
        TriageReport with per-field levels and the rounded average score
    """
    # A review threshold above the HIGH bound lifts the bound with it
    high_threshold = max(high_threshold, threshold)

    triaged = [
        FieldTriage(
            name=name,
            value=result.fields.get(name),
            confidence=score,
            level=ConfidenceLevel.from_score(score, high_threshold, threshold),
            parsed=name in result.fields,
            threshold=threshold,
        )
        for name, score in result.confidence.items()
    ]

    average = None
    if triaged:
        total = sum(Decimal(str(f.confidence)) for f in triaged)
        average = int((total / len(triaged)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))

    return TriageReport(threshold=threshold, fields=triaged, average_confidence=average)
