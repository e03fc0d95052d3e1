"""
Decision Package

Caller-side helpers for deciding what to do with confidence scores.
The extractor itself never applies a threshold.

Usage:
    from receipt_normalizer.decision import triage_extraction

    report = triage_extraction(result, threshold=80)
    if report.needs_review:
        for name in report.low_confidence_fields:
            print(f"  - {name}")
"""

from .confidence_triage import (
    ConfidenceLevel,
    FieldTriage,
    TriageReport,
    triage_extraction,
    DEFAULT_REVIEW_THRESHOLD,
    DEFAULT_HIGH_THRESHOLD,
)

__all__ = [
    'ConfidenceLevel',
    'FieldTriage',
    'TriageReport',
    'triage_extraction',
    'DEFAULT_REVIEW_THRESHOLD',
    'DEFAULT_HIGH_THRESHOLD',
]
