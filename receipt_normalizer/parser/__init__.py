"""
Parser Package

Turns document-analysis output into canonical expense fields.
It includes:
- Amount parsing with locale-ambiguous separators
- Date parsing with day/month disambiguation
- Alias tables from service type names to canonical fields
- The field mapper that ties them together

Usage:
    from receipt_normalizer.parser import parse_amount, parse_date, parse_expense_document

    parse_amount("1.234,56").value        # 1234.56
    parse_date("15.12.2025").value        # "2025-12-15"

    result = parse_expense_document(textract_response)
    result.fields, result.confidence, result.line_items
"""

from .outcome import ParseOutcome

from .amounts import (
    AmountNormalizer,
    parse_amount,
)

from .dates import (
    DateNormalizer,
    parse_date,
)

from .aliases import (
    CanonicalField,
    FieldKind,
    SUMMARY_FIELD_ALIASES,
    LINE_ITEM_FIELD_ALIASES,
)

from .field_mapper import (
    CollisionPolicy,
    ExpenseFieldMapper,
    ExtractedField,
    ExtractionResult,
    parse_expense_document,
    parse_expense_documents,
)

__all__ = [
    # Outcome
    'ParseOutcome',

    # Amounts
    'AmountNormalizer',
    'parse_amount',

    # Dates
    'DateNormalizer',
    'parse_date',

    # Aliases
    'CanonicalField',
    'FieldKind',
    'SUMMARY_FIELD_ALIASES',
    'LINE_ITEM_FIELD_ALIASES',

    # Field Mapper
    'CollisionPolicy',
    'ExpenseFieldMapper',
    'ExtractedField',
    'ExtractionResult',
    'parse_expense_document',
    'parse_expense_documents',
]
