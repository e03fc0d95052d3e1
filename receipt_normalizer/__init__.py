"""
Receipt Normalizer

Turns the confidence-scored output of a document-analysis service (such as
AWS Textract AnalyzeExpense) into canonical, typed expense records.

Features:
- Locale-ambiguous amount parsing (1,234.56 vs 1.234,56)
- Date parsing with day/month disambiguation and two-digit year pivot
- Alias tables mapping service field types onto canonical fields
- Confidence pass-through and caller-side review triage
- Lenient reading of malformed responses: failure means absence, never a default

Quick Start:
    from receipt_normalizer import parse_expense_document, triage_extraction

    result = parse_expense_document(textract_response)
    print(result.fields)        # {'amount': 1234.56, 'date': '2025-12-15', ...}
    print(result.confidence)    # {'amount': 98.4, 'date': 45.0, ...}

    report = triage_extraction(result, threshold=80)
    print(report.low_confidence_fields)

CLI Usage:
    receipt-normalizer response.json --table
"""

from loguru import logger

__version__ = '1.0.0'
__author__ = 'Document Intelligence Team'

from .parser.outcome import ParseOutcome
from .parser.amounts import AmountNormalizer, parse_amount
from .parser.dates import DateNormalizer, parse_date
from .parser.aliases import (
    CanonicalField,
    FieldKind,
    SUMMARY_FIELD_ALIASES,
    LINE_ITEM_FIELD_ALIASES,
)
from .parser.field_mapper import (
    CollisionPolicy,
    ExpenseFieldMapper,
    ExtractedField,
    ExtractionResult,
    parse_expense_document,
    parse_expense_documents,
)
from .models import (
    AnalysisResponse,
    AnalyzedDocument,
    LineItemGroup,
    LineItem,
    TypedField,
)
from .decision.confidence_triage import (
    ConfidenceLevel,
    FieldTriage,
    TriageReport,
    triage_extraction,
)
from .config import ConfigError, ConfigLoader, EngineSettings

# Library use stays silent; the CLI turns logging back on
logger.disable('receipt_normalizer')

__all__ = [
    # Version
    '__version__',

    # Parsers
    'ParseOutcome',
    'AmountNormalizer',
    'parse_amount',
    'DateNormalizer',
    'parse_date',

    # Extraction
    'CanonicalField',
    'FieldKind',
    'SUMMARY_FIELD_ALIASES',
    'LINE_ITEM_FIELD_ALIASES',
    'CollisionPolicy',
    'ExpenseFieldMapper',
    'ExtractedField',
    'ExtractionResult',
    'parse_expense_document',
    'parse_expense_documents',

    # Input models
    'AnalysisResponse',
    'AnalyzedDocument',
    'LineItemGroup',
    'LineItem',
    'TypedField',

    # Triage
    'ConfidenceLevel',
    'FieldTriage',
    'TriageReport',
    'triage_extraction',

    # Config
    'ConfigError',
    'ConfigLoader',
    'EngineSettings',
]
