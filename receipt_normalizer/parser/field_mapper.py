"""
Field Mapper Module

Maps the typed fields of an analyzed receipt onto canonical expense fields.

Architecture:
1. Read the raw response leniently (models.AnalysisResponse)
2. Look each field's type name up in the alias table
3. Normalize the text by field kind: amount, date, quantity or text
4. Keep the confidence score, keyed by canonical name
5. Repeat for every line item, keeping input order

Failure is expressed through absence. A field that is not in the input, or
whose text cannot be parsed, is simply missing from ExtractionResult.fields.
Nothing is ever filled in with 0, an empty string or a made-up date, since
those would end up stored as real expense data.

The confidence of a field is recorded whether or not its value parsed, so
callers can tell "the service saw a total but we could not read it" apart
from "there was no total".
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Union

from loguru import logger

from ..models import AnalysisResponse, AnalyzedDocument, TypedField
from .aliases import (
    FIELD_KINDS,
    LINE_ITEM_FIELD_ALIASES,
    LINE_ITEM_FIELDS,
    SUMMARY_FIELD_ALIASES,
    SUMMARY_FIELDS,
    CanonicalField,
    FieldKind,
    build_alias_table,
    normalize_type_name,
)
from .amounts import AmountNormalizer
from .dates import DateNormalizer


class CollisionPolicy(Enum):
    """Which occurrence wins when several type names alias to one field."""
    LAST_WINS = 'last_wins'                     # Later occurrence in input order
    HIGHEST_CONFIDENCE = 'highest_confidence'   # Highest score, later on ties


@dataclass(frozen=True)
class ExtractedField:
    """
    One alias-table hit.
    """
    name: CanonicalField                # Canonical field
    value: Any                          # Normalized value, None if unparseable
    raw_value: str                      # Text as read by the service
    confidence: float                   # 0 to 100, verbatim
    type_name: str = ''                 # Type name as emitted

    @property
    def is_valid(self) -> bool:
        return self.value is not None


def _frozen(mapping: Optional[dict] = None) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class ExtractionResult:
    """
    Canonical expense data extracted from one analyzed document.

    fields:      canonical name -> normalized value (absent = not found)
    confidence:  canonical name -> service confidence (0-100)
    line_items:  one mapping per input line item, input order
    """
    fields: Mapping[str, Any] = field(default_factory=_frozen)
    confidence: Mapping[str, float] = field(default_factory=_frozen)
    line_items: tuple[Mapping[str, Any], ...] = ()

    @property
    def unparsed_fields(self) -> list[str]:
        """Fields the service detected but whose text could not be normalized."""
        return [name for name in self.confidence if name not in self.fields]

    @property
    def is_empty(self) -> bool:
        return not self.fields and not self.confidence and not self.line_items

    def to_dict(self) -> dict[str, Any]:
        """Plain, mutable copy for JSON output or merging into an expense."""
        return {
            'fields': dict(self.fields),
            'confidence': dict(self.confidence),
            'lineItems': [dict(item) for item in self.line_items],
        }


class ExpenseFieldMapper:
    """
    Extracts canonical expense fields from document-analysis responses.

    Usage:
        mapper = ExpenseFieldMapper()
        result = mapper.parse_document(textract_response)
        print(result.fields.get('amount'), result.confidence.get('amount'))

    The mapper holds only read-only configuration, so one instance can be
    shared between threads.
    """

    def __init__(
        self,
        collision_policy: Union[CollisionPolicy, str] = CollisionPolicy.LAST_WINS,
        prefer_day_first: bool = False,
        extra_summary_aliases: Optional[Mapping[str, str]] = None,
        extra_line_item_aliases: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize field mapper.

        Args:
            collision_policy: How to pick between fields aliasing to one name
            prefer_day_first: Read ambiguous numeric dates day-first
            extra_summary_aliases: Additional type name -> canonical name entries
            extra_line_item_aliases: Same, for line-item fields

        Raises:
            ValueError: On an unknown policy or alias target
        """
        self.collision_policy = CollisionPolicy(collision_policy)
        self.amount_norm = AmountNormalizer()
        self.date_norm = DateNormalizer(prefer_day_first=prefer_day_first)

        self.summary_aliases = SUMMARY_FIELD_ALIASES
        if extra_summary_aliases:
            self.summary_aliases = build_alias_table(
                SUMMARY_FIELD_ALIASES, extra_summary_aliases, SUMMARY_FIELDS
            )

        self.line_item_aliases = LINE_ITEM_FIELD_ALIASES
        if extra_line_item_aliases:
            self.line_item_aliases = build_alias_table(
                LINE_ITEM_FIELD_ALIASES, extra_line_item_aliases, LINE_ITEM_FIELDS
            )

    def parse_document(self, response: Any) -> ExtractionResult:
        """
        Extract the first document of a response.

        Args:
            response: Raw analysis response (dict or AnalysisResponse)

        Returns:
            ExtractionResult, empty when the response has no documents
        """
        parsed = AnalysisResponse.from_raw(response)

        if not parsed.documents:
            logger.debug("Analysis response contains no documents")
            return ExtractionResult()

        if len(parsed.documents) > 1:
            logger.debug(
                f"Response has {len(parsed.documents)} documents, extracting the first"
            )

        return self.extract(parsed.documents[0])

    def parse_documents(self, response: Any) -> list[ExtractionResult]:
        """Extract every document of a response, one result each, in order."""
        parsed = AnalysisResponse.from_raw(response)
        return [self.extract(document) for document in parsed.documents]

    def extract(self, document: AnalyzedDocument) -> ExtractionResult:
        """Extract summary fields and line items from one document."""
        fields, confidence = self._collect(document.summary_fields, self.summary_aliases)

        line_items = []
        for group in document.line_item_groups:
            for item in group.line_items:
                item_fields, _ = self._collect(item.expense_fields, self.line_item_aliases)
                line_items.append(_frozen(item_fields))

        logger.debug(
            f"Extracted {len(fields)} field(s), {len(confidence)} scored, "
            f"{len(line_items)} line item(s)"
        )

        return ExtractionResult(
            fields=_frozen(fields),
            confidence=_frozen(confidence),
            line_items=tuple(line_items),
        )

    def extract_field(
        self,
        typed_field: TypedField,
        aliases: Mapping[str, CanonicalField]
    ) -> Optional[ExtractedField]:
        """
        Map and normalize one typed field.

        Returns:
            ExtractedField, or None when the type name is not in the table
        """
        canonical = aliases.get(normalize_type_name(typed_field.type_name))
        if canonical is None:
            return None

        return ExtractedField(
            name=canonical,
            value=self.normalize_value(canonical, typed_field.raw_text),
            raw_value=typed_field.raw_text or '',
            confidence=typed_field.confidence,
            type_name=typed_field.type_name or '',
        )

    def normalize_value(self, canonical: CanonicalField, raw_text: Optional[str]) -> Any:
        """Normalize raw text by field kind. None means unparseable."""
        if raw_text is None:
            return None

        kind = FIELD_KINDS[canonical]

        if kind is FieldKind.AMOUNT:
            return self.amount_norm.normalize(raw_text).value_or_none()

        if kind is FieldKind.DATE:
            return self.date_norm.normalize(raw_text).value_or_none()

        if kind is FieldKind.QUANTITY:
            quantity = self.amount_norm.normalize(raw_text).value_or_none()
            if quantity is None or quantity <= 0:
                return None
            return quantity

        text = raw_text.strip()
        return text or None

    def _collect(
        self,
        typed_fields: Iterable[TypedField],
        aliases: Mapping[str, CanonicalField]
    ) -> tuple[dict[str, Any], dict[str, float]]:
        chosen: dict[CanonicalField, ExtractedField] = {}

        for typed_field in typed_fields:
            extracted = self.extract_field(typed_field, aliases)
            if extracted is None:
                continue

            current = chosen.get(extracted.name)
            if current is None or self._replaces(current, extracted):
                chosen[extracted.name] = extracted

        fields = {
            name.value: extracted.value
            for name, extracted in chosen.items()
            if extracted.is_valid
        }
        confidence = {
            name.value: extracted.confidence
            for name, extracted in chosen.items()
        }
        return fields, confidence

    def _replaces(self, current: ExtractedField, candidate: ExtractedField) -> bool:
        # Value and confidence always come from the same occurrence
        if self.collision_policy is CollisionPolicy.HIGHEST_CONFIDENCE:
            return candidate.confidence >= current.confidence
        return True


_DEFAULT_MAPPER = ExpenseFieldMapper()


def parse_expense_document(response: Any) -> ExtractionResult:
    """Extract canonical expense fields from the first document of a response."""
    return _DEFAULT_MAPPER.parse_document(response)


def parse_expense_documents(response: Any) -> list[ExtractionResult]:
    """Extract every document of a response separately."""
    return _DEFAULT_MAPPER.parse_documents(response)
