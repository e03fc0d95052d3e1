"""
Analysis Response Models

Pydantic models for the document-analysis service output that the extractor
reads. The service owns this structure; these models only describe it.

Two spellings are accepted for every level:

    Neutral                      Textract AnalyzeExpense
    -------                      -----------------------
    documents                    ExpenseDocuments
    summaryFields                SummaryFields
    lineItemGroups               LineItemGroups
    lineItems                    LineItems
    fields                       LineItemExpenseFields
    typeName                     Type.Text
    rawText                      ValueDetection.Text
    confidence                   ValueDetection.Confidence

Parsing is lenient. A field that cannot be read is dropped, a document,
group or line item that is not an object becomes an empty one, and a
response that is not an object at all reads as zero documents. Receipts fail
recognition all the time and none of that is exceptional.
"""

from typing import Any, Optional

from loguru import logger
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)


def _valid_entries(values: Any, model: type[BaseModel]) -> list:
    """Validate each entry of a list, dropping the ones that fail."""
    if not isinstance(values, (list, tuple)):
        return []

    entries = []
    for value in values:
        if isinstance(value, model):
            entries.append(value)
            continue
        try:
            entries.append(model.model_validate(value))
        except ValidationError as e:
            logger.debug(f"Skipping malformed {model.__name__}: {e.error_count()} error(s)")
    return entries


def _object_or_empty(data: Any) -> Any:
    if isinstance(data, (dict, BaseModel)):
        return data
    return {}


class TypedField(BaseModel):
    """One detected field: its type name, the text read, and a 0-100 confidence."""
    model_config = ConfigDict(frozen=True)

    type_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices('typeName', 'type_name')
    )
    raw_text: Optional[str] = Field(
        default=None, validation_alias=AliasChoices('rawText', 'raw_text')
    )
    confidence: float = 0.0

    @model_validator(mode='before')
    @classmethod
    def flatten_textract_shape(cls, data: Any) -> Any:
        """Turn {'Type': {'Text'}, 'ValueDetection': {'Text', 'Confidence'}} into flat keys."""
        if not isinstance(data, dict):
            return data
        if 'Type' not in data and 'ValueDetection' not in data:
            return data

        type_block = data.get('Type')
        value_block = data.get('ValueDetection')
        type_block = type_block if isinstance(type_block, dict) else {}
        value_block = value_block if isinstance(value_block, dict) else {}

        return {
            'typeName': type_block.get('Text'),
            'rawText': value_block.get('Text'),
            'confidence': value_block.get('Confidence'),
        }

    @field_validator('type_name', 'raw_text', mode='before')
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('confidence', mode='before')
    @classmethod
    def default_confidence(cls, v: Any) -> Any:
        return 0.0 if v is None else v


class LineItem(BaseModel):
    """A single itemized row: a list of typed fields."""
    model_config = ConfigDict(frozen=True)

    expense_fields: list[TypedField] = Field(
        default_factory=list,
        validation_alias=AliasChoices('fields', 'LineItemExpenseFields', 'expense_fields'),
    )

    @model_validator(mode='before')
    @classmethod
    def coerce_object(cls, data: Any) -> Any:
        # A line item that is not an object still counts as a line item
        return _object_or_empty(data)

    @field_validator('expense_fields', mode='before')
    @classmethod
    def drop_malformed_fields(cls, v: Any) -> list:
        return _valid_entries(v, TypedField)


class LineItemGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_items: list[LineItem] = Field(
        default_factory=list,
        validation_alias=AliasChoices('lineItems', 'LineItems', 'line_items'),
    )

    @model_validator(mode='before')
    @classmethod
    def coerce_object(cls, data: Any) -> Any:
        return _object_or_empty(data)

    @field_validator('line_items', mode='before')
    @classmethod
    def keep_every_item(cls, v: Any) -> list:
        return _valid_entries(v, LineItem)


class AnalyzedDocument(BaseModel):
    """One analyzed document: summary fields plus groups of line items."""
    model_config = ConfigDict(frozen=True)

    summary_fields: list[TypedField] = Field(
        default_factory=list,
        validation_alias=AliasChoices('summaryFields', 'SummaryFields', 'summary_fields'),
    )
    line_item_groups: list[LineItemGroup] = Field(
        default_factory=list,
        validation_alias=AliasChoices('lineItemGroups', 'LineItemGroups', 'line_item_groups'),
    )

    @model_validator(mode='before')
    @classmethod
    def coerce_object(cls, data: Any) -> Any:
        return _object_or_empty(data)

    @field_validator('summary_fields', mode='before')
    @classmethod
    def drop_malformed_fields(cls, v: Any) -> list:
        return _valid_entries(v, TypedField)

    @field_validator('line_item_groups', mode='before')
    @classmethod
    def keep_every_group(cls, v: Any) -> list:
        return _valid_entries(v, LineItemGroup)

    @property
    def line_item_count(self) -> int:
        return sum(len(group.line_items) for group in self.line_item_groups)


class AnalysisResponse(BaseModel):
    """The full response: a sequence of analyzed documents."""
    model_config = ConfigDict(frozen=True)

    documents: list[AnalyzedDocument] = Field(
        default_factory=list,
        validation_alias=AliasChoices('documents', 'ExpenseDocuments'),
    )

    @field_validator('documents', mode='before')
    @classmethod
    def keep_every_document(cls, v: Any) -> list:
        return _valid_entries(v, AnalyzedDocument)

    @classmethod
    def from_raw(cls, data: Any) -> 'AnalysisResponse':
        """
        Read a response without raising.

        Args:
            data: An AnalysisResponse, or a dict in either spelling

        Returns:
            AnalysisResponse (with zero documents if nothing could be read)
        """
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            logger.debug(f"Analysis response is a {type(data).__name__}, not an object")
            return cls()

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            logger.debug(f"Unreadable analysis response: {e.error_count()} error(s)")
            return cls()
