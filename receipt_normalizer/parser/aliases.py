"""
Type Alias Tables

Maps the field type names emitted by the document-analysis service onto the
engine's canonical expense fields.

The service uses several names for the same concept ("TOTAL" and
"AMOUNT_PAID" both mean the amount due), so every name maps many-to-one onto
exactly one canonical field. Names that are not in a table are ignored.

Summary fields and line-item fields use separate tables: a "DESCRIPTION"
inside a line item is an item description, while the same name at document
level means nothing to us.

The tables are built once at import and wrapped in MappingProxyType so they
cannot be changed afterwards.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class CanonicalField(str, Enum):
    """Canonical expense attributes produced by the extractor."""

    # Summary level
    AMOUNT = 'amount'
    DATE = 'date'
    VENDOR = 'vendor'
    INVOICE_NUMBER = 'invoiceNumber'
    SUBTOTAL = 'subtotal'
    TAX = 'tax'
    DUE_DATE = 'dueDate'
    PAYMENT_TERMS = 'paymentTerms'

    # Line-item level
    DESCRIPTION = 'description'
    QUANTITY = 'quantity'
    UNIT_PRICE = 'unitPrice'


class FieldKind(Enum):
    """How the raw text of a canonical field is normalized."""
    AMOUNT = 'amount'       # Amount parser, rounded to 2 places
    DATE = 'date'           # Date parser, ISO YYYY-MM-DD
    QUANTITY = 'quantity'   # Amount parser, must be positive
    TEXT = 'text'           # Trimmed text


SUMMARY_FIELDS = frozenset({
    CanonicalField.AMOUNT,
    CanonicalField.DATE,
    CanonicalField.VENDOR,
    CanonicalField.INVOICE_NUMBER,
    CanonicalField.SUBTOTAL,
    CanonicalField.TAX,
    CanonicalField.DUE_DATE,
    CanonicalField.PAYMENT_TERMS,
})

LINE_ITEM_FIELDS = frozenset({
    CanonicalField.DESCRIPTION,
    CanonicalField.QUANTITY,
    CanonicalField.UNIT_PRICE,
})

FIELD_KINDS: Mapping[CanonicalField, FieldKind] = MappingProxyType({
    CanonicalField.AMOUNT: FieldKind.AMOUNT,
    CanonicalField.SUBTOTAL: FieldKind.AMOUNT,
    CanonicalField.TAX: FieldKind.AMOUNT,
    CanonicalField.UNIT_PRICE: FieldKind.AMOUNT,
    CanonicalField.DATE: FieldKind.DATE,
    CanonicalField.DUE_DATE: FieldKind.DATE,
    CanonicalField.QUANTITY: FieldKind.QUANTITY,
    CanonicalField.VENDOR: FieldKind.TEXT,
    CanonicalField.INVOICE_NUMBER: FieldKind.TEXT,
    CanonicalField.PAYMENT_TERMS: FieldKind.TEXT,
    CanonicalField.DESCRIPTION: FieldKind.TEXT,
})

SUMMARY_FIELD_ALIASES: Mapping[str, CanonicalField] = MappingProxyType({
    'TOTAL': CanonicalField.AMOUNT,
    'AMOUNT_PAID': CanonicalField.AMOUNT,
    'AMOUNT': CanonicalField.AMOUNT,

    'INVOICE_RECEIPT_DATE': CanonicalField.DATE,
    'DATE': CanonicalField.DATE,

    'INVOICE_RECEIPT_ID': CanonicalField.INVOICE_NUMBER,
    'INVOICE_ID': CanonicalField.INVOICE_NUMBER,
    'RECEIPT_ID': CanonicalField.INVOICE_NUMBER,

    'VENDOR_NAME': CanonicalField.VENDOR,
    'VENDOR': CanonicalField.VENDOR,
    'MERCHANT_NAME': CanonicalField.VENDOR,

    'SUBTOTAL': CanonicalField.SUBTOTAL,
    'TAX': CanonicalField.TAX,
    'DUE_DATE': CanonicalField.DUE_DATE,
    'PAYMENT_TERMS': CanonicalField.PAYMENT_TERMS,
})

LINE_ITEM_FIELD_ALIASES: Mapping[str, CanonicalField] = MappingProxyType({
    'ITEM': CanonicalField.DESCRIPTION,
    'DESCRIPTION': CanonicalField.DESCRIPTION,
    'PRODUCT_CODE': CanonicalField.DESCRIPTION,

    'PRICE': CanonicalField.UNIT_PRICE,
    'UNIT_PRICE': CanonicalField.UNIT_PRICE,

    'QUANTITY': CanonicalField.QUANTITY,
    'QTY': CanonicalField.QUANTITY,
})


def normalize_type_name(type_name: Optional[str]) -> str:
    """Lookup key for a raw type name: trimmed and upper-cased."""
    if not type_name:
        return ''
    return str(type_name).strip().upper()


def build_alias_table(
    base: Mapping[str, CanonicalField],
    extra: Optional[Mapping[str, str]] = None,
    allowed: frozenset = frozenset(),
) -> Mapping[str, CanonicalField]:
    """
    Build a read-only alias table from a base table plus additions.

    Args:
        base: Existing table (left untouched)
        extra: Raw type name -> canonical field value, e.g. {'GRAND_TOTAL': 'amount'}
        allowed: Canonical fields the additions may target

    Returns:
        New MappingProxyType table

    Raises:
        ValueError: If an addition targets an unknown or disallowed field
    """
    table = dict(base)

    for type_name, canonical in (extra or {}).items():
        try:
            target = CanonicalField(canonical)
        except ValueError:
            raise ValueError(f"Unknown canonical field '{canonical}' for alias '{type_name}'")

        if allowed and target not in allowed:
            raise ValueError(
                f"Alias '{type_name}' targets '{target.value}', "
                f"which is not valid at this level"
            )

        table[normalize_type_name(type_name)] = target

    return MappingProxyType(table)
