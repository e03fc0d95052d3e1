"""Shared fixtures for receipt normalizer tests."""

import sys
from pathlib import Path

import pytest

# Add repository root so the package imports without installation
sys.path.insert(0, str(Path(__file__).parent.parent))


def textract_field(type_name, text, confidence=99.0):
    """Build a field in Textract AnalyzeExpense shape."""
    return {
        'Type': {'Text': type_name, 'Confidence': 99.9},
        'ValueDetection': {'Text': text, 'Confidence': confidence},
    }


def neutral_field(type_name, text, confidence=99.0):
    """Build a field in the neutral shape."""
    return {'typeName': type_name, 'rawText': text, 'confidence': confidence}


@pytest.fixture
def textract_receipt() -> dict:
    """A hardware-store receipt as returned by AnalyzeExpense."""
    return {
        'DocumentMetadata': {'Pages': 1},
        'ExpenseDocuments': [
            {
                'ExpenseIndex': 1,
                'SummaryFields': [
                    textract_field('VENDOR_NAME', '  Home Depot #4521 ', 97.2),
                    textract_field('INVOICE_RECEIPT_DATE', '12/15/2025', 95.0),
                    textract_field('INVOICE_RECEIPT_ID', 'INV-2025-0042', 88.5),
                    textract_field('SUBTOTAL', '$1,100.00', 96.0),
                    textract_field('TAX', '$134.56', 93.1),
                    textract_field('TOTAL', '$1,234.56', 98.4),
                    textract_field('ADDRESS', '2455 Paces Ferry Rd', 90.0),
                ],
                'LineItemGroups': [
                    {
                        'LineItemGroupIndex': 1,
                        'LineItems': [
                            {
                                'LineItemExpenseFields': [
                                    textract_field('ITEM', '2x4 Lumber 8ft'),
                                    textract_field('QUANTITY', '20'),
                                    textract_field('PRICE', '$3.98'),
                                ]
                            },
                            {
                                'LineItemExpenseFields': [
                                    textract_field('DESCRIPTION', 'Drywall Screws'),
                                    textract_field('UNIT_PRICE', '€12,50'),
                                ]
                            },
                            {
                                'LineItemExpenseFields': [
                                    textract_field('EXPENSE_ROW', 'SUBTOTAL 1,100.00'),
                                ]
                            },
                        ],
                    }
                ],
            }
        ],
    }


@pytest.fixture
def neutral_receipt() -> dict:
    """A European invoice in the neutral shape."""
    return {
        'documents': [
            {
                'summaryFields': [
                    neutral_field('MERCHANT_NAME', 'Baustoffe Müller GmbH', 91.0),
                    neutral_field('DATE', '15.12.2025', 87.0),
                    neutral_field('AMOUNT_PAID', '1.234,56 EUR', 94.0),
                    neutral_field('DUE_DATE', '14 Jan 2026', 70.0),
                    neutral_field('PAYMENT_TERMS', ' Net 30 ', 65.0),
                ],
                'lineItemGroups': [
                    {
                        'lineItems': [
                            {'fields': [
                                neutral_field('ITEM', 'Zement 25kg'),
                                neutral_field('QTY', '4'),
                                neutral_field('UNIT_PRICE', '8,99'),
                            ]},
                        ]
                    },
                    {
                        'lineItems': [
                            {'fields': [neutral_field('ITEM', 'Lieferung')]},
                            {'fields': []},
                        ]
                    },
                ],
            }
        ]
    }
