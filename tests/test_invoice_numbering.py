"""
Invoice number pattern and totals tests.
"""

from decimal import Decimal

from app.models.invoice import DocumentType
from app.utils.invoice_numbering import (
    DEFAULT_PATTERN,
    build_number_from_pattern,
    default_prefix,
    generate_variable_symbol,
)
from app.utils.invoice_totals import sum_item_totals


def test_default_pattern():
    assert build_number_from_pattern(DEFAULT_PATTERN, "FV", 2024, 3, 7) == "FV2024-0007"


def test_all_placeholders():
    number = build_number_from_pattern(
        "{PREFIX}/{YY}{MM}/{NUMBER}{SUFFIX}",
        prefix="PF",
        year=2025,
        month=1,
        number=42,
        padding=5,
        suffix="-A",
    )
    assert number == "PF/2501/00042-A"


def test_explicit_number_padding_overrides_series_padding():
    assert build_number_from_pattern("{YEAR}{NUMBER:6}", "", 2024, 1, 12, padding=2) == "2024000012"


def test_variable_symbol():
    assert generate_variable_symbol(7, 2024) == "202400007"
    assert generate_variable_symbol(123456, 2024) == "2024123456"
    assert len(generate_variable_symbol(1234567, 2024)) <= 10


def test_default_prefixes():
    assert default_prefix(DocumentType.INVOICE) == "FV"
    assert default_prefix("PROFORMA") == "PF"
    assert default_prefix(DocumentType.CREDIT_NOTE) == "OD"


def test_sum_item_totals_trusts_stored_amounts():
    items = [
        {"total_without_vat": "100.10", "vat_amount": "21.02", "vat_rate": "99"},
        {"total_without_vat": 50, "vat_amount": None},
    ]
    subtotal, vat_amount, total = sum_item_totals(items)

    assert subtotal == Decimal("150.10")
    assert vat_amount == Decimal("21.02")
    assert total == Decimal("171.12")


def test_sum_item_totals_empty():
    assert sum_item_totals([]) == (Decimal("0.00"), Decimal("0.00"), Decimal("0.00"))
