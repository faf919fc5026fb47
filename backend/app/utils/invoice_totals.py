"""
Invoice totals from stored line items.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Mapping, Tuple

_CENT = Decimal("0.01")


def _money(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def sum_item_totals(items: Iterable[Mapping[str, Any]]) -> Tuple[Decimal, Decimal, Decimal]:
    """
    Return (subtotal, vat_amount, total_amount).

    Uses each item's stored `total_without_vat` and `vat_amount`; VAT rates are
    not re-applied.
    """
    subtotal = Decimal("0")
    vat_amount = Decimal("0")
    for item in items:
        subtotal += _money(item.get("total_without_vat"))
        vat_amount += _money(item.get("vat_amount"))
    subtotal = subtotal.quantize(_CENT, rounding=ROUND_HALF_UP)
    vat_amount = vat_amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    return subtotal, vat_amount, subtotal + vat_amount
