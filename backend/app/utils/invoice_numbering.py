"""
Invoice number patterns.

Placeholders:
    {PREFIX}     series prefix, e.g. "FV"
    {SUFFIX}     series suffix
    {YEAR}       full year (2024)
    {YY}         short year (24)
    {MM}         month, zero padded
    {NUMBER}     sequence number padded to the series' padding
    {NUMBER:n}   sequence number padded to n digits
"""

import re

from app.models.invoice import DocumentType


DEFAULT_PATTERN = "{PREFIX}{YEAR}-{NUMBER:4}"
DEFAULT_PADDING = 4

DEFAULT_PREFIXES = {
    DocumentType.INVOICE: "FV",
    DocumentType.PROFORMA: "PF",
    DocumentType.CREDIT_NOTE: "OD",
}

_NUMBER_WITH_PADDING = re.compile(r"\{NUMBER:(\d+)\}")


def build_number_from_pattern(
    pattern: str,
    prefix: str,
    year: int,
    month: int,
    number: int,
    padding: int = DEFAULT_PADDING,
    suffix: str = "",
) -> str:
    """Render a number series pattern."""
    result = pattern
    result = result.replace("{PREFIX}", prefix)
    result = result.replace("{SUFFIX}", suffix or "")
    result = result.replace("{YEAR}", str(year))
    result = result.replace("{YY}", str(year)[-2:])
    result = result.replace("{MM}", f"{month:02d}")
    result = _NUMBER_WITH_PADDING.sub(lambda m: str(number).zfill(int(m.group(1))), result)
    result = result.replace("{NUMBER}", str(number).zfill(padding))
    return result


def generate_variable_symbol(sequence_number: int, year: int) -> str:
    """Numeric payment reference: year + 5-digit sequence, at most 10 digits."""
    number_part = str(sequence_number).zfill(5)
    symbol = f"{year}{number_part}"
    if len(symbol) > 10:
        return number_part[-10:]
    return symbol


def default_prefix(document_type: DocumentType) -> str:
    """Prefix used when a tenant has no number series for the document type."""
    return DEFAULT_PREFIXES.get(DocumentType(document_type), "DOC")
