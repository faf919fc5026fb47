"""
Schemas shared by several modules.
"""

from pydantic import BaseModel
from typing import Optional


class SideEffectOutcome(BaseModel):
    """Outcome of one best-effort side action triggered by a primary mutation."""
    name: str
    success: bool
    error: Optional[str] = None


def reject_explicit_nulls(data, fields):
    """Raise if any of `fields` is present in the payload with a null value."""
    if isinstance(data, dict):
        nulls = [name for name in fields if name in data and data[name] is None]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
    return data
