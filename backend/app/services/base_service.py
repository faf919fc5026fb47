"""
Base service class.

Services own the unit of work: they call repositories, which only flush, and
decide when to commit. Best-effort follow-up work (invoices, notifications)
runs after the main commit so its failure never undoes a status change.
"""

from abc import ABC
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession


class BaseService(ABC):
    """Base class for tenant-scoped business services."""

    session: Optional[AsyncSession] = None
