"""
Health service.
Provides health check functionality.
"""

import time
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.services.base_service import BaseService
from app.schemas.health import HealthResponse
from app.db.repositories.health_repository import HealthRepository


class HealthService(BaseService):
    """Service for health check operations."""

    def __init__(self):
        self.start_time = time.time()

    async def _check_database(self, session: Optional[AsyncSession]) -> bool:
        if session is not None:
            return await HealthRepository(session=session).check_database()

        from app.db.session import get_sessionmaker

        async with get_sessionmaker()() as own_session:
            return await HealthRepository(session=own_session).check_database()

    async def get_health(self, session: Optional[AsyncSession] = None) -> HealthResponse:
        """
        Get system health status.

        Args:
            session: Request-scoped session; a new one is opened when omitted

        Returns:
            HealthResponse with status, version, uptime, and checks
        """
        uptime_seconds = int(time.time() - self.start_time)
        uptime_str = f"PT{uptime_seconds}S"  # ISO 8601 duration format

        checks = {}
        try:
            db_ok = await self._check_database(session)
            checks["database"] = "ok" if db_ok else "error"
        except Exception as e:
            checks["database"] = f"error: {str(e)}"

        status = "ok" if all(check == "ok" for check in checks.values()) else "degraded"

        return HealthResponse(
            status=status,
            version=settings.VERSION,
            uptime=uptime_str,
            checks=checks,
        )
