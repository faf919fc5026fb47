"""
Rate limiter shared by the application and rate limited endpoints.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

PUBLIC_ENDPOINT_LIMIT = f"{settings.RATE_LIMIT_PER_MINUTE}/minute"
