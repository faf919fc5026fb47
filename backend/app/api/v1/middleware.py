"""
API request dependencies shared by the endpoint routers.
Resolves the tenant of a request and guards scheduled-job routes.
"""

import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import settings
from app.core.exceptions import ServiceNotConfiguredError

TENANT_HEADER = "X-Tenant-ID"

cron_security = HTTPBearer(auto_error=False)


async def get_tenant_id(
    x_tenant_id: Optional[str] = Header(None, alias=TENANT_HEADER),
) -> str:
    """
    Tenant of the current request, taken from the X-Tenant-ID header.

    Raises:
        HTTPException: 400 if the header is missing or blank
    """
    tenant_id = (x_tenant_id or "").strip()
    if not tenant_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Missing {TENANT_HEADER} header",
        )
    return tenant_id


async def require_cron_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(cron_security),
) -> None:
    """
    Guard for routes called by the scheduler.

    Usage:
        @router.post("/process", dependencies=[Depends(require_cron_secret)])

    Raises:
        ServiceNotConfiguredError: if CRON_SECRET is not set
        HTTPException: 401 if the bearer token does not match
    """
    if not settings.CRON_SECRET:
        raise ServiceNotConfiguredError("Scheduled jobs are not configured")

    token = credentials.credentials if credentials else ""
    if not secrets.compare_digest(token.encode(), settings.CRON_SECRET.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid cron secret",
            headers={"WWW-Authenticate": "Bearer"},
        )
