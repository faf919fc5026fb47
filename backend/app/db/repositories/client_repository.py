"""
Client repository for database operations.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.db.repositories.base_repository import BaseRepository
from app.models.client import Client


class ClientRepository(BaseRepository[Client]):
    """Repository for client operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Client, session)

    async def get_by_email(self, tenant_id: str, email: str) -> Optional[Client]:
        """Get client by email within a tenant."""
        result = await self.session.execute(
            select(Client).where(Client.tenant_id == tenant_id, Client.email == email)
        )
        return result.scalar_one_or_none()

    async def get_by_referral_code(self, tenant_id: str, code: str) -> Optional[Client]:
        """Get the client whose standing referral code is `code`."""
        result = await self.session.execute(
            select(Client).where(Client.tenant_id == tenant_id, Client.referral_code == code)
        )
        return result.scalar_one_or_none()

    async def referral_code_exists(self, code: str) -> bool:
        """True if any client, in any tenant, holds `code`."""
        result = await self.session.execute(
            select(func.count(Client.id)).where(Client.referral_code == code)
        )
        return result.scalar_one() > 0
