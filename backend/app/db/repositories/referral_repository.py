"""
Referral repository for database operations.
"""

from datetime import datetime
from typing import Dict, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, update

from app.db.repositories.base_repository import BaseRepository
from app.models.referral import Referral, ReferralStatus


class ReferralRepository(BaseRepository[Referral]):
    """Repository for referral operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Referral, session)

    async def get_by_code(self, tenant_id: str, code: str) -> Optional[Referral]:
        """Get referral by code within a tenant."""
        result = await self.session.execute(
            select(Referral).where(Referral.tenant_id == tenant_id, Referral.code == code)
        )
        return result.scalar_one_or_none()

    async def code_exists(self, code: str) -> bool:
        """True if any referral, in any tenant, uses `code`."""
        result = await self.session.execute(
            select(func.count(Referral.id)).where(Referral.code == code)
        )
        return result.scalar_one() > 0

    async def count_by_referrer(self, referrer_id: UUID) -> int:
        """Count invitations issued by a client."""
        result = await self.session.execute(
            select(func.count(Referral.id)).where(Referral.referrer_id == referrer_id)
        )
        return result.scalar_one()

    async def count_by_status(self, tenant_id: str) -> Dict[ReferralStatus, int]:
        """Referral counts per status for a tenant."""
        result = await self.session.execute(
            select(Referral.status, func.count(Referral.id))
            .where(Referral.tenant_id == tenant_id)
            .group_by(Referral.status)
        )
        counts = {status: 0 for status in ReferralStatus}
        for status, count in result.all():
            counts[ReferralStatus(status)] = count
        return counts

    async def transition_from_pending(self, referral_id: UUID, new_status: ReferralStatus, **values) -> bool:
        """
        Move a referral out of pending. The WHERE clause on status keeps the
        change one-way; returns False if the referral was no longer pending.
        """
        result = await self.session.execute(
            update(Referral)
            .where(Referral.id == referral_id, Referral.status == ReferralStatus.PENDING)
            .values(status=new_status, **values)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return result.rowcount > 0

    async def mark_expired(self, referral_id: UUID) -> bool:
        """pending -> expired."""
        return await self.transition_from_pending(referral_id, ReferralStatus.EXPIRED)

    async def mark_used(self, referral_id: UUID, referred_client_id: Optional[UUID], used_at: datetime) -> bool:
        """pending -> used."""
        return await self.transition_from_pending(
            referral_id,
            ReferralStatus.USED,
            referred_client_id=referred_client_id,
            used_at=used_at,
        )
