from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from invite_service.app.repositories.membership_repository import IMembershipRepository
from invite_service.domain.base import utcnow
from invite_service.domain.entities import Membership


class MembershipRepository(IMembershipRepository):
    """Membership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_and_tenant(
        self, user_id: UUID, tenant_id: UUID
    ) -> Optional[Membership]:
        """Get membership by user and tenant"""
        stmt = select(Membership).where(
            Membership.user_id == user_id, Membership.tenant_id == tenant_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_tenant_and_email(
        self, tenant_id: UUID, email: str
    ) -> Optional[Membership]:
        """Get membership by tenant and member email"""
        stmt = select(Membership).where(
            Membership.tenant_id == tenant_id, Membership.email == email
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def upsert(self, membership: Membership) -> Membership:
        """
        Insert the membership, or refresh the existing (user_id, tenant_id) row.

        The unique index on (user_id, tenant_id) still guards against a
        concurrent insert; the resulting IntegrityError surfaces on flush.
        """
        existing = await self.get_by_user_and_tenant(
            membership.user_id, membership.tenant_id
        )
        if existing is None:
            target = membership
        else:
            existing.role = membership.role
            existing.role_id = membership.role_id
            existing.email = membership.email
            existing.name = membership.name
            existing.status = membership.status
            existing.updated_at = utcnow()
            target = existing

        self.session.add(target)
        await self.session.flush()
        await self.session.refresh(target)
        return target
