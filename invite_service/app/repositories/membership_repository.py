from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from invite_service.domain.entities import Membership


class IMembershipRepository(ABC):
    """Membership repository interface - application layer"""

    @abstractmethod
    async def get_by_user_and_tenant(
        self, user_id: UUID, tenant_id: UUID
    ) -> Optional[Membership]:
        """Get membership by user and tenant"""
        pass

    @abstractmethod
    async def get_by_tenant_and_email(
        self, tenant_id: UUID, email: str
    ) -> Optional[Membership]:
        """Get membership by tenant and member email"""
        pass

    @abstractmethod
    async def upsert(self, membership: Membership) -> Membership:
        """Insert or refresh the membership keyed by (user_id, tenant_id)"""
        pass
