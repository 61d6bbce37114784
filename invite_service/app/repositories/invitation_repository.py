from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from invite_service.domain.entities import Invitation


class IInvitationRepository(ABC):
    """Invitation repository interface - application layer"""

    @abstractmethod
    async def get_pending_by_token(self, token: str) -> Optional[Invitation]:
        """
        Get invitation by token only while it is still pending.

        None covers both "never existed" and "already used" so callers
        cannot tell a stale link from a guessed one.
        """
        pass

    @abstractmethod
    async def get_pending_by_tenant_and_email(
        self, tenant_id: UUID, email: str
    ) -> Optional[Invitation]:
        """Get pending invitation by tenant and email"""
        pass

    @abstractmethod
    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        pass

    @abstractmethod
    async def burn(self, invitation_id: UUID) -> bool:
        """
        Atomically transition an invitation from pending to consumed.

        Returns False when no pending row was transitioned, i.e. a
        concurrent caller already consumed it.
        """
        pass
