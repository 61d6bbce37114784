import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from invite_service.app.services.unit_of_work import UnitOfWork
from invite_service.domain.entities import Membership, MembershipStatus
from invite_service.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

LINK_ERROR = "LINK_ERROR"


class MembershipLinker:
    """Attaches a resolved account to a tenant with a role (idempotent upsert)"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def link(
        self,
        account_id: UUID,
        tenant_id: UUID,
        role: str,
        role_id: Optional[UUID],
        email: str,
        name: str,
    ) -> Result[Membership]:
        """
        Upsert the membership keyed by (account_id, tenant_id) and commit.

        Returns:
            Result with the stored Membership, or LINK_ERROR on constraint
            violation or store failure
        """
        async with self.uow:
            try:
                membership = await self.uow.memberships.upsert(
                    Membership(
                        user_id=account_id,
                        tenant_id=tenant_id,
                        role=role,
                        role_id=role_id,
                        email=email,
                        name=name,
                        status=MembershipStatus.active,
                    )
                )
                await self.uow.commit()
            except SQLAlchemyError as exc:
                await self.uow.rollback()
                logger.error(f"Membership link failed: {exc.__class__.__name__}")
                return Return.err(
                    Error(LINK_ERROR, "Could not link account to the team")
                )

        return Return.ok(membership)
