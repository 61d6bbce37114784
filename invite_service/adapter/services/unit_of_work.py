from sqlmodel.ext.asyncio.session import AsyncSession

from invite_service.adapter.repositories.audit_event_repository import AuditEventRepository
from invite_service.adapter.repositories.invitation_repository import InvitationRepository
from invite_service.adapter.repositories.membership_repository import MembershipRepository
from invite_service.adapter.repositories.role_repository import RoleRepository
from invite_service.adapter.repositories.tenant_repository import TenantRepository
from invite_service.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.tenants = TenantRepository(self.session)
        self.roles = RoleRepository(self.session)
        self.memberships = MembershipRepository(self.session)
        self.invitations = InvitationRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Anything not committed inside the block is discarded
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
