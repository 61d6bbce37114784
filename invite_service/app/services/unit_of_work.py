from abc import ABC, abstractmethod

from invite_service.app.repositories.audit_event_repository import IAuditEventRepository
from invite_service.app.repositories.invitation_repository import IInvitationRepository
from invite_service.app.repositories.membership_repository import IMembershipRepository
from invite_service.app.repositories.role_repository import IRoleRepository
from invite_service.app.repositories.tenant_repository import ITenantRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    tenants: ITenantRepository
    roles: IRoleRepository
    memberships: IMembershipRepository
    invitations: IInvitationRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
