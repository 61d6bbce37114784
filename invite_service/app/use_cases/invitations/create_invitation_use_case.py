"""
Create Invitation Use Case

Handles a tenant administrator inviting a staff member by email.
"""

import logging
import secrets
from typing import Optional
from uuid import UUID

from invite_service.app.services.unit_of_work import UnitOfWork
from invite_service.domain.entities import (
    DEFAULT_MEMBER_ROLE,
    AuditEvent,
    Invitation,
    MembershipStatus,
    TenantStatus,
)
from invite_service.libs.result import Error, Result, Return

from .dtos import CreateInvitationResponse

logger = logging.getLogger(__name__)

INVITER_ROLES = ("owner", "admin")


class CreateInvitationUseCase:
    """
    Use case for inviting a staff member to a tenant.

    Business Rules:
    - Only active owner/admin members of an active tenant can invite
    - role_id, when given, must be a role defined by the same tenant
    - No invitation for someone who is already an active member
    - At most one pending invitation per (tenant, email)
    - Token is cryptographically secure and single-use
    - Email delivery is not performed here; the redemption URL is returned
    """

    def __init__(self, uow: UnitOfWork, app_url: str):
        self.uow = uow
        self.app_url = app_url.rstrip("/")

    async def execute(
        self,
        inviter_user_id: UUID,
        tenant_id: UUID,
        email: str,
        role: Optional[str] = None,
        role_id: Optional[UUID] = None,
    ) -> Result[CreateInvitationResponse]:
        """
        Execute create invitation use case.

        Args:
            inviter_user_id: Account ID of the administrator
            tenant_id: Target tenant ID
            email: Email address to invite
            role: Legacy role name ("staff" when omitted)
            role_id: Structured role reference

        Returns:
            Result with CreateInvitationResponse DTO, or Error
        """
        email = email.strip().lower()

        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))
            if tenant.status == TenantStatus.suspended:
                return Return.err(
                    Error("TENANT_SUSPENDED", "Tenant is suspended")
                )

            inviter = await self.uow.memberships.get_by_user_and_tenant(
                inviter_user_id, tenant_id
            )
            if inviter is None or inviter.status != MembershipStatus.active:
                return Return.err(
                    Error("NOT_A_MEMBER", "You are not a member of this tenant")
                )
            if inviter.role not in INVITER_ROLES:
                return Return.err(
                    Error("INSUFFICIENT_ROLE", "Only owners and admins can invite users")
                )

            if role_id is not None:
                role_definition = await self.uow.roles.get_by_id(role_id)
                if role_definition is None or role_definition.tenant_id != tenant_id:
                    return Return.err(
                        Error("INVALID_ROLE", "Role does not exist in this tenant")
                    )

            existing_member = await self.uow.memberships.get_by_tenant_and_email(
                tenant_id, email
            )
            if existing_member and existing_member.status == MembershipStatus.active:
                return Return.err(
                    Error("ALREADY_MEMBER", "User is already a member of this tenant")
                )

            pending = await self.uow.invitations.get_pending_by_tenant_and_email(
                tenant_id, email
            )
            if pending:
                return Return.err(
                    Error(
                        "INVITE_ALREADY_EXISTS",
                        "A pending invitation already exists for this email",
                    )
                )

            invitation = Invitation(
                tenant_id=tenant_id,
                email=email,
                role=role or DEFAULT_MEMBER_ROLE,
                role_id=role_id,
                token=secrets.token_urlsafe(32),
                invited_by=inviter_user_id,
            )
            invitation = await self.uow.invitations.create(invitation)

            audit = AuditEvent(
                tenant_id=tenant_id,
                user_id=inviter_user_id,
                action="invite_sent",
                event_metadata={
                    "invitation_id": str(invitation.id),
                    "invited_email": email,
                    "role": invitation.role,
                    "role_id": str(role_id) if role_id else None,
                },
            )
            await self.uow.audit_events.create(audit)

            response = CreateInvitationResponse(
                invite_id=str(invitation.id),
                email=email,
                status=invitation.status.value,
                invite_url=f"{self.app_url}/join?token={invitation.token}",
            )
            await self.uow.commit()

        logger.info(f"Invitation {response.invite_id} created for tenant {tenant_id}")
        return Return.ok(response)
