"""
Handover Invitation Use Case

First redemption phase: trades a single-use invitation token for a
short-lived capability token.
"""

import logging
from typing import Optional

from invite_service.app.services.capability_token import (
    CapabilityClaims,
    ICapabilityTokenSigner,
)
from invite_service.app.services.unit_of_work import UnitOfWork
from invite_service.domain.entities import AuditEvent
from invite_service.libs.result import Error, Result, Return

from .dtos import HandoverResponse

logger = logging.getLogger(__name__)


class HandoverInvitationUseCase:
    """
    Use case for the handover phase.

    Business Rules:
    - Only a pending invitation can be handed over
    - The invitation is burned (pending -> consumed) before any token is minted
    - A caller that loses the burn race never receives a capability token
    - Not-found and already-used look identical to the caller
    - The burn is never undone, whatever happens afterwards
    """

    def __init__(self, uow: UnitOfWork, signer: ICapabilityTokenSigner):
        self.uow = uow
        self.signer = signer

    async def execute(self, token: Optional[str]) -> Result[HandoverResponse]:
        """
        Execute handover use case.

        Args:
            token: Raw invitation token from the invite link

        Returns:
            Result with HandoverResponse DTO, or INVITE_INVALID
        """
        invalid = Error("INVITE_INVALID", "invite expired or already used")

        if not token:
            return Return.err(invalid)

        async with self.uow:
            invitation = await self.uow.invitations.get_pending_by_token(token)
            if invitation is None:
                logger.info("Handover rejected: invitation not found or already used")
                return Return.err(invalid)

            if not await self.uow.invitations.burn(invitation.id):
                logger.warning(
                    f"Handover rejected: invitation {invitation.id} already consumed"
                )
                return Return.err(invalid)

            claims = CapabilityClaims(
                invite_id=str(invitation.id),
                email=invitation.email,
                tenant_id=str(invitation.tenant_id),
                role=invitation.role,
                role_id=str(invitation.role_id) if invitation.role_id else None,
            )

            audit = AuditEvent(
                tenant_id=invitation.tenant_id,
                action="invitation_consumed",
                event_metadata={
                    "invitation_id": claims.invite_id,
                    "email": claims.email,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

        minted = self.signer.mint(claims)
        if minted.is_err():
            return Return.err(minted.error)

        logger.info(f"Invitation {claims.invite_id} handed over")
        return Return.ok(
            HandoverResponse(
                capability_token=minted.value,
                email=claims.email,
                role=claims.role,
            )
        )
