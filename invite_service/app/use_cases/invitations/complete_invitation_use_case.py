"""
Complete Invitation Use Case

Second redemption phase: trades a valid capability token plus a chosen
password for an account, a tenant membership and a session.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from invite_service.app.services.account_resolver import (
    AccountResolver,
    ResolutionOutcome,
)
from invite_service.app.services.account_store import IAccountStore
from invite_service.app.services.capability_token import ICapabilityTokenSigner
from invite_service.app.services.membership_linker import MembershipLinker
from invite_service.app.services.unit_of_work import UnitOfWork
from invite_service.domain.entities import DEFAULT_MEMBER_ROLE, AuditEvent
from invite_service.libs.result import Error, Result, Return

from .dtos import CompleteInvitationResponse

logger = logging.getLogger(__name__)

DEFAULT_MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72  # bcrypt input limit
DEFAULT_MEMBER_NAME = "New Member"


class CompleteInvitationUseCase:
    """
    Use case for the completion phase.

    Business Rules:
    - Capability token and a password of minimum length are required
    - A capability token that fails verification cannot be retried;
      the user must request a new invitation
    - An existing account is linked only when the submitted password matches
    - Membership is upserted on (account, tenant)
    - Failures never restore the burned invitation and never delete an
      account created along the way
    """

    def __init__(
        self,
        uow: UnitOfWork,
        signer: ICapabilityTokenSigner,
        account_store: IAccountStore,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
    ):
        self.uow = uow
        self.signer = signer
        self.account_store = account_store
        self.min_password_length = min_password_length

    def _validate(
        self, capability_token: Optional[str], password: Optional[str]
    ) -> Optional[Error]:
        if not capability_token:
            return Error("VALIDATION_ERROR", "Capability token is required")
        if not password or len(password) < self.min_password_length:
            return Error(
                "VALIDATION_ERROR",
                f"Password must be at least {self.min_password_length} characters long",
            )
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return Error(
                "VALIDATION_ERROR",
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes long",
            )
        return None

    async def execute(
        self,
        capability_token: Optional[str],
        password: Optional[str],
        full_name: Optional[str] = None,
    ) -> Result[CompleteInvitationResponse]:
        """
        Execute completion use case.

        Args:
            capability_token: Token returned by the handover phase
            password: Password chosen (new account) or known (existing account)
            full_name: Optional display name

        Returns:
            Result with CompleteInvitationResponse DTO, or Error with one of
            VALIDATION_ERROR, INVITE_EXPIRED_OR_INVALID, CREDENTIAL_MISMATCH,
            PROVISIONING_ERROR, LINK_ERROR, SESSION_ERROR
        """
        validation_error = self._validate(capability_token, password)
        if validation_error:
            return Return.err(validation_error)

        full_name = (full_name or "").strip() or None

        # Step 1: verify the capability token (pure, no store access)
        expired_or_invalid = Error(
            "INVITE_EXPIRED_OR_INVALID",
            "Invite session expired. Request a new invitation.",
        )
        verified = self.signer.verify(capability_token)
        if verified.is_err():
            logger.info(f"Completion rejected: {verified.error.code}")
            return Return.err(expired_or_invalid)

        claims = verified.value
        try:
            tenant_id = UUID(claims.tenant_id)
            role_id = UUID(claims.role_id) if claims.role_id else None
        except ValueError:
            return Return.err(expired_or_invalid)

        # Step 2: create or authenticate the account
        resolved = await AccountResolver(self.account_store).resolve(
            claims.email, password, full_name
        )
        if resolved.is_err():
            return Return.err(resolved.error)

        resolution = resolved.value
        if resolution.outcome == ResolutionOutcome.credential_mismatch:
            return Return.err(
                Error(
                    "CREDENTIAL_MISMATCH",
                    "An account already exists for this email and the password is incorrect",
                )
            )
        account = resolution.account

        # Step 3: attach the account to the tenant
        linked = await MembershipLinker(self.uow).link(
            account_id=account.id,
            tenant_id=tenant_id,
            role=claims.role or DEFAULT_MEMBER_ROLE,
            role_id=role_id,
            email=claims.email,
            name=full_name or account.full_name or DEFAULT_MEMBER_NAME,
        )
        if linked.is_err():
            return Return.err(linked.error)

        # Step 4: sign the user in
        session = await self.account_store.issue_session(
            claims.email, password, tenant_id
        )
        if session.is_err():
            logger.error(f"Session issuance failed: {session.error.code}")
            return Return.err(
                Error("SESSION_ERROR", "Account is ready but sign-in failed. Please log in.")
            )

        async with self.uow:
            try:
                audit = AuditEvent(
                    tenant_id=tenant_id,
                    user_id=account.id,
                    action="invitation_redeemed",
                    event_metadata={
                        "invitation_id": claims.invite_id,
                        "is_new_account": resolution.is_new_account,
                        "role": claims.role,
                    },
                )
                await self.uow.audit_events.create(audit)
                await self.uow.commit()
            except SQLAlchemyError as exc:
                # Redemption already succeeded; the audit trail is best effort
                logger.error(f"Could not record redemption audit event: {exc.__class__.__name__}")

        logger.info(
            f"Invitation {claims.invite_id} redeemed ({resolution.outcome.value})"
        )
        return Return.ok(
            CompleteInvitationResponse(session=session.value, role=claims.role)
        )
