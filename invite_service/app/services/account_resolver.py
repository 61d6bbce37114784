"""
Account Resolver

Decides whether an invitation redeemer gets a new account or is linked to
an existing one. An invitation alone never grants access to a pre-existing
account: the redeemer must prove that account's password.
"""

import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from invite_service.app.services.account_store import (
    ACCOUNT_ALREADY_EXISTS,
    AccountIdentity,
    IAccountStore,
)
from invite_service.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

PROVISIONING_ERROR = "PROVISIONING_ERROR"
DEFAULT_ACCOUNT_NAME = "Member"


class ResolutionOutcome(str, Enum):
    created_new = "created_new"
    linked_existing = "linked_existing"
    credential_mismatch = "credential_mismatch"


class AccountResolution(BaseModel):
    outcome: ResolutionOutcome
    # None when outcome is credential_mismatch
    account: Optional[AccountIdentity] = None

    @property
    def is_new_account(self) -> bool:
        return self.outcome == ResolutionOutcome.created_new


class AccountResolver:
    """Create-then-authenticate decision procedure"""

    def __init__(self, account_store: IAccountStore):
        self.account_store = account_store

    async def resolve(
        self, email: str, password: str, display_name: Optional[str] = None
    ) -> Result[AccountResolution]:
        """
        Resolve the account for an invited email.

        Step 1 tries to create the account. Step 2 runs only when the email
        is already registered and authenticates with the submitted password.

        Returns:
            Result with AccountResolution, or PROVISIONING_ERROR for any
            creation failure other than a duplicate email
        """
        created = await self.account_store.create_account(
            email, password, {"full_name": display_name or DEFAULT_ACCOUNT_NAME}
        )
        if created.is_ok():
            return Return.ok(
                AccountResolution(
                    outcome=ResolutionOutcome.created_new, account=created.value
                )
            )

        if created.error.code != ACCOUNT_ALREADY_EXISTS:
            logger.error(f"Account provisioning failed: {created.error.code}")
            return Return.err(Error(PROVISIONING_ERROR, created.error.message))

        authenticated = await self.account_store.authenticate_with_password(
            email, password
        )
        if authenticated.is_err():
            logger.warning("Invited email belongs to an account with a different password")
            return Return.ok(
                AccountResolution(outcome=ResolutionOutcome.credential_mismatch)
            )

        return Return.ok(
            AccountResolution(
                outcome=ResolutionOutcome.linked_existing,
                account=authenticated.value,
            )
        )
