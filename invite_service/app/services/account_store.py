"""
Account Store contract

The durable account store that owns credentials and sessions. The
redemption protocol only talks to it through this interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel

from invite_service.libs.result import Result

# Error codes
ACCOUNT_ALREADY_EXISTS = "ACCOUNT_ALREADY_EXISTS"
PROVISIONING_FAILED = "PROVISIONING_FAILED"
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"


class AccountIdentity(BaseModel):
    """Resolved account as seen by the protocol"""

    id: UUID
    email: str
    full_name: Optional[str] = None


class SessionUser(BaseModel):
    id: str
    email: str


class AuthSession(BaseModel):
    """Tokens handed back to the client after a successful sign-in"""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    user: SessionUser


class IAccountStore(ABC):
    """Account store interface - application layer"""

    @abstractmethod
    async def create_account(
        self, email: str, password: str, metadata: Dict[str, Any]
    ) -> Result[AccountIdentity]:
        """
        Create a new account.

        Errors: ACCOUNT_ALREADY_EXISTS when the email is registered,
        PROVISIONING_FAILED for any other store failure.
        """
        pass

    @abstractmethod
    async def authenticate_with_password(
        self, email: str, password: str
    ) -> Result[AccountIdentity]:
        """Prove the password for an existing account. Errors: INVALID_CREDENTIALS"""
        pass

    @abstractmethod
    async def issue_session(
        self, email: str, password: str, tenant_id: Optional[UUID] = None
    ) -> Result[AuthSession]:
        """Sign in and return fresh session tokens"""
        pass
