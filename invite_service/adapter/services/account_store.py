import logging
import secrets
from datetime import timedelta
from typing import Any, Callable, Dict, Optional
from uuid import UUID

import bcrypt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from invite_service.adapter.repositories.session_repository import SessionRepository
from invite_service.adapter.repositories.user_repository import UserRepository
from invite_service.app.services.account_store import (
    ACCOUNT_ALREADY_EXISTS,
    INVALID_CREDENTIALS,
    PROVISIONING_FAILED,
    AccountIdentity,
    AuthSession,
    IAccountStore,
    SessionUser,
)
from invite_service.domain.base import utcnow
from invite_service.domain.entities import Session, User, UserStatus
from invite_service.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

AccessTokenFactory = Callable[[UUID, str, Optional[UUID], timedelta], str]


class SqlAccountStore(IAccountStore):
    """
    Account store backed by the users and sessions tables.

    Every successful write is committed immediately: an account created here
    stays created even if the caller fails afterwards.

    Access tokens come from the injected factory, called as
    factory(user_id, email, tenant_id, access_token_ttl).
    """

    def __init__(
        self,
        session: AsyncSession,
        access_token_factory: AccessTokenFactory,
        bcrypt_rounds: int = 12,
        refresh_token_ttl: timedelta = timedelta(days=30),
        access_token_ttl: timedelta = timedelta(minutes=15),
    ):
        self.session = session
        self.users = UserRepository(session)
        self.sessions = SessionRepository(session)
        self.access_token_factory = access_token_factory
        self.bcrypt_rounds = bcrypt_rounds
        self.refresh_token_ttl = refresh_token_ttl
        self.access_token_ttl = access_token_ttl

    def _hash(self, secret: str) -> str:
        return bcrypt.hashpw(
            secret.encode("utf-8"), bcrypt.gensalt(rounds=self.bcrypt_rounds)
        ).decode("utf-8")

    async def _check_password(self, email: str, password: str) -> Optional[User]:
        user = await self.users.get_by_email(email)

        # Always perform a hash check so unknown emails take the same time
        if user is None:
            bcrypt.checkpw(b"dummy_password", bcrypt.gensalt(self.bcrypt_rounds))
            return None

        try:
            password_valid = bcrypt.checkpw(
                password.encode("utf-8"), user.password_hash.encode("utf-8")
            )
        except ValueError:
            password_valid = False

        if not password_valid or user.status == UserStatus.disabled:
            return None
        return user

    async def create_account(
        self, email: str, password: str, metadata: Dict[str, Any]
    ) -> Result[AccountIdentity]:
        try:
            if await self.users.get_by_email(email) is not None:
                return Return.err(
                    Error(ACCOUNT_ALREADY_EXISTS, "Email is already registered")
                )

            # Accounts are only provisioned through a redeemed invitation,
            # which already proves control of the inbox
            user = User(
                email=email,
                password_hash=self._hash(password),
                full_name=metadata.get("full_name"),
                user_metadata=dict(metadata),
                email_verified=True,
            )
            user = await self.users.create(user)
            identity = AccountIdentity(
                id=user.id, email=user.email, full_name=user.full_name
            )
            await self.session.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration of the same email
            await self.session.rollback()
            return Return.err(
                Error(ACCOUNT_ALREADY_EXISTS, "Email is already registered")
            )
        except (SQLAlchemyError, ValueError) as exc:
            await self.session.rollback()
            logger.error(f"Account creation failed: {exc.__class__.__name__}")
            return Return.err(Error(PROVISIONING_FAILED, "Could not create account"))

        logger.info(f"Account created: {identity.id}")
        return Return.ok(identity)

    async def authenticate_with_password(
        self, email: str, password: str
    ) -> Result[AccountIdentity]:
        user = await self._check_password(email, password)
        if user is None:
            return Return.err(
                Error(INVALID_CREDENTIALS, "Invalid email or password")
            )

        return Return.ok(
            AccountIdentity(id=user.id, email=user.email, full_name=user.full_name)
        )

    async def issue_session(
        self, email: str, password: str, tenant_id: Optional[UUID] = None
    ) -> Result[AuthSession]:
        try:
            user = await self._check_password(email, password)
            if user is None:
                return Return.err(
                    Error(INVALID_CREDENTIALS, "Invalid email or password")
                )

            refresh_token = secrets.token_urlsafe(32)
            session_obj = Session(
                user_id=user.id,
                tenant_id=tenant_id,
                refresh_token_hash=self._hash(refresh_token),
                expires_at=utcnow() + self.refresh_token_ttl,
            )
            await self.sessions.create(session_obj)

            await self.users.record_login(user)

            user_id, user_email = user.id, user.email
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error(f"Session issuance failed: {exc.__class__.__name__}")
            return Return.err(Error(PROVISIONING_FAILED, "Could not issue session"))

        access_token = self.access_token_factory(
            user_id, user_email, tenant_id, self.access_token_ttl
        )
        return Return.ok(
            AuthSession(
                access_token=access_token,
                refresh_token=refresh_token,
                expires_in=int(self.access_token_ttl.total_seconds()),
                user=SessionUser(id=str(user_id), email=user_email),
            )
        )
