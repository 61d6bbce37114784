from datetime import timedelta

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from invite_service.adapter.services.account_store import SqlAccountStore
from invite_service.adapter.services.capability_token_signer import (
    JoseCapabilityTokenSigner,
)
from invite_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from invite_service.api.utils.jwt import create_access_token, verify_jwt
from invite_service.app.services.account_store import IAccountStore
from invite_service.app.services.capability_token import ICapabilityTokenSigner

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


async def get_account_store() -> IAccountStore:
    # Separate session: the account store commits on its own schedule
    async with AsyncSessionLocal() as session:
        yield SqlAccountStore(
            session,
            access_token_factory=create_access_token,
            bcrypt_rounds=ApplicationConfig.BCRYPT_ROUNDS,
            refresh_token_ttl=timedelta(days=ApplicationConfig.REFRESH_TOKEN_TTL_DAYS),
            access_token_ttl=timedelta(minutes=ApplicationConfig.ACCESS_TOKEN_TTL_MINUTES),
        )


def get_capability_signer() -> ICapabilityTokenSigner:
    return JoseCapabilityTokenSigner(
        secret=ApplicationConfig.INVITE_SIGNING_SECRET,
        ttl=timedelta(seconds=ApplicationConfig.CAPABILITY_TOKEN_TTL_SECONDS),
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload containing user_id, email, tenant_id

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    token = credentials.credentials
    payload = verify_jwt(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return payload
