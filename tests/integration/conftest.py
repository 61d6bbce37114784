from datetime import timedelta

import bcrypt
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from invite_service.adapter.services.account_store import SqlAccountStore
from invite_service.adapter.services.capability_token_signer import (
    JoseCapabilityTokenSigner,
)
from invite_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from invite_service.api.utils.jwt import create_access_token
from invite_service.depends import (
    get_account_store,
    get_capability_signer,
    get_unit_of_work,
)
from invite_service.domain.entities import Invitation, Membership, Tenant, User
from tests.fixtures.clock import FrozenClock
from tests.fixtures.json_loader import TestDataLoader

TEST_BCRYPT_ROUNDS = 4


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
def clock(test_data):
    return FrozenClock(test_data.get_datetime("frozen_now"))


@pytest_asyncio.fixture
def signer(test_data, clock):
    return JoseCapabilityTokenSigner(
        secret=test_data.get("signing_secret"),
        ttl=timedelta(hours=1),
        clock=clock,
    )


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session, signer):
    from config import ApplicationConfig
    from invite_service.api.app import create_app

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    async def override_get_account_store():
        yield SqlAccountStore(
            db_session,
            access_token_factory=create_access_token,
            bcrypt_rounds=TEST_BCRYPT_ROUNDS,
        )

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_account_store] = override_get_account_store
    app.dependency_overrides[get_capability_signer] = lambda: signer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def hash_password(password: str) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(rounds=TEST_BCRYPT_ROUNDS)
    ).decode("utf-8")


@pytest_asyncio.fixture
async def tenant(db_session, test_data):
    tenant = Tenant(name=test_data.get("tenant")["name"])
    db_session.add(tenant)
    await db_session.commit()
    return tenant


@pytest_asyncio.fixture
async def admin(db_session, tenant, test_data):
    """Tenant owner with an active membership"""
    admin_data = test_data.get_copy("admin")
    user = User(
        email=admin_data["email"],
        password_hash=hash_password(admin_data["password"]),
        full_name=admin_data["full_name"],
        email_verified=True,
    )
    db_session.add(user)
    await db_session.flush()
    db_session.add(
        Membership(
            user_id=user.id,
            tenant_id=tenant.id,
            role=admin_data["role"],
            email=user.email,
            name=user.full_name,
        )
    )
    await db_session.commit()
    return user


@pytest_asyncio.fixture
def admin_headers(admin, tenant):
    token = create_access_token(admin.id, admin.email, tenant.id)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def existing_account(db_session, test_data):
    account_data = test_data.get_copy("existing_account")
    user = User(
        email=account_data["email"],
        password_hash=hash_password(account_data["password"]),
        full_name=account_data["full_name"],
        email_verified=True,
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
def make_invitation(db_session, tenant):
    """Insert a pending invitation directly, as the admin screen would"""

    async def _make(email: str, token: str, role: str = "staff", role_id=None) -> Invitation:
        invitation = Invitation(
            tenant_id=tenant.id,
            email=email,
            role=role,
            role_id=role_id,
            token=token,
        )
        db_session.add(invitation)
        await db_session.commit()
        return invitation

    return _make
