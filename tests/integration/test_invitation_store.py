from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from invite_service.adapter.repositories.invitation_repository import InvitationRepository
from invite_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from invite_service.app.services.membership_linker import MembershipLinker
from invite_service.app.use_cases.invitations import HandoverInvitationUseCase
from invite_service.domain.entities import Membership, User


async def _handover(engine, signer, token):
    factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        result = await HandoverInvitationUseCase(SqlAlchemyUnitOfWork(session), signer).execute(token)
    assert result.is_ok()


@pytest.mark.asyncio
async def test_get_pending_by_token_only_returns_pending(db_session, make_invitation):
    invitation = await make_invitation("pending@staff.example.com", "store-token-1")
    repository = InvitationRepository(db_session)

    found = await repository.get_pending_by_token("store-token-1")
    assert found.id == invitation.id

    assert await repository.burn(invitation.id) is True
    await db_session.commit()

    assert await repository.get_pending_by_token("store-token-1") is None
    assert await repository.get_pending_by_token("never-issued") is None


@pytest.mark.asyncio
async def test_interleaved_handovers_have_exactly_one_winner(session_factory, make_invitation):
    """Both sessions read the pending row; only the first conditional update transitions it"""
    invitation = await make_invitation("race@staff.example.com", "store-token-2")

    async with session_factory() as first, session_factory() as second:
        first_repo = InvitationRepository(first)
        second_repo = InvitationRepository(second)

        assert await first_repo.get_pending_by_token("store-token-2") is not None
        assert await second_repo.get_pending_by_token("store-token-2") is not None

        assert await first_repo.burn(invitation.id) is True
        await first.commit()

        assert await second_repo.burn(invitation.id) is False
        await second.commit()


@pytest.mark.asyncio
async def test_losing_handover_gets_no_capability_token(
    session_factory, make_invitation, signer
):
    await make_invitation("race2@staff.example.com", "store-token-3")

    async with session_factory() as first, session_factory() as second:
        winner = await HandoverInvitationUseCase(SqlAlchemyUnitOfWork(first), signer).execute(
            "store-token-3"
        )
        loser = await HandoverInvitationUseCase(SqlAlchemyUnitOfWork(second), signer).execute(
            "store-token-3"
        )

    assert winner.is_ok()
    assert loser.is_err()
    assert loser.error.code == "INVITE_INVALID"


@pytest.mark.asyncio
async def test_consumed_invitation_stays_consumed_after_restart(
    engine, tmp_path, make_invitation, signer
):
    invitation = await make_invitation("restart@staff.example.com", "store-token-4")
    await _handover(engine, signer, "store-token-4")

    # A brand new engine on the same database file stands in for a process restart
    restarted = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    factory = sessionmaker(restarted, class_=AsyncSession, expire_on_commit=False)
    try:
        async with factory() as session:
            repository = InvitationRepository(session)
            assert await repository.get_pending_by_token("store-token-4") is None
            assert await repository.burn(invitation.id) is False

            result = await HandoverInvitationUseCase(
                SqlAlchemyUnitOfWork(session), signer
            ).execute("store-token-4")
            assert result.is_err()
            assert result.error.code == "INVITE_INVALID"
    finally:
        await restarted.dispose()


@pytest.mark.asyncio
async def test_linking_twice_leaves_one_membership(db_session, tenant):
    user = User(email="linked@staff.example.com", password_hash="x" * 60)
    db_session.add(user)
    await db_session.commit()

    linker = MembershipLinker(SqlAlchemyUnitOfWork(db_session))
    arguments = dict(
        account_id=user.id,
        tenant_id=tenant.id,
        role="staff",
        role_id=None,
        email=user.email,
        name="Linked Person",
    )

    first = await linker.link(**arguments)
    second = await linker.link(**arguments)

    assert first.is_ok() and second.is_ok()
    assert first.value.id == second.value.id

    result = await db_session.exec(
        select(Membership).where(
            Membership.user_id == user.id, Membership.tenant_id == tenant.id
        )
    )
    assert len(result.all()) == 1


@pytest.mark.asyncio
async def test_linking_refreshes_existing_row(db_session, tenant):
    user = User(email="refresh@staff.example.com", password_hash="x" * 60)
    db_session.add(user)
    await db_session.commit()
    linker = MembershipLinker(SqlAlchemyUnitOfWork(db_session))

    await linker.link(user.id, tenant.id, "staff", None, user.email, "Old Name")
    role_id = uuid4()
    result = await linker.link(user.id, tenant.id, "manager", role_id, user.email, "New Name")

    assert result.is_ok()
    assert result.value.role == "manager"
    assert result.value.role_id == role_id
    assert result.value.name == "New Name"
