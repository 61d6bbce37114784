from uuid import uuid4

import pytest

from invite_service.app.use_cases.invitations import CreateInvitationUseCase
from invite_service.domain.entities import (
    Invitation,
    Membership,
    MembershipStatus,
    Role,
    Tenant,
    TenantStatus,
)

APP_URL = "https://app.example.com/"


@pytest.fixture
def tenant():
    return Tenant(id=uuid4(), name="Sparkle Cleaning Co")


@pytest.fixture
def inviter_id():
    return uuid4()


@pytest.fixture
def arranged_uow(mock_uow, tenant, inviter_id):
    """Active owner of an active tenant, nobody invited yet"""
    mock_uow.tenants.get_by_id.return_value = tenant
    mock_uow.memberships.get_by_user_and_tenant.return_value = Membership(
        user_id=inviter_id,
        tenant_id=tenant.id,
        role="owner",
        email="owner@sparkle.example.com",
        name="Olivia Owner",
    )
    mock_uow.memberships.get_by_tenant_and_email.return_value = None
    mock_uow.invitations.get_pending_by_tenant_and_email.return_value = None
    mock_uow.invitations.create.side_effect = lambda invitation: invitation
    return mock_uow


@pytest.mark.asyncio
async def test_successful_invitation(arranged_uow, tenant, inviter_id):
    use_case = CreateInvitationUseCase(arranged_uow, APP_URL)

    result = await use_case.execute(inviter_id, tenant.id, " Maria@Staff.Example.com ")

    assert result.is_ok()
    response = result.value
    assert response.email == "maria@staff.example.com"
    assert response.status == "pending"

    invitation: Invitation = arranged_uow.invitations.create.call_args[0][0]
    assert invitation.role == "staff"
    assert invitation.invited_by == inviter_id
    assert len(invitation.token) <= 64
    assert response.invite_url == f"https://app.example.com/join?token={invitation.token}"

    audit_event = arranged_uow.audit_events.create.call_args[0][0]
    assert audit_event.action == "invite_sent"
    assert audit_event.event_metadata["invited_email"] == "maria@staff.example.com"
    arranged_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_tokens_are_unique(arranged_uow, tenant, inviter_id):
    use_case = CreateInvitationUseCase(arranged_uow, APP_URL)

    await use_case.execute(inviter_id, tenant.id, "a@staff.example.com")
    await use_case.execute(inviter_id, tenant.id, "b@staff.example.com")

    tokens = {call[0][0].token for call in arranged_uow.invitations.create.call_args_list}
    assert len(tokens) == 2


@pytest.mark.asyncio
async def test_structured_role_from_same_tenant(arranged_uow, tenant, inviter_id):
    role = Role(id=uuid4(), tenant_id=tenant.id, name="dispatcher")
    arranged_uow.roles.get_by_id.return_value = role

    result = await CreateInvitationUseCase(arranged_uow, APP_URL).execute(
        inviter_id, tenant.id, "a@staff.example.com", role="dispatcher", role_id=role.id
    )

    assert result.is_ok()
    invitation = arranged_uow.invitations.create.call_args[0][0]
    assert invitation.role_id == role.id
    assert invitation.role == "dispatcher"


@pytest.mark.asyncio
async def test_tenant_not_found(arranged_uow, inviter_id):
    arranged_uow.tenants.get_by_id.return_value = None

    result = await CreateInvitationUseCase(arranged_uow, APP_URL).execute(
        inviter_id, uuid4(), "a@staff.example.com"
    )

    assert result.error.code == "TENANT_NOT_FOUND"


@pytest.mark.asyncio
async def test_suspended_tenant(arranged_uow, tenant, inviter_id):
    tenant.status = TenantStatus.suspended

    result = await CreateInvitationUseCase(arranged_uow, APP_URL).execute(
        inviter_id, tenant.id, "a@staff.example.com"
    )

    assert result.error.code == "TENANT_SUSPENDED"


@pytest.mark.asyncio
async def test_non_member_cannot_invite(arranged_uow, tenant, inviter_id):
    arranged_uow.memberships.get_by_user_and_tenant.return_value = None

    result = await CreateInvitationUseCase(arranged_uow, APP_URL).execute(
        inviter_id, tenant.id, "a@staff.example.com"
    )

    assert result.error.code == "NOT_A_MEMBER"


@pytest.mark.asyncio
async def test_revoked_member_cannot_invite(arranged_uow, tenant, inviter_id):
    arranged_uow.memberships.get_by_user_and_tenant.return_value.status = (
        MembershipStatus.revoked
    )

    result = await CreateInvitationUseCase(arranged_uow, APP_URL).execute(
        inviter_id, tenant.id, "a@staff.example.com"
    )

    assert result.error.code == "NOT_A_MEMBER"


@pytest.mark.asyncio
async def test_staff_cannot_invite(arranged_uow, tenant, inviter_id):
    arranged_uow.memberships.get_by_user_and_tenant.return_value.role = "staff"

    result = await CreateInvitationUseCase(arranged_uow, APP_URL).execute(
        inviter_id, tenant.id, "a@staff.example.com"
    )

    assert result.error.code == "INSUFFICIENT_ROLE"
    arranged_uow.invitations.create.assert_not_called()


@pytest.mark.asyncio
async def test_role_from_other_tenant_is_rejected(arranged_uow, tenant, inviter_id):
    arranged_uow.roles.get_by_id.return_value = Role(
        id=uuid4(), tenant_id=uuid4(), name="dispatcher"
    )

    result = await CreateInvitationUseCase(arranged_uow, APP_URL).execute(
        inviter_id, tenant.id, "a@staff.example.com", role_id=uuid4()
    )

    assert result.error.code == "INVALID_ROLE"


@pytest.mark.asyncio
async def test_active_member_cannot_be_invited(arranged_uow, tenant, inviter_id):
    arranged_uow.memberships.get_by_tenant_and_email.return_value = Membership(
        user_id=uuid4(),
        tenant_id=tenant.id,
        role="staff",
        email="a@staff.example.com",
        name="Already Here",
    )

    result = await CreateInvitationUseCase(arranged_uow, APP_URL).execute(
        inviter_id, tenant.id, "a@staff.example.com"
    )

    assert result.error.code == "ALREADY_MEMBER"


@pytest.mark.asyncio
async def test_pending_invitation_already_exists(arranged_uow, tenant, inviter_id):
    arranged_uow.invitations.get_pending_by_tenant_and_email.return_value = Invitation(
        tenant_id=tenant.id, email="a@staff.example.com", token="existing"
    )

    result = await CreateInvitationUseCase(arranged_uow, APP_URL).execute(
        inviter_id, tenant.id, "a@staff.example.com"
    )

    assert result.error.code == "INVITE_ALREADY_EXISTS"
    arranged_uow.commit.assert_not_called()
