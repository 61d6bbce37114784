from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from invite_service.adapter.services.capability_token_signer import (
    JoseCapabilityTokenSigner,
)
from tests.fixtures.clock import FrozenClock
from tests.fixtures.json_loader import TestDataLoader


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.tenants = MagicMock()
    uow.tenants.get_by_id = AsyncMock()

    uow.roles = MagicMock()
    uow.roles.get_by_id = AsyncMock()

    uow.memberships = MagicMock()
    uow.memberships.get_by_user_and_tenant = AsyncMock()
    uow.memberships.get_by_tenant_and_email = AsyncMock()
    uow.memberships.upsert = AsyncMock()

    uow.invitations = MagicMock()
    uow.invitations.get_pending_by_token = AsyncMock()
    uow.invitations.get_pending_by_tenant_and_email = AsyncMock()
    uow.invitations.create = AsyncMock()
    uow.invitations.burn = AsyncMock()

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()
    return uow


@pytest.fixture
def mock_account_store():
    store = MagicMock()
    store.create_account = AsyncMock()
    store.authenticate_with_password = AsyncMock()
    store.issue_session = AsyncMock()
    return store


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def signing_secret():
    return TestDataLoader.get("signing_secret")


@pytest.fixture
def signer(signing_secret, clock):
    return JoseCapabilityTokenSigner(signing_secret, clock=clock)
