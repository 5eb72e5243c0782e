"""
E2E tests against the real Paylike API.

These tests create real (test mode) apps and merchants and require a key:
    PAYLIKE_E2E_API_KEY=<key> pytest -m integration tests/e2e

Scenarios:
- app creation and key swapping
- merchant create / fetch / list / update
- user and app access grants and revocations
"""

import os
from typing import Generator

import pytest
from paylike_client.api.schemas import MerchantCompanyIn, MerchantCreate, MerchantUpdate
from paylike_client.domain.models import App, Merchant
from paylike_client.infrastructure.clients.paylike import PaylikeClient

E2E_API_KEY = os.environ.get("PAYLIKE_E2E_API_KEY")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not E2E_API_KEY, reason="PAYLIKE_E2E_API_KEY not set"),
]


@pytest.fixture
def sandbox() -> Generator[PaylikeClient, None, None]:
    with PaylikeClient(api_key=E2E_API_KEY) as client:
        yield client


@pytest.fixture
def sandbox_app(sandbox: PaylikeClient) -> App:
    return sandbox.create_app()


@pytest.fixture
def sandbox_merchant(sandbox: PaylikeClient, sandbox_app: App) -> Merchant:
    dto = MerchantCreate(
        name="NotTest",
        test=True,
        currency="HUF",
        email="john@example.com",
        website="https://example.com",
        descriptor="1234567897891234",
        company=MerchantCompanyIn(country="HU"),
    )
    return sandbox.with_key(sandbox_app.key).create_merchant(dto)


def test_create_app_with_name(sandbox: PaylikeClient):
    app = sandbox.create_app("Macilaci")

    assert app.id
    assert app.name == "Macilaci"


def test_current_app_after_key_swap(sandbox: PaylikeClient, sandbox_app: App):
    identity = sandbox.with_key(sandbox_app.key).get_current_app()

    assert identity.id == sandbox_app.id


def test_merchant_round_trip(sandbox: PaylikeClient, sandbox_app: App, sandbox_merchant: Merchant):
    client = sandbox.with_key(sandbox_app.key)

    assert client.get_merchant(sandbox_merchant.id).id == sandbox_merchant.id
    assert sandbox_merchant.id in [m.id for m in client.fetch_merchants(sandbox_app.id, 5)]


def test_update_merchant(sandbox: PaylikeClient, sandbox_app: App, sandbox_merchant: Merchant):
    client = sandbox.with_key(sandbox_app.key)
    update = MerchantUpdate(name="Test", descriptor="NotNumbers", email="not_john@example.com")

    client.update_merchant(sandbox_merchant.id, update)

    updated = client.get_merchant(sandbox_merchant.id)
    assert (updated.name, updated.descriptor, updated.email) == ("Test", "NotNumbers", "not_john@example.com")


def test_invite_and_revoke_user(sandbox: PaylikeClient, sandbox_app: App, sandbox_merchant: Merchant):
    client = sandbox.with_key(sandbox_app.key)

    invitation = client.invite_user_to_merchant(sandbox_merchant.id, "one@example.com")
    assert invitation.is_member is False

    users = client.fetch_users_to_merchant(sandbox_merchant.id, 3)
    assert users[0].email == "one@example.com"

    client.revoke_user_from_merchant(sandbox_merchant.id, users[0].id)
    assert client.fetch_users_to_merchant(sandbox_merchant.id, 3) == []


def test_grant_and_revoke_app(sandbox: PaylikeClient, sandbox_app: App, sandbox_merchant: Merchant):
    client = sandbox.with_key(sandbox_app.key)

    client.add_app_to_merchant(sandbox_merchant.id, sandbox_app.id)
    assert sandbox_app.id in [a.id for a in client.fetch_apps_to_merchant(sandbox_merchant.id, 2)]

    client.revoke_app_from_merchant(sandbox_merchant.id, sandbox_app.id)
    assert client.fetch_apps_to_merchant(sandbox_merchant.id, 2) == []
