"""Pytest fixtures for testing"""

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from mock_paylike_server.main import ROOT_KEY, PaylikeStore, build_app
from paylike_client.api.schemas import MerchantCompanyIn, MerchantCreate
from paylike_client.domain.models import App, Merchant
from paylike_client.infrastructure.clients.paylike import PaylikeClient


API_BASE = "https://api.paylike.io"
TEST_EMAIL = "john@example.com"
TEST_SITE = "https://example.com"


@pytest.fixture
def store() -> PaylikeStore:
    """Fresh in-memory state for the fake Paylike API"""
    return PaylikeStore()


@pytest.fixture
def fake_api(store: PaylikeStore) -> Generator[TestClient, None, None]:
    """httpx client wired to the fake Paylike API instead of the network"""
    with TestClient(build_app(store), base_url=API_BASE) as http_client:
        yield http_client


@pytest.fixture
def client(fake_api: TestClient) -> PaylikeClient:
    """Client authenticated with the root key"""
    return PaylikeClient(api_key=ROOT_KEY, base_url=API_BASE, http_client=fake_api)


@pytest.fixture
def app(client: PaylikeClient) -> App:
    return client.create_app()


@pytest.fixture
def app_client(client: PaylikeClient, app: App) -> PaylikeClient:
    """Client authenticated as a freshly created app"""
    return client.with_key(app.key)


@pytest.fixture
def merchant_dto() -> MerchantCreate:
    return MerchantCreate(
        name="NotTest",
        test=True,
        currency="HUF",
        email=TEST_EMAIL,
        website=TEST_SITE,
        descriptor="1234567897891234",
        company=MerchantCompanyIn(country="HU"),
    )


@pytest.fixture
def merchant(app_client: PaylikeClient, merchant_dto: MerchantCreate) -> Merchant:
    return app_client.create_merchant(merchant_dto)


@pytest.fixture
def authorization_id(store: PaylikeStore, merchant: Merchant) -> str:
    """Id of a transaction authorized through the payment window"""
    return store.authorize(merchant.id, amount=10000, currency="HUF")["id"]
