"""Paylike API HTTP client"""

import logging
from typing import List, Optional

import httpx

from paylike_client.api.schemas import (
    AppCreate,
    AppGrant,
    CardCreate,
    MerchantCreate,
    MerchantUpdate,
    TransactionAmount,
    TransactionCreate,
    UserInvite,
)
from paylike_client.config import settings
from paylike_client.domain.models import (
    App,
    Card,
    Identity,
    Line,
    Merchant,
    MerchantInvitation,
    Transaction,
    User,
)
from paylike_client.infrastructure.clients.executor import RequestExecutor
from paylike_client.utils.url_utils import build_path, limit_params

logger = logging.getLogger(__name__)


class PaylikeClient:
    """Client for the Paylike REST API

    One handle is bound to one API key. with_key() returns a new handle
    sharing the same connection pool instead of mutating this one.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self._api_key = api_key if api_key is not None else settings.api_key
        self.base_url = (base_url or settings.api_base).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.Client(timeout=self.timeout)
        self._executor = RequestExecutor(self.http_client, self._api_key)

    @property
    def api_key(self) -> str:
        return self._api_key

    def with_key(self, api_key: str) -> "PaylikeClient":
        """Return a handle using api_key; this handle keeps its own key"""
        return PaylikeClient(
            api_key=api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            http_client=self.http_client,
        )

    def close(self) -> None:
        if self._owns_http_client:
            self.http_client.close()

    def __enter__(self) -> "PaylikeClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    # Apps

    def create_app(self, name: Optional[str] = None) -> App:
        """Create a new app, optionally named. The returned key is only shown once."""
        route = "/apps"
        app = self._executor.execute(
            "POST", self._url(route), body=AppCreate(name=name), response_type=App, envelope="app", route=route
        )
        logger.info("Created Paylike app", extra={"app_id": app.id})
        return app

    def get_current_app(self) -> Identity:
        """Fetch the app behind the current API key"""
        route = "/me"
        return self._executor.execute("GET", self._url(route), response_type=Identity, envelope="identity", route=route)

    # Merchants

    def create_merchant(self, dto: MerchantCreate) -> Merchant:
        route = "/merchants"
        merchant = self._executor.execute(
            "POST", self._url(route), body=dto, response_type=Merchant, envelope="merchant", route=route
        )
        logger.info("Created Paylike merchant", extra={"merchant_id": merchant.id})
        return merchant

    def get_merchant(self, merchant_id: str) -> Merchant:
        route = "/merchants/{merchant_id}"
        path = build_path(route, merchant_id=merchant_id)
        return self._executor.execute("GET", self._url(path), response_type=Merchant, envelope="merchant", route=route)

    def fetch_merchants(self, app_id: str, limit: int) -> List[Merchant]:
        """List merchants the given app has access to"""
        route = "/identities/{app_id}/merchants"
        path = build_path(route, app_id=app_id)
        merchants = self._executor.execute(
            "GET", self._url(path), params=limit_params(limit), response_type=List[Merchant], route=route
        )
        return merchants or []

    def update_merchant(self, merchant_id: str, dto: MerchantUpdate) -> None:
        """Update name, email and/or descriptor; fields left unset are not sent"""
        route = "/merchants/{merchant_id}"
        path = build_path(route, merchant_id=merchant_id)
        self._executor.execute("PUT", self._url(path), body=dto, route=route)

    # Merchant access control

    def invite_user_to_merchant(self, merchant_id: str, email: str) -> MerchantInvitation:
        route = "/merchants/{merchant_id}/users"
        path = build_path(route, merchant_id=merchant_id)
        invitation = self._executor.execute(
            "POST",
            self._url(path),
            body=UserInvite(email=email),
            response_type=MerchantInvitation,
            route=route,
        )
        # Paylike may answer with an empty body when the user already had access
        return invitation if invitation is not None else MerchantInvitation()

    def fetch_users_to_merchant(self, merchant_id: str, limit: int) -> List[User]:
        route = "/merchants/{merchant_id}/users"
        path = build_path(route, merchant_id=merchant_id)
        users = self._executor.execute(
            "GET", self._url(path), params=limit_params(limit), response_type=List[User], route=route
        )
        return users or []

    def revoke_user_from_merchant(self, merchant_id: str, user_id: str) -> None:
        route = "/merchants/{merchant_id}/users/{user_id}"
        path = build_path(route, merchant_id=merchant_id, user_id=user_id)
        self._executor.execute("DELETE", self._url(path), route=route)

    def add_app_to_merchant(self, merchant_id: str, app_id: str) -> None:
        route = "/merchants/{merchant_id}/apps"
        path = build_path(route, merchant_id=merchant_id)
        self._executor.execute("POST", self._url(path), body=AppGrant(app_id=app_id), route=route)

    def fetch_apps_to_merchant(self, merchant_id: str, limit: int) -> List[App]:
        route = "/merchants/{merchant_id}/apps"
        path = build_path(route, merchant_id=merchant_id)
        apps = self._executor.execute(
            "GET", self._url(path), params=limit_params(limit), response_type=List[App], route=route
        )
        return apps or []

    def revoke_app_from_merchant(self, merchant_id: str, app_id: str) -> None:
        route = "/merchants/{merchant_id}/apps/{app_id}"
        path = build_path(route, merchant_id=merchant_id, app_id=app_id)
        self._executor.execute("DELETE", self._url(path), route=route)

    # Balance history

    def fetch_lines(self, merchant_id: str, limit: int) -> List[Line]:
        route = "/merchants/{merchant_id}/lines"
        path = build_path(route, merchant_id=merchant_id)
        lines = self._executor.execute(
            "GET", self._url(path), params=limit_params(limit), response_type=List[Line], route=route
        )
        return lines or []

    # Transactions

    def create_transaction(self, merchant_id: str, dto: TransactionCreate) -> Transaction:
        """Charge the card behind a previous transaction or a saved card"""
        route = "/merchants/{merchant_id}/transactions"
        path = build_path(route, merchant_id=merchant_id)
        transaction = self._executor.execute(
            "POST", self._url(path), body=dto, response_type=Transaction, envelope="transaction", route=route
        )
        logger.info(
            "Created Paylike transaction",
            extra={"merchant_id": merchant_id, "transaction_id": transaction.id, "amount": dto.amount},
        )
        return transaction

    def fetch_transactions(self, merchant_id: str, limit: int) -> List[Transaction]:
        route = "/merchants/{merchant_id}/transactions"
        path = build_path(route, merchant_id=merchant_id)
        transactions = self._executor.execute(
            "GET", self._url(path), params=limit_params(limit), response_type=List[Transaction], route=route
        )
        return transactions or []

    def find_transaction(self, transaction_id: str) -> Transaction:
        route = "/transactions/{transaction_id}"
        path = build_path(route, transaction_id=transaction_id)
        return self._executor.execute(
            "GET", self._url(path), response_type=Transaction, envelope="transaction", route=route
        )

    def capture_transaction(self, transaction_id: str, dto: TransactionAmount) -> Transaction:
        """Capture part or all of the pending amount"""
        return self._transaction_trail("captures", transaction_id, dto)

    def refund_transaction(self, transaction_id: str, dto: TransactionAmount) -> Transaction:
        """Refund part or all of the captured amount"""
        return self._transaction_trail("refunds", transaction_id, dto)

    def void_transaction(self, transaction_id: str, dto: TransactionAmount) -> Transaction:
        """Release part or all of the pending amount"""
        return self._transaction_trail("voids", transaction_id, dto)

    def _transaction_trail(self, action: str, transaction_id: str, dto: TransactionAmount) -> Transaction:
        route = f"/transactions/{{transaction_id}}/{action}"
        path = build_path(route, transaction_id=transaction_id)
        transaction = self._executor.execute(
            "POST", self._url(path), body=dto, response_type=Transaction, envelope="transaction", route=route
        )
        logger.info(
            "Paylike transaction updated",
            extra={"transaction_id": transaction_id, "action": action, "amount": dto.amount},
        )
        return transaction

    # Cards

    def save_card(self, merchant_id: str, dto: CardCreate) -> Card:
        """Store the card used in a previous transaction for later charges"""
        route = "/merchants/{merchant_id}/cards"
        path = build_path(route, merchant_id=merchant_id)
        return self._executor.execute(
            "POST", self._url(path), body=dto, response_type=Card, envelope="card", route=route
        )

    def find_card(self, card_id: str) -> Card:
        route = "/cards/{card_id}"
        path = build_path(route, card_id=card_id)
        return self._executor.execute("GET", self._url(path), response_type=Card, envelope="card", route=route)
