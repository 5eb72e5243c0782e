"""In-memory Paylike API stand-in for local development and the test suite

Run with: uvicorn mock_paylike_server.main:app --port 8001
"""

import base64
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse

ROOT_KEY = "4c8453c3-8285-4984-ab72-216e324372e6"

TEST_CARD = {
    "bin": "410000",
    "last4": "0000",
    "expiry": "2030-12-31T23:59:59.999Z",
    "scheme": "visa",
}

FEE_RATE_BASIS_POINTS = 125  # 1.25% on captured amounts


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex[:24]


def _newest_first(records: List[dict], limit: int) -> List[dict]:
    return list(reversed(records))[:limit]


class PaylikeStore:
    """Holds every resource created during one fake server lifetime"""

    def __init__(self, root_key: str = ROOT_KEY):
        self.apps: Dict[str, dict] = {}
        self.app_by_key: Dict[str, str] = {}
        self.merchants: Dict[str, dict] = {}
        self.merchant_owner: Dict[str, str] = {}
        self.merchant_users: Dict[str, List[dict]] = {}
        self.merchant_apps: Dict[str, List[str]] = {}
        self.lines: Dict[str, List[dict]] = {}
        self.transactions: Dict[str, dict] = {}
        self.merchant_transactions: Dict[str, List[str]] = {}
        self.cards: Dict[str, dict] = {}
        self.root_app = self.add_app(name="root", key=root_key)

    def add_app(self, name: Optional[str] = None, key: Optional[str] = None) -> dict:
        app = {"id": _new_id(), "key": key or uuid.uuid4().hex, "created": _now()}
        if name is not None:
            app["name"] = name
        self.apps[app["id"]] = app
        self.app_by_key[app["key"]] = app["id"]
        return app

    def authorize(self, merchant_id: str, amount: int, currency: str) -> dict:
        """Record a transaction as if the payment window had authorized it"""
        merchant = self.get_merchant(merchant_id)
        return self._add_transaction(
            merchant,
            amount=amount,
            currency=currency,
            descriptor=merchant["descriptor"],
            card={"id": _new_id(), **TEST_CARD},
            custom=None,
        )

    def get_merchant(self, merchant_id: str) -> dict:
        if merchant_id not in self.merchants:
            raise HTTPException(status_code=404, detail="merchant not found")
        return self.merchants[merchant_id]

    def get_transaction(self, transaction_id: str) -> dict:
        if transaction_id not in self.transactions:
            raise HTTPException(status_code=404, detail="transaction not found")
        return self.transactions[transaction_id]

    def _add_transaction(
        self,
        merchant: dict,
        amount: int,
        currency: str,
        descriptor: Optional[str],
        card: dict,
        custom: Optional[Dict[str, Any]],
    ) -> dict:
        transaction = {
            "id": _new_id(),
            "merchantId": merchant["id"],
            "test": merchant["test"],
            "currency": currency,
            "amount": amount,
            "descriptor": descriptor,
            "card": card,
            "created": _now(),
            "successful": True,
            "error": False,
            "pendingAmount": amount,
            "capturedAmount": 0,
            "refundedAmount": 0,
            "voidedAmount": 0,
            "disputedAmount": 0,
            "trail": [],
        }
        if custom is not None:
            transaction["custom"] = custom
        self.transactions[transaction["id"]] = transaction
        self.merchant_transactions.setdefault(merchant["id"], []).append(transaction["id"])
        return transaction

    def add_line(self, transaction: dict, amount: int, fee: int, refund: bool) -> None:
        merchant = self.merchants[transaction["merchantId"]]
        merchant["balance"] += amount - fee
        self.lines.setdefault(merchant["id"], []).append(
            {
                "id": _new_id(),
                "merchantId": merchant["id"],
                "created": _now(),
                "test": merchant["test"],
                "amount": amount,
                "balance": merchant["balance"],
                "fee": fee,
                "currency": transaction["currency"],
                "transactionId": transaction["id"],
                "refund": refund,
            }
        )


def _caller_app(request: Request) -> dict:
    """Resolve Basic Auth (empty user, API key as password) to an app"""
    store: PaylikeStore = request.app.state.store
    header = request.headers.get("authorization", "")
    if not header.startswith("Basic "):
        raise HTTPException(status_code=401, detail="missing credentials")
    try:
        _, _, key = base64.b64decode(header[len("Basic "):]).decode().partition(":")
    except ValueError:
        raise HTTPException(status_code=401, detail="malformed credentials")
    if key not in store.app_by_key:
        raise HTTPException(status_code=401, detail="unknown key")
    return store.apps[store.app_by_key[key]]


def _store(request: Request) -> PaylikeStore:
    return request.app.state.store


def _require(payload: Dict[str, Any], *fields: str) -> None:
    missing = [field for field in fields if payload.get(field) in (None, "")]
    if missing:
        raise HTTPException(status_code=400, detail=f"missing fields: {', '.join(missing)}")


def _public_app(app: dict) -> dict:
    return {k: v for k, v in app.items() if k != "key"}


def build_app(store: Optional[PaylikeStore] = None) -> FastAPI:
    """Create the fake API; every instance gets its own store"""
    api = FastAPI(title="Mock Paylike Server", version="1.0.0")
    api.state.store = store or PaylikeStore()
    auth = [Depends(_caller_app)]

    @api.get("/health")
    def health():
        return {"status": "ok"}

    @api.post("/apps", dependencies=auth, status_code=201)
    def create_app(request: Request, payload: Dict[str, Any] = Body(default={})):
        app = _store(request).add_app(name=payload.get("name"))
        return {"app": app}

    @api.get("/me")
    def me(caller: dict = Depends(_caller_app)):
        return {"identity": _public_app(caller)}

    @api.post("/merchants", status_code=201)
    def create_merchant(
        request: Request,
        payload: Dict[str, Any] = Body(...),
        caller: dict = Depends(_caller_app),
    ):
        _require(payload, "currency", "email", "website", "descriptor", "company")
        _require(payload["company"], "country")
        store = _store(request)
        merchant = {
            "id": _new_id(),
            "name": payload.get("name"),
            "currency": payload["currency"],
            "test": bool(payload.get("test", False)),
            "email": payload["email"],
            "website": payload["website"],
            "descriptor": payload["descriptor"],
            "company": payload["company"],
            "bank": payload.get("bank", {}),
            "pricing": {
                "rate": FEE_RATE_BASIS_POINTS / 10000,
                "flat": {"currency": payload["currency"], "amount": 0},
                "dispute": {"currency": payload["currency"], "amount": 0},
                "transfer": {"toCard": {"rate": 0.0}},
            },
            "claim": {
                "canChargeCard": True,
                "canSaveCard": True,
                "canTransferToCard": False,
                "canCapture": True,
                "canRefund": True,
                "canVoid": True,
            },
            "tds": {"mode": "attempt"},
            "key": uuid.uuid4().hex,
            "created": _now(),
            "balance": 0,
        }
        store.merchants[merchant["id"]] = merchant
        store.merchant_owner[merchant["id"]] = caller["id"]
        return {"merchant": merchant}

    @api.get("/merchants/{merchant_id}", dependencies=auth)
    def get_merchant(request: Request, merchant_id: str):
        return {"merchant": _store(request).get_merchant(merchant_id)}

    @api.put("/merchants/{merchant_id}", dependencies=auth, status_code=204)
    def update_merchant(request: Request, merchant_id: str, payload: Dict[str, Any] = Body(...)):
        merchant = _store(request).get_merchant(merchant_id)
        unknown = set(payload) - {"name", "email", "descriptor"}
        if unknown:
            raise HTTPException(status_code=400, detail=f"cannot update: {', '.join(sorted(unknown))}")
        merchant.update(payload)
        return Response(status_code=204)

    @api.get("/identities/{app_id}/merchants", dependencies=auth)
    def fetch_merchants(request: Request, app_id: str, limit: int = Query(..., ge=1)):
        store = _store(request)
        owned = [
            merchant
            for merchant_id, merchant in store.merchants.items()
            if store.merchant_owner.get(merchant_id) == app_id or app_id in store.merchant_apps.get(merchant_id, [])
        ]
        return _newest_first(owned, limit)

    @api.post("/merchants/{merchant_id}/users", dependencies=auth)
    def invite_user(request: Request, merchant_id: str, payload: Dict[str, Any] = Body(...)):
        _require(payload, "email")
        store = _store(request)
        store.get_merchant(merchant_id)
        users = store.merchant_users.setdefault(merchant_id, [])
        if any(user["email"] == payload["email"] for user in users):
            return Response(status_code=204)
        users.append({"id": _new_id(), "email": payload["email"], "created": _now()})
        return {"isMember": False}

    @api.get("/merchants/{merchant_id}/users", dependencies=auth)
    def fetch_users(request: Request, merchant_id: str, limit: int = Query(..., ge=1)):
        store = _store(request)
        store.get_merchant(merchant_id)
        return store.merchant_users.get(merchant_id, [])[:limit]

    @api.delete("/merchants/{merchant_id}/users/{user_id}", dependencies=auth, status_code=204)
    def revoke_user(request: Request, merchant_id: str, user_id: str):
        store = _store(request)
        users = store.merchant_users.get(merchant_id, [])
        remaining = [user for user in users if user["id"] != user_id]
        if len(remaining) == len(users):
            raise HTTPException(status_code=404, detail="user not found")
        store.merchant_users[merchant_id] = remaining
        return Response(status_code=204)

    @api.post("/merchants/{merchant_id}/apps", dependencies=auth, status_code=204)
    def add_app(request: Request, merchant_id: str, payload: Dict[str, Any] = Body(...)):
        _require(payload, "appId")
        store = _store(request)
        store.get_merchant(merchant_id)
        if payload["appId"] not in store.apps:
            raise HTTPException(status_code=404, detail="app not found")
        granted = store.merchant_apps.setdefault(merchant_id, [])
        if payload["appId"] not in granted:
            granted.append(payload["appId"])
        return Response(status_code=204)

    @api.get("/merchants/{merchant_id}/apps", dependencies=auth)
    def fetch_apps(request: Request, merchant_id: str, limit: int = Query(..., ge=1)):
        store = _store(request)
        store.get_merchant(merchant_id)
        return [_public_app(store.apps[app_id]) for app_id in store.merchant_apps.get(merchant_id, [])][:limit]

    @api.delete("/merchants/{merchant_id}/apps/{app_id}", dependencies=auth, status_code=204)
    def revoke_app(request: Request, merchant_id: str, app_id: str):
        granted = _store(request).merchant_apps.get(merchant_id, [])
        if app_id not in granted:
            raise HTTPException(status_code=404, detail="app not granted")
        granted.remove(app_id)
        return Response(status_code=204)

    @api.get("/merchants/{merchant_id}/lines", dependencies=auth)
    def fetch_lines(request: Request, merchant_id: str, limit: int = Query(..., ge=1)):
        store = _store(request)
        store.get_merchant(merchant_id)
        return _newest_first(store.lines.get(merchant_id, []), limit)

    @api.post("/merchants/{merchant_id}/transactions", dependencies=auth, status_code=201)
    def create_transaction(request: Request, merchant_id: str, payload: Dict[str, Any] = Body(...)):
        _require(payload, "currency", "amount")
        store = _store(request)
        merchant = store.get_merchant(merchant_id)
        if payload.get("cardId"):
            if payload["cardId"] not in store.cards:
                raise HTTPException(status_code=404, detail="card not found")
            source = store.cards[payload["cardId"]]
            card = {"id": source["id"], **{k: source[k] for k in TEST_CARD}}
        elif payload.get("transactionId"):
            card = dict(store.get_transaction(payload["transactionId"])["card"])
        else:
            raise HTTPException(status_code=400, detail="transactionId or cardId required")
        transaction = store._add_transaction(
            merchant,
            amount=payload["amount"],
            currency=payload["currency"],
            descriptor=payload.get("descriptor", merchant["descriptor"]),
            card=card,
            custom=payload.get("custom"),
        )
        return {"transaction": transaction}

    @api.get("/merchants/{merchant_id}/transactions", dependencies=auth)
    def fetch_transactions(request: Request, merchant_id: str, limit: int = Query(..., ge=1)):
        store = _store(request)
        store.get_merchant(merchant_id)
        ids = store.merchant_transactions.get(merchant_id, [])
        return _newest_first([store.transactions[i] for i in ids], limit)

    @api.get("/transactions/{transaction_id}", dependencies=auth)
    def find_transaction(request: Request, transaction_id: str):
        return {"transaction": _store(request).get_transaction(transaction_id)}

    def _check_amount(transaction: dict, payload: Dict[str, Any], available: int) -> int:
        _require(payload, "amount")
        amount = payload["amount"]
        if payload.get("currency") and payload["currency"] != transaction["currency"]:
            raise HTTPException(status_code=400, detail="currency mismatch")
        if amount > available:
            raise HTTPException(status_code=400, detail=f"amount exceeds available {available}")
        return amount

    @api.post("/transactions/{transaction_id}/captures", dependencies=auth, status_code=201)
    def capture(request: Request, transaction_id: str, payload: Dict[str, Any] = Body(...)):
        store = _store(request)
        transaction = store.get_transaction(transaction_id)
        amount = _check_amount(transaction, payload, transaction["pendingAmount"])
        fee = amount * FEE_RATE_BASIS_POINTS // 10000
        transaction["pendingAmount"] -= amount
        transaction["capturedAmount"] += amount
        transaction["trail"].append(
            {
                "capture": True,
                "amount": amount,
                "descriptor": payload.get("descriptor", transaction["descriptor"]),
                "fee": {"flat": 0, "rate": fee},
                "balance": amount - fee,
                "created": _now(),
            }
        )
        store.add_line(transaction, amount, fee, refund=False)
        return {"transaction": transaction}

    @api.post("/transactions/{transaction_id}/refunds", dependencies=auth, status_code=201)
    def refund(request: Request, transaction_id: str, payload: Dict[str, Any] = Body(...)):
        store = _store(request)
        transaction = store.get_transaction(transaction_id)
        refundable = transaction["capturedAmount"] - transaction["refundedAmount"]
        amount = _check_amount(transaction, payload, refundable)
        transaction["refundedAmount"] += amount
        transaction["trail"].append(
            {
                "refund": True,
                "amount": amount,
                "descriptor": payload.get("descriptor", transaction["descriptor"]),
                "fee": {"flat": 0, "rate": 0},
                "balance": -amount,
                "created": _now(),
            }
        )
        store.add_line(transaction, -amount, 0, refund=True)
        return {"transaction": transaction}

    @api.post("/transactions/{transaction_id}/voids", dependencies=auth, status_code=201)
    def void(request: Request, transaction_id: str, payload: Dict[str, Any] = Body(...)):
        store = _store(request)
        transaction = store.get_transaction(transaction_id)
        amount = _check_amount(transaction, payload, transaction["pendingAmount"])
        transaction["pendingAmount"] -= amount
        transaction["voidedAmount"] += amount
        transaction["trail"].append(
            {
                "void": True,
                "amount": amount,
                "descriptor": payload.get("descriptor", transaction["descriptor"]),
                "balance": 0,
                "created": _now(),
            }
        )
        return {"transaction": transaction}

    @api.post("/merchants/{merchant_id}/cards", dependencies=auth, status_code=201)
    def save_card(request: Request, merchant_id: str, payload: Dict[str, Any] = Body(...)):
        _require(payload, "transactionId")
        store = _store(request)
        store.get_merchant(merchant_id)
        transaction = store.get_transaction(payload["transactionId"])
        if transaction["merchantId"] != merchant_id:
            raise HTTPException(status_code=400, detail="transaction belongs to another merchant")
        card = {
            "id": _new_id(),
            "merchantId": merchant_id,
            "created": _now(),
            **{k: transaction["card"][k] for k in TEST_CARD},
        }
        if payload.get("notes"):
            card["notes"] = payload["notes"]
        store.cards[card["id"]] = card
        return {"card": card}

    @api.get("/cards/{card_id}", dependencies=auth)
    def find_card(request: Request, card_id: str):
        store = _store(request)
        if card_id not in store.cards:
            raise HTTPException(status_code=404, detail="card not found")
        return {"card": store.cards[card_id]}

    @api.exception_handler(HTTPException)
    async def paylike_error(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"code": exc.status_code, "message": exc.detail})

    return api


app = build_app()
