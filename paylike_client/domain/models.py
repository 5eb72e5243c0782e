"""Domain models - immutable snapshots of Paylike resources"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PaylikeModel(BaseModel):
    """Base for decoded resources: camelCase on the wire, frozen once decoded"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class App(PaylikeModel):
    """Registered API consumer"""

    id: str
    name: Optional[str] = None
    key: Optional[str] = None  # Only returned on creation
    created: Optional[datetime] = None


class Identity(PaylikeModel):
    """App bound to the API key in use"""

    id: str
    name: Optional[str] = None
    created: Optional[datetime] = None


class Amount(PaylikeModel):
    currency: Optional[str] = None
    amount: int = 0


class Pricing(PaylikeModel):
    rate: float = 0.0
    flat: Optional[Amount] = None
    dispute: Optional[Amount] = None


class MerchantTransfer(PaylikeModel):
    to_card: Optional[Pricing] = None


class MerchantPricing(Pricing):
    transfer: Optional[MerchantTransfer] = None


class MerchantClaim(PaylikeModel):
    """Capabilities granted to a merchant"""

    can_charge_card: bool = False
    can_save_card: bool = False
    can_transfer_to_card: bool = False
    can_capture: bool = False
    can_refund: bool = False
    can_void: bool = False


class MerchantTDS(PaylikeModel):
    mode: Optional[str] = None


class MerchantCompany(PaylikeModel):
    country: Optional[str] = None  # ISO 3166 code, e.g. "DK"
    number: Optional[str] = None  # Registration number ("CVR" in Denmark)


class MerchantBank(PaylikeModel):
    iban: Optional[str] = None


class Merchant(PaylikeModel):
    """Seller account"""

    id: str
    name: Optional[str] = None
    currency: Optional[str] = None
    test: bool = False
    email: Optional[str] = None
    website: Optional[str] = None
    descriptor: Optional[str] = None
    company: Optional[MerchantCompany] = None
    bank: Optional[MerchantBank] = None
    pricing: Optional[MerchantPricing] = None
    claim: Optional[MerchantClaim] = None
    tds: Optional[MerchantTDS] = None
    key: Optional[str] = None
    created: Optional[datetime] = None
    balance: int = 0


class MerchantInvitation(PaylikeModel):
    """Outcome of inviting a user by email"""

    is_member: bool = False


class User(PaylikeModel):
    """Person with access to a merchant"""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    created: Optional[datetime] = None


class Line(PaylikeModel):
    """Single balance history entry"""

    id: str
    merchant_id: Optional[str] = None
    created: Optional[datetime] = None
    test: bool = False
    amount: int = 0  # Signed: negative for outgoing
    balance: int = 0
    fee: int = 0
    currency: Optional[str] = None
    transaction_id: Optional[str] = None
    refund: bool = False
    dispute: Optional[Dict[str, Any]] = None


class CardSummary(PaylikeModel):
    """Card snapshot embedded in a transaction"""

    id: Optional[str] = None
    bin: Optional[str] = None
    last4: Optional[str] = None
    expiry: Optional[datetime] = None
    scheme: Optional[str] = None


class TrailFee(PaylikeModel):
    flat: int = 0
    rate: int = 0


class TransactionTrail(PaylikeModel):
    """One capture, refund or void recorded against a transaction"""

    capture: bool = False
    refund: bool = False
    void: bool = False
    amount: int = 0
    fee: Optional[TrailFee] = None
    balance: int = 0
    created: Optional[datetime] = None
    descriptor: Optional[str] = None
    dispute: Optional[Dict[str, Any]] = None


class Transaction(PaylikeModel):
    """Payment and the amounts moved through its lifecycle"""

    id: str
    merchant_id: Optional[str] = None
    test: bool = False
    currency: Optional[str] = None
    amount: int = 0
    descriptor: Optional[str] = None
    card: Optional[CardSummary] = None
    created: Optional[datetime] = None
    successful: bool = False
    error: bool = False
    pending_amount: int = 0
    captured_amount: int = 0
    refunded_amount: int = 0
    voided_amount: int = 0
    disputed_amount: int = 0
    trail: List[TransactionTrail] = Field(default_factory=list)
    custom: Optional[Dict[str, Any]] = None


class Card(PaylikeModel):
    """Stored card reference"""

    id: str
    merchant_id: Optional[str] = None
    created: Optional[datetime] = None
    bin: Optional[str] = None
    last4: Optional[str] = None
    expiry: Optional[datetime] = None
    scheme: Optional[str] = None
    notes: Optional[str] = None
