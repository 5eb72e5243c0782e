"""Pydantic schemas for request payloads sent to Paylike"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class PaylikeSchema(BaseModel):
    """Base for request bodies.

    Only fields the caller explicitly set are serialized, and None is never
    sent, so partial updates leave untouched server-side fields alone.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    def to_json(self) -> bytes:
        return self.model_dump_json(by_alias=True, exclude_unset=True, exclude_none=True).encode()


class AppCreate(PaylikeSchema):
    """Body for POST /apps"""

    name: Optional[str] = None


class MerchantCompanyIn(PaylikeSchema):
    country: str = Field(..., min_length=2, max_length=2, description="ISO 3166 code, e.g. DK")
    number: Optional[str] = Field(None, description="Registration number")


class MerchantBankIn(PaylikeSchema):
    iban: Optional[str] = None


class MerchantCreate(PaylikeSchema):
    """Body for POST /merchants"""

    name: Optional[str] = None
    currency: str = Field(..., description="Three letter ISO 4217 code")
    test: Optional[bool] = None
    email: str = Field(..., min_length=1, description="Contact email")
    website: str = Field(..., min_length=1, description="Website hosting the integration")
    descriptor: str = Field(..., min_length=1, description="Text on cardholder bank statements")
    company: MerchantCompanyIn
    bank: Optional[MerchantBankIn] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        if len(v) != 3:
            raise ValueError("Currency must be 3-letter ISO code")
        return v.upper()


class MerchantUpdate(PaylikeSchema):
    """Body for PUT /merchants/{id}; unset fields keep their current value"""

    name: Optional[str] = None
    email: Optional[str] = None
    descriptor: Optional[str] = None


class UserInvite(PaylikeSchema):
    email: str = Field(..., min_length=1)


class AppGrant(PaylikeSchema):
    app_id: str = Field(..., min_length=1)


class TransactionCreate(PaylikeSchema):
    """Body for POST /merchants/{id}/transactions.

    The new transaction reuses the card behind either a previous
    transaction (transaction_id) or a saved card (card_id).
    """

    transaction_id: Optional[str] = None
    card_id: Optional[str] = None
    currency: str
    amount: int = Field(..., gt=0, description="Amount in minor units")
    descriptor: Optional[str] = None
    custom: Optional[Dict[str, Any]] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        if len(v) != 3:
            raise ValueError("Currency must be 3-letter ISO code")
        return v.upper()

    @model_validator(mode="after")
    def check_source(self) -> "TransactionCreate":
        if (self.transaction_id is None) == (self.card_id is None):
            raise ValueError("Exactly one of transaction_id or card_id is required")
        return self


class TransactionAmount(PaylikeSchema):
    """Body for captures, refunds and voids"""

    amount: int = Field(..., gt=0, description="Amount in minor units")
    currency: Optional[str] = Field(None, description="Checked against the transaction currency")
    descriptor: Optional[str] = None


class CardCreate(PaylikeSchema):
    """Body for POST /merchants/{id}/cards"""

    transaction_id: str = Field(..., min_length=1)
    notes: Optional[str] = None
