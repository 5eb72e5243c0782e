"""Unit tests for request payload serialization"""

import json

import pytest
from pydantic import ValidationError

from paylike_client.api.schemas import (
    AppCreate,
    AppGrant,
    CardCreate,
    MerchantBankIn,
    MerchantCompanyIn,
    MerchantCreate,
    MerchantUpdate,
    TransactionAmount,
    TransactionCreate,
)


def test_partial_update_sends_only_set_fields():
    """Unset fields must not blank out server-side values"""
    assert json.loads(MerchantUpdate(name="Test").to_json()) == {"name": "Test"}


def test_explicit_none_is_never_sent():
    dto = MerchantUpdate(name="Test", email=None)
    assert json.loads(dto.to_json()) == {"name": "Test"}


def test_unnamed_app_serializes_to_empty_object():
    assert json.loads(AppCreate().to_json()) == {}
    assert json.loads(AppCreate(name=None).to_json()) == {}


def test_merchant_create_nested_fields_and_omitted_optionals():
    dto = MerchantCreate(
        currency="huf",
        email="john@example.com",
        website="https://example.com",
        descriptor="1234567897891234",
        company=MerchantCompanyIn(country="HU"),
    )

    assert json.loads(dto.to_json()) == {
        "currency": "HUF",
        "email": "john@example.com",
        "website": "https://example.com",
        "descriptor": "1234567897891234",
        "company": {"country": "HU"},
    }


def test_merchant_create_includes_bank_when_given():
    dto = MerchantCreate(
        test=True,
        currency="DKK",
        email="john@example.com",
        website="https://example.com",
        descriptor="Shop",
        company=MerchantCompanyIn(country="DK", number="12345678"),
        bank=MerchantBankIn(iban="DK5000400440116243"),
    )

    payload = json.loads(dto.to_json())
    assert payload["test"] is True
    assert payload["company"] == {"country": "DK", "number": "12345678"}
    assert payload["bank"] == {"iban": "DK5000400440116243"}


def test_merchant_create_requires_company():
    with pytest.raises(ValidationError):
        MerchantCreate(currency="DKK", email="a@b.c", website="https://b.c", descriptor="x")


def test_currency_must_be_three_letters():
    with pytest.raises(ValidationError):
        TransactionCreate(transaction_id="t1", currency="EURO", amount=100)


def test_transaction_create_uses_camel_case_and_keeps_custom_data():
    dto = TransactionCreate(
        transaction_id="t1",
        currency="eur",
        amount=1500,
        custom={"orderId": 42, "items": ["a", "b"], "gift": False},
    )

    assert json.loads(dto.to_json()) == {
        "transactionId": "t1",
        "currency": "EUR",
        "amount": 1500,
        "custom": {"orderId": 42, "items": ["a", "b"], "gift": False},
    }


@pytest.mark.parametrize(
    "sources",
    [{}, {"transaction_id": "t1", "card_id": "c1"}],
)
def test_transaction_create_needs_exactly_one_source(sources):
    with pytest.raises(ValidationError):
        TransactionCreate(currency="EUR", amount=100, **sources)


def test_transaction_amount_must_be_positive():
    with pytest.raises(ValidationError):
        TransactionAmount(amount=0)


def test_transaction_amount_optional_fields():
    assert json.loads(TransactionAmount(amount=500).to_json()) == {"amount": 500}
    assert json.loads(TransactionAmount(amount=500, currency="EUR", descriptor="Order 7").to_json()) == {
        "amount": 500,
        "currency": "EUR",
        "descriptor": "Order 7",
    }


def test_alias_and_field_name_both_accepted():
    assert AppGrant(app_id="a1").to_json() == AppGrant(appId="a1").to_json()
    assert json.loads(CardCreate(transaction_id="t1").to_json()) == {"transactionId": "t1"}


def test_unknown_fields_are_rejected():
    with pytest.raises(ValidationError):
        MerchantUpdate(website="https://example.com")
