import datetime

import pytest
from pydantic import ValidationError

from smartspend.schemas import LoginRequest, RegisterRequest, TransactionCreate


def register_payload(**overrides):
    payload = {
        "username": "kemi", "email": "kemi@example.com", "password": "pw",
        "phone": "0802", "fullName": "Kemi Ade",
    }
    payload.update(overrides)
    return payload


@pytest.mark.parametrize("email", ["bad,comma@ex.com", "a@b..com", "<a>@b.com", "no-at-sign"])
def test_register_rejects_malformed_email(email):
    with pytest.raises(ValidationError) as exc:
        RegisterRequest.model_validate(register_payload(email=email))
    assert exc.value.errors()[0]["loc"] == ("email",)


def test_register_strips_email_and_keeps_password():
    data = RegisterRequest.model_validate(register_payload(email="  kemi@example.com ", password=" pw "))
    assert data.email == "kemi@example.com"
    assert data.password == " pw "


def test_password_limit_is_in_utf8_bytes():
    # 36 two-byte characters fill the limit exactly
    assert RegisterRequest.model_validate(register_payload(password="é" * 36)).password == "é" * 36

    with pytest.raises(ValidationError, match="Password must be at most 72 bytes"):
        RegisterRequest.model_validate(register_payload(password="é" * 37))
    with pytest.raises(ValidationError, match="Password must be at most 72 bytes"):
        LoginRequest(username="kemi", password="p" * 73)


def test_transaction_date_is_normalised_to_naive_utc():
    txn = TransactionCreate(
        type="expense", category="Food", amount=10,
        transaction_date="2025-06-01T10:00:00+01:00",
    )
    assert txn.transaction_date == datetime.datetime(2025, 6, 1, 9, 0)
    assert txn.transaction_date.tzinfo is None

    naive = TransactionCreate(type="expense", category="Food", amount=10, transaction_date="2025-06-01T10:00:00")
    assert naive.transaction_date == datetime.datetime(2025, 6, 1, 10, 0)
