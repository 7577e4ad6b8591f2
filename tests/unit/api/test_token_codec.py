from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from jose import jwt

from realty_auth.api.utils.jwt import ALGORITHM, RESET_TOKEN_TYPE, TokenCodec


def test_missing_secret_fails_at_construction():
    with pytest.raises(RuntimeError):
        TokenCodec(None)
    with pytest.raises(RuntimeError):
        TokenCodec("")


def test_access_token_round_trip(token_codec):
    user_id = uuid4()

    token = token_codec.issue_access_token(user_id, "jane@acme.com")
    claims = token_codec.verify(token)

    assert claims["userId"] == str(user_id)
    assert claims["email"] == "jane@acme.com"
    assert "type" not in claims


def test_access_token_expires_in_seven_days(token_codec):
    token = token_codec.issue_access_token(uuid4(), "jane@acme.com")

    remaining = token_codec.expiry_of(token) - datetime.now(UTC)

    assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)


def test_reset_token_has_type_and_short_expiry(token_codec):
    token = token_codec.issue_reset_token(uuid4(), "jane@acme.com")
    claims = token_codec.verify(token)

    assert claims["type"] == RESET_TOKEN_TYPE
    remaining = token_codec.expiry_of(token) - datetime.now(UTC)
    assert timedelta(minutes=14) < remaining <= timedelta(minutes=15)


def test_reset_tokens_issued_together_are_distinct(token_codec):
    user_id = uuid4()

    first = token_codec.issue_reset_token(user_id, "jane@acme.com")
    second = token_codec.issue_reset_token(user_id, "jane@acme.com")

    assert first != second


def test_expired_token_does_not_verify(token_codec):
    past = datetime.now(UTC) - timedelta(hours=1)
    token = jwt.encode(
        {"userId": "u1", "email": "jane@acme.com", "iat": past - timedelta(days=7), "exp": past},
        "unit-test-secret",
        algorithm=ALGORITHM,
    )

    assert token_codec.verify(token) is None
    assert token_codec.is_expired(token) is True


def test_token_signed_with_other_secret_does_not_verify(token_codec):
    other = TokenCodec("another-secret")
    token = other.issue_access_token(uuid4(), "jane@acme.com")

    assert token_codec.verify(token) is None
    # decode is introspection only and ignores the signature
    assert token_codec.decode(token)["email"] == "jane@acme.com"


@pytest.mark.parametrize("token", ["", None, "not-a-jwt", "a.b.c"])
def test_malformed_tokens(token_codec, token):
    assert token_codec.verify(token) is None
    assert token_codec.decode(token) is None
    assert token_codec.expiry_of(token) is None
    assert token_codec.is_expired(token) is True


def test_fresh_token_is_not_expired(token_codec):
    token = token_codec.issue_access_token(uuid4(), "jane@acme.com")

    assert token_codec.is_expired(token) is False
