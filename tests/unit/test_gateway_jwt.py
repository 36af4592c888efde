"""Unit tests for JWT handler."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from jose import jwt

from src.bk_common.errors import InvalidCredentialsError, InvalidRefreshTokenError
from src.bk_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)


def test_access_token_contains_correct_claims() -> None:
    token = create_access_token("acc-123", "Alice")
    # Decode without verification to inspect claims
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "acc-123"
    assert payload["type"] == "access"
    assert payload["name"] == "Alice"
    assert payload["exp"] > payload["iat"]


def test_refresh_token_contains_correct_claims() -> None:
    payload = jwt.get_unverified_claims(create_refresh_token("acc-123"))
    assert payload["sub"] == "acc-123"
    assert payload["type"] == "refresh"


def test_decode_valid_access_token() -> None:
    payload = decode_token(create_access_token("acc-abc"), expected_type="access")
    assert payload["sub"] == "acc-abc"


def test_access_token_used_as_refresh_raises_error() -> None:
    token = create_access_token("acc-abc")
    with pytest.raises(InvalidRefreshTokenError):
        decode_token(token, expected_type="refresh")


def test_refresh_token_used_as_access_raises_error() -> None:
    token = create_refresh_token("acc-abc")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token, expected_type="access")


def test_expired_access_token_raises_credentials_error() -> None:
    with patch(
        "src.bk_gateway.auth.jwt_handler._ACCESS_EXPIRE",
        timedelta(seconds=-1),
    ):
        token = create_access_token("acc-abc")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token, expected_type="access")


def test_expired_refresh_token_raises_refresh_error() -> None:
    with patch(
        "src.bk_gateway.auth.jwt_handler._REFRESH_EXPIRE",
        timedelta(seconds=-1),
    ):
        token = create_refresh_token("acc-abc")
    with pytest.raises(InvalidRefreshTokenError):
        decode_token(token, expected_type="refresh")


def test_token_signed_with_other_secret_rejected() -> None:
    forged = jwt.encode({"sub": "acc-abc", "type": "access"}, "not-the-secret", algorithm="HS256")
    with pytest.raises(InvalidCredentialsError):
        decode_token(forged, expected_type="access")


def test_token_without_subject_rejected() -> None:
    token = create_access_token("")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token, expected_type="access")
