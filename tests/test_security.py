"""Tests for password hashing and access tokens."""

import base64
import json
import time
from datetime import timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from app.core.config import Settings
from app.core.security import (
    Credential,
    create_access_token,
    hash_password,
    verify_password,
    verify_token,
)


@pytest.fixture
def settings():
    return Settings(_env_file=None, jwt_secret="unit-secret")


class TestPasswordHashing:
    """Salted hashing of the configured password."""

    def test_verify_password_accepts_correct_password(self):
        hashed = hash_password("password123")
        assert verify_password("password123", hashed)

    def test_verify_password_rejects_wrong_password(self):
        hashed = hash_password("password123")
        assert not verify_password("password124", hashed)

    def test_hashes_are_salted(self):
        assert hash_password("password123") != hash_password("password123")

    def test_credential_does_not_keep_plaintext(self):
        credential = Credential.from_plaintext("admin", "password123")

        assert credential.username == "admin"
        assert "password123" not in credential.password_hash
        assert verify_password("password123", credential.password_hash)


class TestAccessToken:
    """Issuing and validating bearer tokens."""

    def test_issue_then_validate_recovers_username(self, settings):
        token = create_access_token("admin", settings)

        assert verify_token(token, settings).username == "admin"

    def test_token_carries_username_and_one_hour_expiry(self, settings):
        token = create_access_token("admin", settings)
        claims = jwt.get_unverified_claims(token)

        assert claims["username"] == "admin"
        assert abs(claims["exp"] - (int(time.time()) + 3600)) <= 5

    def test_expired_token_is_rejected(self, settings):
        token = create_access_token("admin", settings, expires_delta=timedelta(seconds=-1))

        with pytest.raises(HTTPException) as exc_info:
            verify_token(token, settings)
        assert exc_info.value.status_code == 403

    def test_token_signed_with_other_secret_is_rejected(self, settings):
        other = Settings(_env_file=None, jwt_secret="someone-else")
        token = create_access_token("admin", other)

        with pytest.raises(HTTPException) as exc_info:
            verify_token(token, settings)
        assert exc_info.value.status_code == 403

    def test_tampered_payload_is_rejected(self, settings):
        header, _, signature = create_access_token("admin", settings).split(".")
        forged = base64.urlsafe_b64encode(
            json.dumps({"username": "root", "exp": 9999999999}).encode()
        ).rstrip(b"=").decode()

        with pytest.raises(HTTPException) as exc_info:
            verify_token(f"{header}.{forged}.{signature}", settings)
        assert exc_info.value.status_code == 403

    def test_malformed_token_is_rejected(self, settings):
        with pytest.raises(HTTPException) as exc_info:
            verify_token("not-a-jwt", settings)
        assert exc_info.value.status_code == 403

    def test_token_without_username_is_rejected(self, settings):
        token = jwt.encode({"sub": "admin"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)

        with pytest.raises(HTTPException) as exc_info:
            verify_token(token, settings)
        assert exc_info.value.status_code == 403
