"""
Tests for password hashing and JWT helpers.

Tests cover:
- bcrypt hashing and verification
- Password strength rules
- Access/refresh token claims and type separation
- Expired and tampered tokens
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import ExpiredSignatureError, JWTError, jwt

from cms.config import get_settings
from cms.security import (
    ALGORITHM,
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    generate_reset_token,
    hash_password,
    password_strength_errors,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("Secret#123")
        assert hashed != "Secret#123"
        assert hashed.startswith("$2")

    def test_verify_round_trip(self):
        hashed = hash_password("Secret#123")
        assert verify_password("Secret#123", hashed)
        assert not verify_password("secret#123", hashed)

    def test_verify_malformed_hash_returns_false(self):
        """A corrupt hash in the database should not raise."""
        assert verify_password("anything", "not-a-bcrypt-hash") is False


class TestPasswordStrength:
    def test_strong_password_has_no_errors(self):
        assert password_strength_errors("Str0ng!Pass") == []

    @pytest.mark.parametrize(
        "password,fragment",
        [
            ("Sh0rt!", "at least 8"),
            ("lowercase1!", "uppercase"),
            ("UPPERCASE1!", "lowercase"),
            ("NoDigits!!", "number"),
            ("NoSpecial1", "special"),
        ],
    )
    def test_each_rule_reported(self, password, fragment):
        errors = password_strength_errors(password)
        assert any(fragment in e for e in errors)


class TestTokens:
    def test_access_token_claims(self):
        claims = decode_access_token(create_access_token(7, "a@example.com", "editor"))
        assert claims["userId"] == 7
        assert claims["email"] == "a@example.com"
        assert claims["role"] == "editor"
        assert claims["type"] == "access"

    def test_refresh_token_claims(self):
        claims = decode_refresh_token(create_refresh_token(7))
        assert claims["userId"] == 7
        assert claims["type"] == "refresh"
        assert "email" not in claims

    def test_refresh_token_rejected_as_access_token(self):
        with pytest.raises(JWTError):
            decode_access_token(create_refresh_token(7))

    def test_access_token_rejected_as_refresh_token(self):
        with pytest.raises(JWTError):
            decode_refresh_token(create_access_token(7, "a@example.com", "editor"))

    def test_expired_access_token(self):
        settings = get_settings()
        token = jwt.encode(
            {
                "userId": 1,
                "email": "a@example.com",
                "role": "viewer",
                "type": "access",
                "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
            },
            settings.jwt_secret,
            algorithm=ALGORITHM,
        )
        with pytest.raises(ExpiredSignatureError):
            decode_access_token(token)

    def test_token_signed_with_other_secret(self):
        token = jwt.encode({"userId": 1, "type": "access"}, "someone-else", algorithm=ALGORITHM)
        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_non_integer_user_id_rejected(self):
        settings = get_settings()
        token = jwt.encode({"userId": "1", "type": "access"}, settings.jwt_secret, algorithm=ALGORITHM)
        with pytest.raises(JWTError):
            decode_access_token(token)


def test_reset_token_is_64_hex_chars():
    token = generate_reset_token()
    assert len(token) == 64
    int(token, 16)
    assert token != generate_reset_token()
