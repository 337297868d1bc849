"""
Password hashing and token helpers.

Access tokens embed ``userId``, ``email`` and ``role`` (role slug); refresh
tokens embed only ``userId``. The two token kinds are signed with different
secrets and carry a ``type`` claim so one can never stand in for the other.
"""

import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import List

from jose import JWTError, jwt
from passlib.context import CryptContext

from cms.config import get_settings

settings = get_settings()

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

PASSWORD_RULES = [
    (lambda p: len(p) >= 8, "Password must be at least 8 characters long"),
    (lambda p: re.search(r"[A-Z]", p), "Password must contain at least one uppercase letter"),
    (lambda p: re.search(r"[a-z]", p), "Password must contain at least one lowercase letter"),
    (lambda p: re.search(r"[0-9]", p), "Password must contain at least one number"),
    (
        lambda p: re.search(r"[!@#$%^&*(),.?\":{}|<>]", p),
        "Password must contain at least one special character",
    ),
]


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # Malformed hash in the database
        return False


def password_strength_errors(password: str) -> List[str]:
    return [message for check, message in PASSWORD_RULES if not check(password)]


def create_access_token(user_id: int, email: str, role: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expires_minutes)
    to_encode = {
        "userId": user_id,
        "email": email,
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=ALGORITHM)


def create_refresh_token(user_id: int) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=settings.refresh_token_expires_days)
    to_encode = {"userId": user_id, "type": REFRESH_TOKEN_TYPE, "exp": expire}
    return jwt.encode(to_encode, settings.refresh_token_secret, algorithm=ALGORITHM)


def _decode(token: str, secret: str, token_type: str) -> dict:
    payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    if payload.get("type") != token_type or not isinstance(payload.get("userId"), int):
        raise JWTError("Unexpected token payload")
    return payload


def decode_access_token(token: str) -> dict:
    """Verify an access token. Raises ``jose.JWTError`` (or its
    ``ExpiredSignatureError`` subclass) when the token is unusable."""
    return _decode(token, settings.jwt_secret, ACCESS_TOKEN_TYPE)


def decode_refresh_token(token: str) -> dict:
    return _decode(token, settings.refresh_token_secret, REFRESH_TOKEN_TYPE)


def generate_reset_token() -> str:
    """Random 32-byte token, hex encoded."""
    return secrets.token_hex(32)
