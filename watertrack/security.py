"""
Password hashing and bearer-token helpers.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import lru_cache

import jwt
from passlib.context import CryptContext

from watertrack.config import Settings


@lru_cache(maxsize=8)
def _crypt_context(schemes: tuple[str, ...]) -> CryptContext:
    return CryptContext(schemes=list(schemes), deprecated="auto")


def hash_password(password: str, settings: Settings) -> str:
    return _crypt_context(tuple(settings.password_schemes)).hash(password)


def verify_password(password: str, hashed: str, settings: Settings) -> bool:
    if not hashed:
        return False
    try:
        return _crypt_context(tuple(settings.password_schemes)).verify(password, hashed)
    except ValueError:
        # Unrecognised or malformed hash.
        return False


def create_access_token(user_id: str, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=settings.access_token_expire_minutes),
        "type": "access",
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> str:
    """
    Return the user id carried by ``token``.

    Raises ``jwt.InvalidTokenError`` (including ``ExpiredSignatureError``) for
    tokens that fail verification or lack a subject.
    """
    payload = jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        options={"require": ["sub", "exp"]},
    )
    if payload.get("type") != "access":
        raise jwt.InvalidTokenError("Not an access token")
    return payload["sub"]
