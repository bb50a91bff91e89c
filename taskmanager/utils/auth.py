"""
Authentication primitives: bcrypt password hashing and JWT encode/decode.

- bcrypt with per-password salt
- HMAC-signed JWTs (HS256 by default), algorithm and key supplied by the caller
- UTC timestamps for issued-at / expiry claims
"""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

# bcrypt only looks at the first 72 bytes and newer releases reject longer input
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a hashed password."""
    try:
        return bcrypt.checkpw(
            _password_bytes(plain_password), hashed_password.encode("utf-8")
        )
    except ValueError:
        # Malformed stored hash
        return False


def get_password_hash(password: str) -> str:
    """Hash a plain text password using bcrypt."""
    salt = bcrypt.gensalt()
    hashed_password = bcrypt.hashpw(password=_password_bytes(password), salt=salt)
    return hashed_password.decode("utf-8")


def encode_token(
    claims: dict[str, Any],
    secret_key: str,
    algorithm: str,
    expires_delta: timedelta,
) -> str:
    """Sign ``claims`` with an ``exp`` of now + ``expires_delta``."""
    now = datetime.now(UTC)
    to_encode = claims.copy()
    to_encode.update({"iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_token(token: str, secret_key: str, algorithm: str) -> dict | None:
    """Decode and verify signature and expiry. Returns None when invalid."""
    try:
        return jwt.decode(token, secret_key, algorithms=[algorithm])
    except JWTError:
        return None
