"""
Access token issuance and verification.

Tokens carry the user id as ``sub`` and the username as ``name``, are signed
with the configured HMAC key and expire after ``TokenConfig.expire_minutes``.
Verification is used by the HTTP layer only; the task services work with an
already resolved user id.
"""

import uuid
from datetime import timedelta

from jose.exceptions import JOSEError

from taskmanager.config import TokenConfig
from taskmanager.exceptions import TokenSigningError
from taskmanager.models import User
from taskmanager.utils.auth import decode_token, encode_token
from taskmanager.utils.logger import setup_logger

logger = setup_logger(__name__)


class TokenService:
    def __init__(self, config: TokenConfig):
        self.config = config

    @property
    def lifetime(self) -> timedelta:
        return timedelta(minutes=self.config.expire_minutes)

    def issue(self, user: User) -> str:
        claims = {"sub": str(user.id), "name": user.username}
        try:
            return encode_token(
                claims,
                self.config.secret_key,
                self.config.algorithm,
                self.lifetime,
            )
        except JOSEError as e:
            logger.error(f"Failed to sign token for user {user.id}: {e}")
            raise TokenSigningError(f"Could not sign access token: {e}") from e

    def resolve_user_id(self, token: str) -> uuid.UUID | None:
        """User id from a valid, unexpired token; None otherwise."""
        payload = decode_token(token, self.config.secret_key, self.config.algorithm)
        if payload is None:
            return None
        try:
            return uuid.UUID(payload.get("sub", ""))
        except (TypeError, ValueError):
            logger.warning("Token carried a malformed subject claim")
            return None
