"""Security helpers for password hashing and access token signing."""
from __future__ import annotations

import logging
import time
from datetime import timedelta

from itsdangerous import BadSignature, URLSafeTimedSerializer
from passlib.context import CryptContext

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Hash and verify user passwords using Argon2id.

    The digest carries the algorithm, work factor and salt inline, so only
    the digest string needs to be stored.
    """

    def __init__(self, time_cost: int = 3, memory_cost: int = 65536) -> None:
        self._context = CryptContext(
            schemes=["argon2"],
            deprecated="auto",
            argon2__rounds=time_cost,
            argon2__memory_cost=memory_cost,
        )

    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("Password must not be empty")
        return self._context.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        if not password or not hashed:
            return False
        try:
            return self._context.verify(password, hashed)
        except (ValueError, TypeError):
            # unidentifiable or malformed digest
            return False


class TokenRejected(ValueError):
    """Raised when an access token is invalid, tampered with or expired."""


class TokenSigner:
    """Issue and verify signed, self-contained bearer tokens.

    Tokens embed the subject id, their issue time and their expiry. The
    expiry is fixed when the token is issued, so changing ``lifetime`` only
    affects tokens issued afterwards. There is no server-side session state
    and no revocation: a token stays valid until it expires.
    """

    def __init__(self, secret: str | None, lifetime: timedelta = timedelta(hours=72), salt: str = "travel-story-access") -> None:
        if not secret:
            raise ValueError("An access token secret is required")
        self.lifetime = lifetime
        self._serializer = URLSafeTimedSerializer(secret, salt=salt)

    def issue(self, subject_id: str) -> str:
        issued_at = int(time.time())
        expires_at = issued_at + int(self.lifetime.total_seconds())
        return self._serializer.dumps({"sub": subject_id, "iat": issued_at, "exp": expires_at})

    def verify(self, token: str) -> str:
        """Return the subject id carried by ``token`` or raise TokenRejected."""

        try:
            payload = self._serializer.loads(token)
        except BadSignature as exc:
            logger.debug("Rejected access token: %s", type(exc).__name__)
            raise TokenRejected("Invalid or expired access token") from exc

        if not isinstance(payload, dict):
            raise TokenRejected("Invalid or expired access token")
        subject = payload.get("sub")
        expires_at = payload.get("exp")
        if not isinstance(subject, str) or not subject:
            raise TokenRejected("Invalid or expired access token")
        if not isinstance(expires_at, int) or isinstance(expires_at, bool) or time.time() > expires_at:
            logger.debug("Rejected access token: expired or without expiry")
            raise TokenRejected("Invalid or expired access token")
        return subject
