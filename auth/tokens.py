"""
JWT token creation and verification.

Tokens are HS256-signed JWTs carrying the user id (``sub``), the username,
``iat`` and ``exp``.  Expiry is always set.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from core.errors import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenIdentity:
    user_id: str
    username: str


class TokenService:
    def __init__(self, secret: str, algorithm: str = "HS256", expiry_seconds: int = 3600) -> None:
        self._secret = secret
        self.algorithm = algorithm
        self.expiry_seconds = expiry_seconds

    def issue(self, user_id: str, username: str) -> str:
        """Create a signed token for ``user_id`` with a bounded expiry."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "username": username,
            "iat": now,
            "exp": now + timedelta(seconds=self.expiry_seconds),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenIdentity:
        """
        Verify token and return the identity it was issued for.

        Raises ``AuthenticationError`` on any failure; the reason is only
        logged, never returned to the caller.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise AuthenticationError()
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected invalid token: %s", exc)
            raise AuthenticationError()

        username = payload.get("username")
        if not isinstance(username, str):
            logger.info("Rejected token without username claim")
            raise AuthenticationError()
        return TokenIdentity(user_id=payload["sub"], username=username)
