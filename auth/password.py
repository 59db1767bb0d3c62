"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.
"""

from __future__ import annotations

import bcrypt


class PasswordHasher:
    """bcrypt hasher bound to a single work factor."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds
        self._dummy_hash: str | None = None

    def hash(self, password: str) -> str:
        """Hash a password with bcrypt (auto-salted)."""
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Constant-time comparison against a bcrypt hash.

        Only a mismatch returns False; a corrupt hash raises ``ValueError``.
        """
        return bcrypt.checkpw(password.encode(), password_hash.encode())

    def verify_dummy(self, password: str) -> bool:
        """
        Burn one verification against a throwaway hash so that a login for
        an unknown user costs about as much as one with a wrong password.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash("dummy-password")
        self.verify(password, self._dummy_hash)
        return False
