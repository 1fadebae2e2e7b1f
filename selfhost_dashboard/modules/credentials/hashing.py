"""Password hashing built on bcrypt."""

import base64
import hashlib
import logging
import secrets
from typing import Optional

import bcrypt

logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    Salted bcrypt hashing with a SHA-256 pre-hash.

    The pre-hash keeps passwords of any length inside bcrypt's 72 byte
    input limit. A dummy hash of the same cost is checked for unknown
    users so both failure paths cost one full bcrypt verification.
    """

    def __init__(self, rounds: int = 12):
        """
        Initialize hasher.

        Args:
            rounds: bcrypt cost factor (4-31)
        """
        self.rounds = rounds
        self._dummy_hash = self.hash(secrets.token_urlsafe(16)).encode("utf-8")

    @staticmethod
    def _prehash(password: str) -> bytes:
        digest = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(digest)

    def hash(self, password: str) -> str:
        """Hash password using bcrypt"""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._prehash(password), salt).decode("utf-8")

    def verify(self, password: str, hashed: Optional[str]) -> bool:
        """
        Verify password against hash.

        Args:
            password: Plaintext candidate
            hashed: Stored hash, or None when the user does not exist

        Returns:
            True only when the user exists and the password matches
        """
        if hashed is None:
            bcrypt.checkpw(self._prehash(password), self._dummy_hash)
            return False

        try:
            return bcrypt.checkpw(self._prehash(password), hashed.encode("utf-8"))
        except ValueError:
            logger.error("Stored password hash is malformed")
            return False
