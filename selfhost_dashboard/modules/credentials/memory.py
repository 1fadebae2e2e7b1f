"""In-memory credential store for development and tests."""

import asyncio
import logging
import threading
from datetime import UTC, datetime
from typing import Dict

from ..errors import AlreadyExists, BootstrapClosed
from .hashing import PasswordHasher
from .interfaces import User, UserId, validate_password, validate_username

logger = logging.getLogger(__name__)


class InMemoryCredentialStore:
    """
    Dict-backed credential store.

    Nothing survives a process restart, so the bootstrap flag resets with
    every new process. The check-and-insert runs under one lock; hashing
    happens before the lock is taken.
    """

    def __init__(self, hasher: PasswordHasher):
        self.hasher = hasher
        self._users: Dict[str, User] = {}
        self._lock = threading.Lock()

    async def create_user(self, username: str, password: str, *, bootstrap: bool = True) -> UserId:
        validate_username(username)
        validate_password(password)

        password_hash = await asyncio.to_thread(self.hasher.hash, password)

        with self._lock:
            if bootstrap and self._users:
                raise BootstrapClosed()
            if username in self._users:
                raise AlreadyExists()
            self._users[username] = User(
                username=username,
                password_hash=password_hash,
                created_at=datetime.now(UTC),
            )

        logger.info(f"Created user {username}")
        return username

    async def verify_credentials(self, username: str, password: str) -> bool:
        with self._lock:
            user = self._users.get(username)

        stored_hash = user.password_hash if user else None
        return await asyncio.to_thread(self.hasher.verify, password, stored_hash)

    async def user_exists_any(self) -> bool:
        with self._lock:
            return bool(self._users)
