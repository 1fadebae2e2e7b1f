"""Relational credential store backed by SQLite."""

import asyncio
import logging
from datetime import UTC, datetime

import aiosqlite

from ..errors import AlreadyExists, BootstrapClosed, StoreUnavailable
from ..storage import StorageModule
from .hashing import PasswordHasher
from .interfaces import UserId, validate_password, validate_username

logger = logging.getLogger(__name__)


class SqliteCredentialStore:
    """
    Credential store persisted in the ``users`` table.

    The bootstrap gate is a ``BEGIN IMMEDIATE`` transaction: it takes the
    database write lock before checking for existing users, so concurrent
    signups from any number of connections or processes serialize on it.
    The primary key on ``username`` rejects duplicates.
    """

    def __init__(self, storage: StorageModule, hasher: PasswordHasher, timeout: float = 5.0):
        """
        Initialize store.

        Args:
            storage: Storage module owning the database file
            hasher: Password hasher
            timeout: Upper bound in seconds for a single store call
        """
        self.storage = storage
        self.hasher = hasher
        self.timeout = timeout

    async def create_user(self, username: str, password: str, *, bootstrap: bool = True) -> UserId:
        validate_username(username)
        validate_password(password)

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        created_at = datetime.now(UTC).isoformat()

        await self._bounded(
            self._insert_user(username, password_hash, created_at, bootstrap),
            "create user",
        )

        logger.info(f"Created user {username}")
        return username

    async def verify_credentials(self, username: str, password: str) -> bool:
        stored_hash = await self._bounded(self._fetch_hash(username), "fetch user")
        return await asyncio.to_thread(self.hasher.verify, password, stored_hash)

    async def user_exists_any(self) -> bool:
        return await self._bounded(self._any_user(), "count users")

    async def _bounded(self, operation, description: str):
        """Run a store coroutine under the call timeout, mapping failures to StoreUnavailable."""
        try:
            return await asyncio.wait_for(operation, self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Timed out trying to {description}")
            raise StoreUnavailable() from e
        except aiosqlite.Error as e:
            logger.error(f"Failed to {description}: {e}")
            raise StoreUnavailable() from e

    async def _insert_user(
        self, username: str, password_hash: str, created_at: str, bootstrap: bool
    ) -> None:
        async with self.storage.connect() as db:
            await db.execute("BEGIN IMMEDIATE")
            committed = False
            try:
                if bootstrap:
                    cursor = await db.execute("SELECT EXISTS(SELECT 1 FROM users)")
                    (exists,) = await cursor.fetchone()
                    if exists:
                        raise BootstrapClosed()

                try:
                    await db.execute(
                        "INSERT INTO users (username, password_hash, created_at) VALUES (?, ?, ?)",
                        (username, password_hash, created_at),
                    )
                except aiosqlite.IntegrityError as e:
                    raise AlreadyExists() from e

                await db.execute("COMMIT")
                committed = True
            finally:
                # A cancelled COMMIT may still have landed in the worker thread
                if not committed and db.in_transaction:
                    await db.execute("ROLLBACK")

    async def _fetch_hash(self, username: str):
        async with self.storage.connect() as db:
            cursor = await db.execute(
                "SELECT password_hash FROM users WHERE username = ?", (username,)
            )
            row = await cursor.fetchone()
            return row[0] if row else None

    async def _any_user(self) -> bool:
        async with self.storage.connect() as db:
            cursor = await db.execute("SELECT EXISTS(SELECT 1 FROM users)")
            (exists,) = await cursor.fetchone()
            return bool(exists)
