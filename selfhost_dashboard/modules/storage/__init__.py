"""
Storage Module - Black Box Interface

Purpose: Abstract relational persistence for the real backend
Interface: initialize(), connect()
Hidden: SQLite file location, schema, busy timeout, journal mode

Can be replaced with any relational backend without affecting the
credential store contract.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import aiosqlite

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    username TEXT PRIMARY KEY,
    password_hash TEXT NOT NULL,
    created_at TEXT NOT NULL
);
"""


class StorageModule:
    """Black box storage abstraction."""

    def __init__(self, database_path: Optional[str] = None, busy_timeout: float = 5.0):
        """
        Initialize storage.

        Args:
            database_path: SQLite file path
            busy_timeout: Seconds SQLite waits on a locked database
        """
        self.path = Path(
            database_path
            or os.getenv("DASHBOARD_DB_PATH", "/var/lib/selfhost-dashboard/dashboard.db")
        )
        self.busy_timeout = busy_timeout

    async def initialize(self) -> None:
        """Create the database file and schema if missing."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        async with self.connect() as db:
            # Write-Ahead Logging lets readers proceed during signup
            await db.execute("PRAGMA journal_mode=WAL")
            await db.executescript(SCHEMA)

        logger.info(f"Database initialized at {self.path}")

    def connect(self) -> aiosqlite.Connection:
        """
        Open a connection in autocommit mode.

        Callers manage transactions explicitly with BEGIN/COMMIT. Use as
        ``async with storage.connect() as db``.
        """
        return aiosqlite.connect(
            str(self.path), timeout=self.busy_timeout, isolation_level=None
        )


__all__ = ["StorageModule", "SCHEMA"]
