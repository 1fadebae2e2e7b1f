"""
Credentials Module - Black Box Interface

Purpose: Persist usernames and password hashes, verify logins
Interface: create_user(), verify_credentials(), user_exists_any()
Hidden: Hash algorithm, storage backend, bootstrap gate

Both stores satisfy the same contract and error taxonomy, so the auth
service never knows which one it is talking to.
"""

from .hashing import PasswordHasher
from .interfaces import CredentialStore, User, UserId
from .memory import InMemoryCredentialStore
from .sqlite import SqliteCredentialStore

__all__ = [
    "CredentialStore",
    "InMemoryCredentialStore",
    "PasswordHasher",
    "SqliteCredentialStore",
    "User",
    "UserId",
]
