"""Credential store interfaces following Black Box Design principles."""
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from ..errors import InvalidInput

UserId = str

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{1,64}$")


@dataclass(frozen=True)
class User:
    """Stored user record. The hash is kept out of repr so it never lands in logs."""
    username: str
    password_hash: str = field(repr=False)
    created_at: datetime


class CredentialStore(Protocol):
    """Protocol for credential stores - allows swappable backends."""

    async def create_user(self, username: str, password: str, *, bootstrap: bool = True) -> UserId:
        """
        Hash the password and persist a new user.

        Args:
            username: Case-sensitive unique user name
            password: Plaintext password, hashed before storage
            bootstrap: Reject the insert when any user already exists

        Returns:
            The new user's id (its username)

        Raises:
            BootstrapClosed: bootstrap is set and a user already exists
            AlreadyExists: the username is taken
            InvalidInput: malformed username or empty password
            StoreUnavailable: the backend failed or timed out
        """
        ...

    async def verify_credentials(self, username: str, password: str) -> bool:
        """
        Check a password in constant time.

        Returns False, not an error, for unknown users.
        """
        ...

    async def user_exists_any(self) -> bool:
        """Return True once any user has been created."""
        ...


def validate_username(username: str) -> str:
    if not isinstance(username, str) or not USERNAME_PATTERN.match(username):
        raise InvalidInput("user name contains invalid characters")
    return username


def validate_password(password: str) -> str:
    if not isinstance(password, str) or not password:
        raise InvalidInput("password must not be empty")
    return password
