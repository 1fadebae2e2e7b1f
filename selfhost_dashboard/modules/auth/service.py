"""
Authentication service orchestrating the credential store and sessions.

The first successful signup bootstraps the dashboard; every later
signup is rejected. The store's create_user is the only atomic gate for
that rule, the check here is a fast path.
"""

import logging

from ..credentials import CredentialStore
from ..errors import BootstrapClosed, DashboardError, InvalidCredentials
from ..session import Session, SessionModule

logger = logging.getLogger(__name__)


class AuthService:
    """Signup and login for the single dashboard administrator."""

    def __init__(self, credential_store: CredentialStore, session_module: SessionModule):
        """
        Initialize with injected dependencies.

        Args:
            credential_store: Any CredentialStore implementation
            session_module: Session table issuing tokens
        """
        self.credentials = credential_store
        self.sessions = session_module

    async def signup(self, username: str, password: str) -> Session:
        """
        Create the first user and log them in.

        Raises:
            BootstrapClosed: a user already exists
            AlreadyExists: the username is taken
            InvalidInput: malformed username or empty password
            StoreUnavailable: the store failed
        """
        if await self.credentials.user_exists_any():
            logger.warning("Signup rejected, dashboard already bootstrapped")
            raise BootstrapClosed()

        try:
            await self.credentials.create_user(username, password, bootstrap=True)
        except BootstrapClosed:
            logger.warning("Signup rejected, another signup won the race")
            raise

        logger.info(f"Dashboard bootstrapped by {username}")
        return self.sessions.create_session(username)

    async def login(self, username: str, password: str) -> Session:
        """
        Verify credentials and open a session.

        Raises:
            InvalidCredentials: unknown user, wrong password or store failure
        """
        try:
            valid = await self.credentials.verify_credentials(username, password)
        except DashboardError as e:
            logger.error(f"Failed to verify credentials: {e}")
            raise InvalidCredentials() from e

        if not valid:
            logger.info("Login failed")
            raise InvalidCredentials()

        logger.info(f"User {username} logged in")
        return self.sessions.create_session(username)

    async def logout(self, token: str) -> None:
        """Revoke a session. Never fails."""
        self.sessions.revoke(token)

    async def needs_bootstrap(self) -> bool:
        """True while no user has signed up yet."""
        return not await self.credentials.user_exists_any()
