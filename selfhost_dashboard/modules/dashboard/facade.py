"""
Dashboard facade following Black Box Design principles.

This module provides:
- One stable, backend-agnostic surface for the HTTP layer
- Session checks in front of every catalog read
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..auth import AuthService
from ..errors import AppNotFound, InvalidSession, Unauthorized
from ..registry import AppEntry, AppRegistry, validate_app_id
from ..session import Session, SessionModule

logger = logging.getLogger(__name__)


class Dashboard:
    """
    Composition of auth, sessions and the app registry.

    Holds no state of its own; every call is forwarded to the injected
    components.
    """

    def __init__(self, auth_service: AuthService, session_module: SessionModule, registry: AppRegistry):
        self._auth = auth_service
        self._sessions = session_module
        self._registry = registry

    async def signup(self, username: str, password: str) -> Session:
        return await self._auth.signup(username, password)

    async def login(self, username: str, password: str) -> Session:
        return await self._auth.login(username, password)

    async def logout(self, token: str) -> None:
        await self._auth.logout(token)

    async def needs_bootstrap(self) -> bool:
        return await self._auth.needs_bootstrap()

    def authenticate(self, token: str) -> str:
        """
        Resolve a token to its username.

        Raises:
            Unauthorized: the session is missing, revoked or expired
        """
        try:
            return self._sessions.validate(token)
        except InvalidSession as e:
            raise Unauthorized() from e

    async def open(self, token: str) -> List[AppEntry]:
        """
        List installed apps for an authenticated caller.

        Raises:
            Unauthorized: invalid session
            RegistryUnavailable: the catalog cannot be read
        """
        self.authenticate(token)
        return await self._registry.list_apps()

    async def open_app(self, token: str, app_id: str) -> AppEntry:
        """
        Look up one app so the caller can hand its launch target to a launcher.

        Raises:
            Unauthorized: invalid session
            InvalidInput: malformed app id
            AppNotFound: no such app
        """
        username = self.authenticate(token)
        validate_app_id(app_id)

        for app in await self._registry.list_apps():
            if app.id == app_id:
                logger.info(f"User {username} opened {app_id}")
                return app

        logger.warning(f"Application not found: {app_id}")
        raise AppNotFound()

    def resolve_icon(self, relative_path: str) -> Optional[Path]:
        return self._registry.resolve_icon(relative_path)

    def cleanup_expired_sessions(self) -> int:
        return self._sessions.cleanup_expired()
