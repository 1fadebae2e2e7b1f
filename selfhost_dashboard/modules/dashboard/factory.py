"""
Dashboard Factory following Black Box Design principles.

This factory:
- Constructs mock or real providers based on configuration
- Wires dependencies together
- Returns only the dashboard facade (hiding implementation)
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

from ...config.provider import ConfigProvider, RegistryConfig, StoreConfig
from ..auth import AuthService
from ..credentials import (
    CredentialStore,
    InMemoryCredentialStore,
    PasswordHasher,
    SqliteCredentialStore,
)
from ..registry import (
    AppEntry,
    AppRegistry,
    FilesystemAppRegistry,
    StaticAppRegistry,
    default_mock_apps,
    load_mock_apps,
)
from ..registry.mock import DEFAULT_MOCK_APPS
from ..session import SessionModule
from ..storage import StorageModule
from .facade import Dashboard

logger = logging.getLogger(__name__)


class DashboardFactory:
    """
    Factory for building the dashboard stack.

    This is the composition root and the only place that names concrete
    provider classes.
    """

    @staticmethod
    async def build(config_provider: ConfigProvider) -> Dashboard:
        """
        Build the complete dashboard stack.

        Args:
            config_provider: Configuration provider

        Returns:
            Dashboard facade (hides all implementation details)
        """
        store_config = config_provider.get_store_config()
        registry_config = config_provider.get_registry_config()
        session_config = config_provider.get_session_config()

        credential_store = await DashboardFactory._build_store(store_config)
        registry = DashboardFactory._build_registry(registry_config)

        session_module = SessionModule(
            default_ttl=session_config.ttl,
            single_session=session_config.single_session,
        )

        return Dashboard(
            AuthService(credential_store, session_module),
            session_module,
            registry,
        )

    @staticmethod
    async def _build_store(config: StoreConfig) -> CredentialStore:
        hasher = PasswordHasher(rounds=config.bcrypt_rounds)

        if config.backend == "real":
            logger.info(f"Building SQLite credential store at {config.database_path}")
            storage = StorageModule(config.database_path, busy_timeout=config.timeout)
            await storage.initialize()
            return SqliteCredentialStore(storage, hasher, timeout=config.timeout)

        logger.info("Building in-memory credential store")
        return InMemoryCredentialStore(hasher)

    @staticmethod
    def _build_registry(config: RegistryConfig) -> AppRegistry:
        if config.backend == "real":
            logger.info(f"Building filesystem app registry from {config.apps_dir}")
            return FilesystemAppRegistry(
                apps_dir=config.apps_dir,
                icons_dir=config.icons_dir,
                icon_url_prefix=config.icon_url_prefix,
                timeout=config.timeout,
            )

        if config.mock_apps_file:
            logger.info(f"Building mock app registry from {config.mock_apps_file}")
            return StaticAppRegistry(
                load_mock_apps(config.mock_apps_file, icon_url_prefix=config.icon_url_prefix)
            )

        logger.info("Building mock app registry with default apps")
        return StaticAppRegistry(default_mock_apps(config.icon_url_prefix))

    @staticmethod
    def build_for_testing(
        apps: Optional[Iterable[AppEntry]] = None,
        credential_store: Optional[CredentialStore] = None,
        registry: Optional[AppRegistry] = None,
        session_ttl: Optional[int] = None,
        single_session: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
        bcrypt_rounds: int = 4,
    ) -> Dashboard:
        """
        Build a dashboard on mock providers.

        Args:
            apps: Catalog for the static registry
            credential_store: Store to use instead of the in-memory one
            registry: Registry to use instead of the static one
            session_ttl: Session lifetime in seconds, None for no expiry
            single_session: Revoke earlier sessions on login
            clock: Session clock
            bcrypt_rounds: Hash cost, kept low for fast tests

        Returns:
            Dashboard for testing
        """
        if credential_store is None:
            credential_store = InMemoryCredentialStore(PasswordHasher(rounds=bcrypt_rounds))
        if registry is None:
            registry = StaticAppRegistry(DEFAULT_MOCK_APPS if apps is None else apps)

        session_module = SessionModule(
            default_ttl=session_ttl,
            single_session=single_session,
            clock=clock,
        )
        return Dashboard(
            AuthService(credential_store, session_module),
            session_module,
            registry,
        )
