"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol

BACKENDS = ("mock", "real")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _backend(name: str, fallback: str) -> str:
    backend = os.getenv(name, fallback).lower()
    if backend not in BACKENDS:
        raise ValueError(
            f"{name} must be one of {', '.join(BACKENDS)}, got '{backend}'"
        )
    return backend


@dataclass
class StoreConfig:
    """Credential store configuration."""
    backend: str
    database_path: str
    timeout: float
    bcrypt_rounds: int


@dataclass
class RegistryConfig:
    """App registry configuration."""
    backend: str
    apps_dir: str
    icons_dir: str
    icon_url_prefix: str
    timeout: float
    mock_apps_file: Optional[str]


@dataclass
class SessionConfig:
    """Session configuration."""
    ttl: Optional[int]
    single_session: bool
    sweep_interval: int


@dataclass
class APIConfig:
    """API configuration."""
    host: str
    port: int
    url_prefix: str
    log_level: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_store_config(self) -> StoreConfig:
        """Get credential store configuration."""
        ...

    def get_registry_config(self) -> RegistryConfig:
        """Get app registry configuration."""
        ...

    def get_session_config(self) -> SessionConfig:
        """Get session configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...


class EnvConfigProvider:
    """
    Environment-based configuration provider.

    DASHBOARD_BACKEND selects mock or real providers for both the store and
    the registry; DASHBOARD_STORE_BACKEND and DASHBOARD_REGISTRY_BACKEND
    override it per provider.
    """

    def _default_backend(self) -> str:
        return _backend("DASHBOARD_BACKEND", "mock")

    def get_store_config(self) -> StoreConfig:
        """Get credential store configuration from environment variables."""
        rounds = int(os.getenv("DASHBOARD_BCRYPT_ROUNDS", "12"))
        if not 4 <= rounds <= 31:
            raise ValueError("DASHBOARD_BCRYPT_ROUNDS must be between 4 and 31")

        return StoreConfig(
            backend=_backend("DASHBOARD_STORE_BACKEND", self._default_backend()),
            database_path=os.getenv(
                "DASHBOARD_DB_PATH", "/var/lib/selfhost-dashboard/dashboard.db"
            ),
            timeout=float(os.getenv("DASHBOARD_STORE_TIMEOUT", "5")),
            bcrypt_rounds=rounds,
        )

    def get_registry_config(self) -> RegistryConfig:
        """Get app registry configuration from environment variables."""
        return RegistryConfig(
            backend=_backend("DASHBOARD_REGISTRY_BACKEND", self._default_backend()),
            apps_dir=os.getenv("DASHBOARD_APPS_DIR", "/etc/selfhost-dashboard/apps"),
            icons_dir=os.getenv("DASHBOARD_ICONS_DIR", "/usr/share/selfhost-dashboard/icons"),
            icon_url_prefix=os.getenv("URL_PREFIX", "").rstrip("/") + "/icons",
            timeout=float(os.getenv("DASHBOARD_REGISTRY_TIMEOUT", "5")),
            mock_apps_file=os.getenv("DASHBOARD_MOCK_APPS_FILE"),
        )

    def get_session_config(self) -> SessionConfig:
        """Get session configuration from environment variables."""
        # 0 disables expiry
        ttl = int(os.getenv("SESSION_TTL", "86400"))
        if ttl < 0:
            raise ValueError("SESSION_TTL must not be negative")

        sweep_interval = int(os.getenv("SESSION_SWEEP_INTERVAL", "300"))
        if sweep_interval < 0:
            raise ValueError("SESSION_SWEEP_INTERVAL must not be negative")

        return SessionConfig(
            ttl=ttl or None,
            single_session=_env_bool("SINGLE_SESSION"),
            sweep_interval=sweep_interval,
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            host=os.getenv("API_HOST", "127.0.0.1"),
            port=int(os.getenv("API_PORT", "8080")),
            url_prefix=os.getenv("URL_PREFIX", "").rstrip("/"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
