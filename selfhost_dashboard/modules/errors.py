"""
Error taxonomy shared by every dashboard module.

Authentication failures carry a fixed message so callers cannot tell
"no such user" from "wrong password", or a revoked token from one that
was never issued. Unavailable errors are transient and safe to retry.
"""

from typing import Optional


class DashboardError(Exception):
    """Base exception for the dashboard core"""

    retryable = False
    default_message = "Dashboard error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class AlreadyExists(DashboardError):
    """Raised when a username is already taken"""

    default_message = "User already exists"


class BootstrapClosed(DashboardError):
    """Raised when signing up after the first user has been created"""

    default_message = "Signup is closed"


class InvalidInput(DashboardError):
    """Raised when a username, password or resource path is malformed"""

    default_message = "Invalid input"


class AppNotFound(DashboardError):
    """Raised when an app id is not in the registry"""

    default_message = "Application not found"


class AuthenticationError(DashboardError):
    """Base for failures that must not reveal their cause"""

    default_message = "Not authorized"

    def __init__(self):
        super().__init__(self.default_message)


class InvalidCredentials(AuthenticationError):
    pass


class InvalidSession(AuthenticationError):
    pass


class Unauthorized(AuthenticationError):
    pass


class ServiceUnavailable(DashboardError):
    """Base for transient backend failures"""

    retryable = True
    default_message = "Service unavailable"


class StoreUnavailable(ServiceUnavailable):
    default_message = "Credential store unavailable"


class RegistryUnavailable(ServiceUnavailable):
    default_message = "App registry unavailable"
