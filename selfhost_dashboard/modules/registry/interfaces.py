"""App registry interfaces following Black Box Design principles."""
import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import List, Optional, Protocol

from ..errors import InvalidInput

APP_ID_PATTERN = re.compile(r"^[a-z-]+$")


@dataclass(frozen=True)
class AppEntry:
    """An installed application as shown on the dashboard."""
    id: str
    display_name: str
    icon_path: str
    launch_target: str


class AppRegistry(Protocol):
    """Protocol for app registries - allows swappable catalog backends."""

    async def list_apps(self) -> List[AppEntry]:
        """
        Enumerate installed applications.

        Returns a fresh list on every call. Order is stable while the
        underlying catalog does not change.

        Raises:
            RegistryUnavailable: the catalog cannot be read
        """
        ...

    def resolve_icon(self, relative_path: str) -> Optional[Path]:
        """
        Map an icon path below the icon prefix to a file.

        Returns:
            Path to an existing file, or None

        Raises:
            InvalidInput: the path tries to leave the icon root
        """
        ...


def validate_app_id(app_id: str) -> str:
    """App ids are lowercase ASCII letters and dashes."""
    if not isinstance(app_id, str) or not APP_ID_PATTERN.match(app_id):
        raise InvalidInput(f"invalid application name '{app_id}'")
    return app_id


def safe_resource_path(value: str) -> str:
    """
    Reject paths that could escape the directory they are joined to.

    Raises:
        InvalidInput: absolute paths, NUL bytes or any ``..`` segment
    """
    if not value or value.startswith("/") or "\\" in value or "\x00" in value:
        raise InvalidInput("directory traversal is not allowed")
    if ".." in PurePosixPath(value).parts:
        raise InvalidInput("directory traversal is not allowed")
    return value
