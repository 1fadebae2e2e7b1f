"""
Filesystem app registry.

Each installed application ships one YAML descriptor in the apps
directory, named after the app id:

    # /etc/selfhost-dashboard/apps/calc.yaml
    name: Calculator
    icon: calc.png
    launch_target: https://calc.example.lan/

``icon`` is relative to the icons directory and defaults to ``<id>.png``.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import yaml

from ..errors import InvalidInput, RegistryUnavailable
from .interfaces import AppEntry, safe_resource_path, validate_app_id

logger = logging.getLogger(__name__)


class FilesystemAppRegistry:
    """Scans a directory of app descriptors on every call."""

    def __init__(
        self,
        apps_dir: str = "/etc/selfhost-dashboard/apps",
        icons_dir: str = "/usr/share/selfhost-dashboard/icons",
        icon_url_prefix: str = "/icons",
        timeout: float = 5.0,
    ):
        """
        Initialize registry.

        Args:
            apps_dir: Directory holding ``<id>.yaml`` descriptors
            icons_dir: Root that icon paths are resolved against
            icon_url_prefix: Logical prefix put in front of icon paths
            timeout: Upper bound in seconds for one scan
        """
        self.apps_dir = Path(apps_dir)
        self.icons_dir = Path(icons_dir)
        self.icon_url_prefix = icon_url_prefix.rstrip("/")
        self.timeout = timeout

    async def list_apps(self) -> List[AppEntry]:
        try:
            return await asyncio.wait_for(asyncio.to_thread(self._scan), self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Timed out scanning {self.apps_dir}")
            raise RegistryUnavailable() from e
        except OSError as e:
            logger.error(f"Failed to read apps directory {self.apps_dir}: {e}")
            raise RegistryUnavailable() from e

    def resolve_icon(self, relative_path: str) -> Optional[Path]:
        # Absolute input would replace the root under Path /, so validate first
        safe_resource_path(relative_path)

        try:
            root = self.icons_dir.resolve()
            candidate = (root / relative_path).resolve()
        except ValueError as e:
            raise InvalidInput("invalid icon path") from e
        if not candidate.is_relative_to(root):
            # A symlink pointing outside the icon root
            raise InvalidInput("directory traversal is not allowed")

        if not candidate.is_file():
            logger.debug(f"Icon not found: {relative_path}")
            return None
        return candidate

    def _scan(self) -> List[AppEntry]:
        descriptors = sorted(
            (path for path in self.apps_dir.iterdir() if path.suffix == ".yaml"),
            key=lambda path: path.stem,
        )

        apps = []
        for path in descriptors:
            entry = self._load_descriptor(path)
            if entry:
                apps.append(entry)
        return apps

    def _load_descriptor(self, path: Path) -> Optional[AppEntry]:
        """Parse one descriptor, returning None (and logging) when it is unusable."""
        try:
            app_id = validate_app_id(path.stem)
        except InvalidInput as e:
            logger.warning(f"Skipping {path.name}: {e}")
            return None

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Skipping {path.name}: failed to load descriptor: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Skipping {path.name}: descriptor is not a mapping")
            return None

        launch_target = data.get("launch_target")
        if not isinstance(launch_target, str) or not launch_target:
            logger.warning(f"Skipping {path.name}: missing launch_target")
            return None

        icon = str(data.get("icon") or f"{app_id}.png")
        try:
            safe_resource_path(icon)
        except InvalidInput:
            logger.warning(f"Skipping {path.name}: icon path escapes the icon root")
            return None

        return AppEntry(
            id=app_id,
            display_name=str(data.get("name") or app_id),
            icon_path=f"{self.icon_url_prefix}/{icon}",
            launch_target=launch_target,
        )
