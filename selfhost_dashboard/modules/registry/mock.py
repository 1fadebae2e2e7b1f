"""Static app registry for development and tests."""

from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import yaml

from .interfaces import AppEntry, safe_resource_path, validate_app_id


def default_mock_apps(icon_url_prefix: str = "/icons") -> Tuple[AppEntry, ...]:
    """Built-in catalog, with icon paths under ``icon_url_prefix``."""
    prefix = icon_url_prefix.rstrip("/")
    return (
        AppEntry(
            id="calc",
            display_name="Calculator",
            icon_path=f"{prefix}/calc.png",
            launch_target="calc.bin",
        ),
        AppEntry(
            id="notes",
            display_name="Notes",
            icon_path=f"{prefix}/notes.png",
            launch_target="notes.bin",
        ),
    )


DEFAULT_MOCK_APPS = default_mock_apps()


class StaticAppRegistry:
    """Serves a fixed list of apps in the order given."""

    def __init__(self, apps: Iterable[AppEntry] = DEFAULT_MOCK_APPS):
        self._apps = tuple(apps)

        seen = set()
        for app in self._apps:
            if app.id in seen:
                raise ValueError(f"Duplicate app id: {app.id}")
            seen.add(app.id)

    async def list_apps(self) -> List[AppEntry]:
        return list(self._apps)

    def resolve_icon(self, relative_path: str) -> Optional[Path]:
        # Icon paths are synthetic here, nothing exists on disk
        safe_resource_path(relative_path)
        return None


def load_mock_apps(path: str, icon_url_prefix: str = "/icons") -> List[AppEntry]:
    """
    Load a mock catalog from a YAML list of app mappings.

    Each item needs ``id``, ``name`` and ``launch_target``; ``icon_path``
    defaults to ``<icon_url_prefix>/<id>.png``.
    """
    prefix = icon_url_prefix.rstrip("/")
    with open(path, "r") as f:
        items = yaml.safe_load(f) or []

    if not isinstance(items, list):
        raise ValueError(f"Mock apps file {path} must contain a list")

    apps = []
    for item in items:
        app_id = validate_app_id(item["id"])
        apps.append(
            AppEntry(
                id=app_id,
                display_name=item.get("name", app_id),
                icon_path=item.get("icon_path", f"{prefix}/{app_id}.png"),
                launch_target=item["launch_target"],
            )
        )
    return apps
