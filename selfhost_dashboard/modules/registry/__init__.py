"""
Registry Module - Black Box Interface

Purpose: Enumerate installed applications for the dashboard
Interface: list_apps(), resolve_icon()
Hidden: Descriptor format, directory layout, icon path joining

Pure read-side catalog data. The registry never authenticates; callers
check the session first.
"""

from .filesystem import FilesystemAppRegistry
from .interfaces import AppEntry, AppRegistry, safe_resource_path, validate_app_id
from .mock import StaticAppRegistry, default_mock_apps, load_mock_apps

__all__ = [
    "AppEntry",
    "AppRegistry",
    "FilesystemAppRegistry",
    "StaticAppRegistry",
    "default_mock_apps",
    "load_mock_apps",
    "safe_resource_path",
    "validate_app_id",
]
