"""
Dashboard Module - Black Box Interface

Purpose: The single entry point the HTTP layer binds to
Interface: signup(), login(), logout(), open(), open_app(), resolve_icon()
Hidden: Which providers back auth and the app catalog
"""

from .facade import Dashboard
from .factory import DashboardFactory

__all__ = ["Dashboard", "DashboardFactory"]
