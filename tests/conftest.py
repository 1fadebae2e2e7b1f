"""
Shared pytest fixtures for dashboard tests.

This module provides common fixtures including:
- FakeClock: controllable time source for session expiry
- Credential stores for both backends (in-memory and SQLite)
- App descriptor trees for the filesystem registry
"""

import os
import sys
from datetime import UTC, datetime, timedelta
from typing import Optional

import pytest
import pytest_asyncio

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from selfhost_dashboard.modules.credentials import (
    InMemoryCredentialStore,
    PasswordHasher,
    SqliteCredentialStore,
)
from selfhost_dashboard.modules.dashboard import DashboardFactory
from selfhost_dashboard.modules.registry import AppEntry
from selfhost_dashboard.modules.storage import StorageModule

# Lowest cost bcrypt accepts, keeps hashing out of test runtime
TEST_ROUNDS = 4

CALC = AppEntry(
    id="calc",
    display_name="Calculator",
    icon_path="/icons/calc.png",
    launch_target="calc.bin",
)


# =============================================================================
# Time
# =============================================================================

class FakeClock:
    """Clock returning a fixed time until advanced."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


# =============================================================================
# Credential stores
# =============================================================================

@pytest.fixture
def hasher():
    return PasswordHasher(rounds=TEST_ROUNDS)


@pytest.fixture
def memory_store(hasher):
    return InMemoryCredentialStore(hasher)


@pytest_asyncio.fixture
async def storage(tmp_path):
    storage = StorageModule(str(tmp_path / "db" / "dashboard.db"), busy_timeout=30)
    await storage.initialize()
    return storage


@pytest_asyncio.fixture
async def sqlite_store(storage, hasher):
    return SqliteCredentialStore(storage, hasher, timeout=30)


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def credential_store(request, hasher, tmp_path):
    """Each test using this runs once per backend."""
    if request.param == "memory":
        return InMemoryCredentialStore(hasher)

    storage = StorageModule(str(tmp_path / "param.db"), busy_timeout=30)
    await storage.initialize()
    return SqliteCredentialStore(storage, hasher, timeout=30)


# =============================================================================
# Dashboard
# =============================================================================

@pytest.fixture
def dashboard():
    """Dashboard on mock providers seeded with the calculator app."""
    return DashboardFactory.build_for_testing(apps=[CALC])


@pytest.fixture
def any_dashboard(credential_store):
    """Dashboard running on each credential backend."""
    return DashboardFactory.build_for_testing(apps=[CALC], credential_store=credential_store)


# =============================================================================
# Filesystem registry
# =============================================================================

@pytest.fixture
def app_tree(tmp_path):
    """
    Descriptor and icon directories:

        apps/calc.yaml, apps/notes.yaml   valid
        apps/Bad_Name.yaml                invalid id
        apps/broken.yaml                  no launch_target
        apps/evil.yaml                    icon escapes the icon root
        apps/README.txt                   not a descriptor
        icons/calc.png
    """
    apps_dir = tmp_path / "apps"
    icons_dir = tmp_path / "icons"
    apps_dir.mkdir()
    icons_dir.mkdir()

    (apps_dir / "notes.yaml").write_text(
        "name: Notes\nicon: notes.svg\nlaunch_target: https://notes.lan/\n"
    )
    (apps_dir / "calc.yaml").write_text("name: Calculator\nlaunch_target: calc.bin\n")
    (apps_dir / "Bad_Name.yaml").write_text("name: Bad\nlaunch_target: bad.bin\n")
    (apps_dir / "broken.yaml").write_text("name: Broken\n")
    (apps_dir / "evil.yaml").write_text("name: Evil\nicon: ../secret.png\nlaunch_target: x\n")
    (apps_dir / "README.txt").write_text("not an app")
    (icons_dir / "calc.png").write_bytes(b"\x89PNG fake")

    return apps_dir, icons_dir


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
