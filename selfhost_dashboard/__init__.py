"""
Selfhost Dashboard - Launcher for locally installed web applications

The first visitor signs up as the dashboard owner, logs in, and gets a
catalog of installed apps to open.

Architecture:
- Each module is self-contained with clear interfaces
- Providers (credential store, app registry) have mock and real variants
- The dashboard facade is the only surface the HTTP layer touches

Modules:
- credentials: Password hashing and user persistence
- storage: SQLite database for the real backend
- registry: Installed application catalog
- session: Login session lifecycle
- auth: Signup, login and logout orchestration
- dashboard: Facade and factory
- api: HTTP request/response models
"""

__version__ = "0.3.0"
