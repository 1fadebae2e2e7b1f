"""
Session Module - Black Box Interface

Purpose: Manage login session lifecycle
Interface: create_session(), validate(), revoke(), revoke_user(), cleanup_expired()
Hidden: Token format, session table, expiry checks

Sessions live in process memory whatever the credential backend is,
so they do not survive a restart.
"""

from .session import Session, SessionModule

__all__ = ["Session", "SessionModule"]
