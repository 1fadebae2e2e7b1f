"""
Dashboard wire models.

These models define the JSON bodies exchanged with the HTTP layer.
Core types are converted here so the core never depends on pydantic.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..registry import AppEntry
from ..session import Session

# Request Models (API Input)


class SignupRequest(BaseModel):
    """Request to create the first dashboard user."""

    username: str = Field(..., description="Case-sensitive user name")
    password: str = Field(..., description="Plaintext password, hashed server side")


class LoginRequest(BaseModel):
    """Request to open a session."""

    username: str
    password: str


# Response Models (API Output)


class SessionResponse(BaseModel):
    """A freshly issued session."""

    username: str
    token: str = Field(..., description="Opaque bearer token")
    expires_at: Optional[datetime] = Field(None, description="None means no expiry")

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        return cls(
            username=session.username,
            token=session.token,
            expires_at=session.expires_at,
        )


class AppResponse(BaseModel):
    """One dashboard tile."""

    id: str
    display_name: str
    icon_path: str
    open_url: str = Field(..., description="Dashboard URL that opens the app")

    @classmethod
    def from_entry(cls, entry: AppEntry, prefix: str = "") -> "AppResponse":
        return cls(
            id=entry.id,
            display_name=entry.display_name,
            icon_path=entry.icon_path,
            open_url=f"{prefix}/open_app/{entry.id}",
        )


class AppListResponse(BaseModel):
    apps: List[AppResponse]


class LaunchResponse(BaseModel):
    """Launch target for the external launcher to act on."""

    id: str
    launch_target: str


class BootstrapStatus(BaseModel):
    needs_signup: bool


class ErrorResponse(BaseModel):
    detail: str
    retryable: bool = False
