"""
API Module - Black Box Interface

Purpose: Request and response models for the HTTP layer
Interface: pydantic models only
Hidden: Nothing, this is the wire contract
"""

from .models import (
    AppListResponse,
    AppResponse,
    BootstrapStatus,
    ErrorResponse,
    LaunchResponse,
    LoginRequest,
    SessionResponse,
    SignupRequest,
)

__all__ = [
    "AppListResponse",
    "AppResponse",
    "BootstrapStatus",
    "ErrorResponse",
    "LaunchResponse",
    "LoginRequest",
    "SessionResponse",
    "SignupRequest",
]
