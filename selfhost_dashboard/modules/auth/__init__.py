"""
Auth Module - Black Box Interface

Purpose: Signup, login and logout on top of a credential store
Interface: signup(), login(), logout(), needs_bootstrap()
Hidden: Bootstrap rule, failure collapsing, session wiring

Works unchanged against any CredentialStore implementation.
"""

from .service import AuthService

__all__ = ["AuthService"]
