"""Identity service: members, credentials and tokens."""

from __future__ import annotations

from .dto import (
    AuthenticatedMember,
    LoginIn,
    LoginOut,
    MemberOut,
    ProfileUpdateIn,
    RefreshOut,
    RegisterIn,
)
from .service import MIN_PASSWORD_LENGTH, IdentityService

__all__ = [
    "IdentityService",
    "MIN_PASSWORD_LENGTH",
    "AuthenticatedMember",
    "LoginIn",
    "LoginOut",
    "MemberOut",
    "ProfileUpdateIn",
    "RefreshOut",
    "RegisterIn",
]
