from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """
    A freshly signed token and its lifetime.

    :param token: Encoded JWT.
    :type token: str
    :param expires_in: Seconds until expiry, as reported to clients.
    :type expires_in: int
    :param expires_at: Absolute expiry instant (UTC).
    :type expires_at: datetime
    """

    token: str
    expires_in: int
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """
    Verified claims of an access token.

    :param member_id: Subject of the token.
    :type member_id: UUID
    :param email: Email at issue time.
    :type email: str
    :param username: Username at issue time.
    :type username: str
    :param expires_at: Absolute expiry instant (UTC).
    :type expires_at: datetime
    """

    member_id: UUID
    email: str
    username: str
    expires_at: datetime


class TokenSubject(Protocol):
    """Anything that can be the subject of an access token."""

    id: UUID
    email: str
    username: str


class TokenProvider(Protocol):
    """Port for issuing and verifying access and refresh tokens."""

    def issue_access(self, member: TokenSubject) -> IssuedToken: ...

    def issue_refresh(self, member_id: UUID) -> IssuedToken: ...

    def validate_access(self, token: str) -> AccessClaims: ...

    def validate_refresh(self, token: str) -> UUID: ...

    def hash_token(self, token: str) -> str: ...
