"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from taskboard.services._shared.dto import UNSET

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for member registration.

    :param email: Login email (normalized to lowercase by the model).
    :type email: str
    :param password: Raw password; hashed before it reaches the repository.
    :type password: str
    :param username: Public username.
    :type username: str
    :param full_name: Optional real name.
    :type full_name: str | None
    """

    email: str
    password: str
    username: str
    full_name: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: Login email.
    :type email: str
    :param password: Raw password.
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Partial profile update.

    Every field defaults to :data:`~taskboard.services._shared.dto.UNSET`,
    meaning "leave untouched". ``full_name=None`` clears the name; an empty
    ``password`` is ignored.

    :param email: New email.
    :param username: New username.
    :param full_name: New full name, or ``None`` to clear it.
    :param password: New raw password (at least 8 characters).
    """

    email: Any = UNSET
    username: Any = UNSET
    full_name: Any = UNSET
    password: Any = UNSET


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class MemberOut:
    """
    Output DTO representing public-safe member data.

    :param id: Member identifier.
    :type id: UUID
    :param email: Email address.
    :type email: str
    :param username: Username.
    :type username: str
    :param full_name: Optional full name.
    :type full_name: str | None
    :param created_at: Registration instant.
    :type created_at: datetime
    :param updated_at: Last profile change.
    :type updated_at: datetime
    """

    id: UUID
    email: str
    username: str
    full_name: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Result of a successful login.

    :param access_token: Short-lived bearer token.
    :type access_token: str
    :param refresh_token: Long-lived token used to obtain new access tokens.
    :type refresh_token: str
    :param expires_in: Access token lifetime in seconds.
    :type expires_in: int
    :param member: Authenticated member.
    :type member: MemberOut
    """

    access_token: str
    refresh_token: str
    expires_in: int
    member: MemberOut


@dataclass(frozen=True, slots=True)
class RefreshOut:
    """
    Result of a refresh.

    :param access_token: New access token.
    :type access_token: str
    :param expires_in: Access token lifetime in seconds.
    :type expires_in: int
    :param member: Member as currently stored.
    :type member: MemberOut
    :param refresh_token: Replacement refresh token, only when rotation is on.
    :type refresh_token: str | None
    """

    access_token: str
    expires_in: int
    member: MemberOut
    refresh_token: str | None = None


@dataclass(frozen=True, slots=True)
class AuthenticatedMember:
    """
    Identity established from a verified access token.

    Only built by :meth:`IdentityService.authenticate`; resource services
    receive ``id`` as their ``actor_id``.
    """

    id: UUID
    email: str
    username: str
