"""DTOs for MembershipService."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class JoinBoardIn:
    """
    Input DTO for joining a board by its handle.

    :param unique_slug: Board join handle.
    :type unique_slug: str
    :param password: Board join password.
    :type password: str
    :param member_id: Member asking to join.
    :type member_id: UUID
    """

    unique_slug: str
    password: str
    member_id: UUID


@dataclass(frozen=True, slots=True)
class BoardMemberOut:
    """
    One member of a board as seen by the other members.

    :param member_id: Member identifier.
    :type member_id: UUID
    :param username: Public username.
    :type username: str
    :param full_name: Optional display name.
    :type full_name: str | None
    :param role: ``owner``, ``moderator`` or ``member``.
    :type role: str
    :param joined_at: When the membership was created.
    :type joined_at: datetime
    """

    member_id: UUID
    username: str
    full_name: str | None
    role: str
    joined_at: datetime


@dataclass(frozen=True, slots=True)
class JoinBoardOut:
    """Board joined and the role granted."""

    board_id: UUID
    name: str
    unique_slug: str
    role: str
