"""Member repository for identity lookups and uniqueness checks."""

from __future__ import annotations

from typing import cast
from uuid import UUID

from sqlalchemy import select

from taskboard.models.member import Member
from taskboard.repositories.base import BaseRepository


def normalize_email(email: str) -> str:
    """Return the canonical (trimmed, lower-cased) form of an email."""
    return email.strip().lower()


class MemberRepository(BaseRepository[Member]):
    """Persistence-only repository for :class:`Member`.

    It never issues tokens nor hashes passwords; it only stores what the
    identity service hands over.
    """

    model = Member

    # ---------------------------- Whitelists ----------------------------

    def _updatable_fields(self):
        return {"email", "username", "full_name", "password_hash"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> Member | None:
        """Fetch a member by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: Member instance or ``None`` when not found.
        :rtype: Member | None
        """
        stmt = select(Member).where(Member.email == normalize_email(email))
        return cast(Member | None, self.session.execute(stmt).scalars().first())

    def email_taken(self, email: str, *, exclude_id: UUID | None = None) -> bool:
        """Return ``True`` when another member already uses ``email``.

        :param email: Candidate email (normalised before comparison).
        :type email: str
        :param exclude_id: Member whose own row must not count as a clash.
        :type exclude_id: UUID | None
        :rtype: bool
        """
        stmt = select(Member.id).where(Member.email == normalize_email(email))
        if exclude_id is not None:
            stmt = stmt.where(Member.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def username_taken(self, username: str, *, exclude_id: UUID | None = None) -> bool:
        """Return ``True`` when another member already uses ``username``."""
        stmt = select(Member.id).where(Member.username == username.strip())
        if exclude_id is not None:
            stmt = stmt.where(Member.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None
