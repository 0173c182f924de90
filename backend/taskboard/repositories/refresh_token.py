"""Refresh-token repository: lookups by digest, revocation and sweeping."""

from __future__ import annotations

from datetime import datetime
from typing import cast
from uuid import UUID

from sqlalchemy import CursorResult, delete, false, func, or_, select, true, update

from taskboard.models.refresh_token import RefreshToken
from taskboard.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken`.

    Rows are addressed by ``token_hash``; the encoded token never reaches the
    database. Bulk statements return the affected row count.
    """

    model = RefreshToken

    def _updatable_fields(self):
        return {"revoked", "revoked_at"}

    def get_active(self, token_hash: str, *, now: datetime) -> RefreshToken | None:
        """Return the record when it exists, is not revoked and has not expired.

        :param token_hash: SHA-256 hex digest of the refresh token.
        :type token_hash: str
        :param now: Reference instant for the expiry check.
        :type now: datetime
        :rtype: RefreshToken | None
        """
        stmt = select(RefreshToken).where(
            RefreshToken.token_hash == token_hash,
            RefreshToken.revoked == false(),
            RefreshToken.expires_at > now,
        )
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def revoke(self, token_hash: str, *, now: datetime) -> int:
        """Mark one token revoked at ``now``; returns ``0`` when unknown or already revoked."""
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token_hash == token_hash, RefreshToken.revoked == false())
            .values(revoked=True, revoked_at=now)
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return int(result.rowcount or 0)

    def revoke_all_for_member(self, member_id: UUID, *, now: datetime) -> int:
        """Revoke every still-active token of ``member_id``."""
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.member_id == member_id, RefreshToken.revoked == false())
            .values(revoked=True, revoked_at=now)
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return int(result.rowcount or 0)

    def purge(self, *, now: datetime, revoked_before: datetime) -> int:
        """Delete expired tokens and tokens revoked before ``revoked_before``.

        Rows revoked without a timestamp fall back to ``created_at``.

        :param now: Tokens expiring before this instant are removed.
        :type now: datetime
        :param revoked_before: Tokens revoked earlier than this are removed.
        :type revoked_before: datetime
        :returns: Number of deleted rows.
        :rtype: int
        """
        revoked_at = func.coalesce(RefreshToken.revoked_at, RefreshToken.created_at)
        stmt = (
            delete(RefreshToken)
            .where(
                or_(
                    RefreshToken.expires_at < now,
                    (RefreshToken.revoked == true()) & (revoked_at < revoked_before),
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return int(result.rowcount or 0)

    def count_active_for_member(self, member_id: UUID, *, now: datetime) -> int:
        return self._count(
            RefreshToken.member_id == member_id,
            RefreshToken.revoked == false(),
            RefreshToken.expires_at > now,
        )
