"""Persisted refresh-token records (digest only)."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, UniqueConstraint, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.core.extensions import db

from .base import PKMixin, ReprMixin, utcnow


class RefreshToken(PKMixin, ReprMixin, db.Model):
    """
    One row per issued refresh token.

    ``token_hash`` is the SHA-256 hex digest of the encoded token. A row is
    usable while ``revoked`` is false and ``expires_at`` lies in the future.
    ``revoked_at`` records when it was revoked and drives the retention sweep.
    """

    __tablename__ = "refresh_tokens"

    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    revoked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("token_hash", name="uq_refresh_tokens_token_hash"),
        Index("ix_refresh_tokens_member_id", "member_id"),
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )
