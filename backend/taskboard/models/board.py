"""Board aggregate: boards, their memberships and star markers."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from taskboard.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin, utcnow

if TYPE_CHECKING:
    from .board_list import BoardList
    from .member import Member

# --- Domain Enums ---
ROLE_OWNER = "owner"
ROLE_MODERATOR = "moderator"
ROLE_MEMBER = "member"

BoardRole = Enum(ROLE_OWNER, ROLE_MODERATOR, ROLE_MEMBER, name="board_role")


class Board(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Top-level shared workspace.

    Fields
    ------
    name : str
        Display name.
    unique_slug : str
        Join handle, lowercase alphanumerics and hyphens (3-50 chars).
    description : str | None
        Optional free text.
    password_hash : str
        Hash of the join password.
    creator_id : UUID
        Member who created the board.

    Deleting a board removes its lists (and their cards), memberships and
    stars.
    """

    __tablename__ = "boards"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    unique_slug: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    creator_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("unique_slug", name="uq_boards_unique_slug"),
        Index("ix_boards_creator_id", "creator_id"),
    )

    # Relationships
    memberships: Mapped[list[BoardMember]] = relationship(
        "BoardMember",
        back_populates="board",
        cascade="all, delete-orphan",
    )
    stars: Mapped[list[StarredBoard]] = relationship(
        "StarredBoard",
        back_populates="board",
        cascade="all, delete-orphan",
    )
    lists: Mapped[list[BoardList]] = relationship(
        "BoardList",
        back_populates="board",
        cascade="all, delete-orphan",
    )

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Board name is required.")
        return value.strip()


class BoardMember(PKMixin, ReprMixin, db.Model):
    """Role-bearing relation between a member and a board."""

    __tablename__ = "board_members"

    board_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("boards.id", ondelete="CASCADE"), nullable=False
    )
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(BoardRole, nullable=False, default=ROLE_MEMBER)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (
        UniqueConstraint("board_id", "member_id", name="uq_board_members_board_id_member_id"),
        Index("ix_board_members_member_id", "member_id"),
    )

    board: Mapped[Board] = relationship("Board", back_populates="memberships")
    member: Mapped[Member] = relationship("Member", lazy="joined")


class StarredBoard(PKMixin, ReprMixin, db.Model):
    """Favorite marker; carries no authorization weight."""

    __tablename__ = "starred_boards"

    board_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("boards.id", ondelete="CASCADE"), nullable=False
    )
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )
    starred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (
        UniqueConstraint("board_id", "member_id", name="uq_starred_boards_board_id_member_id"),
    )

    board: Mapped[Board] = relationship("Board", back_populates="stars")
