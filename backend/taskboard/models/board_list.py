"""Ordered lists (columns) inside a board."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Float, ForeignKey, Index, String, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from taskboard.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .board import Board
    from .card import Card


class BoardList(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Ordered column of cards.

    ``position`` is a gap-spaced float; it is not unique, readers break ties
    with ``created_at`` then ``id``. Archived lists are hidden from board
    details and ignored when computing the next position.
    """

    __tablename__ = "lists"

    board_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("boards.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    position: Mapped[float] = mapped_column(Float, nullable=False)
    archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    __table_args__ = (Index("ix_lists_board_id_position", "board_id", "position"),)

    board: Mapped[Board] = relationship("Board", back_populates="lists")
    cards: Mapped[list[Card]] = relationship(
        "Card",
        back_populates="board_list",
        cascade="all, delete-orphan",
    )

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("List name is required.")
        return value.strip()
