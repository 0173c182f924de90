"""Cards (task items) inside a list."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Float, ForeignKey, Index, String, Text, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from taskboard.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .board_list import BoardList


class Card(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Task item; ordered inside its list exactly like lists inside a board."""

    __tablename__ = "cards"

    list_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("lists.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    position: Mapped[float] = mapped_column(Float, nullable=False)
    archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    created_by: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        Index("ix_cards_list_id_position", "list_id", "position"),
        Index("ix_cards_created_by", "created_by"),
    )

    board_list: Mapped[BoardList] = relationship("BoardList", back_populates="cards")

    @validates("title")
    def _normalize_title(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Card title is required.")
        return value.strip()
