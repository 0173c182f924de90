"""Card repository: ordered task items of a list."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import false, select

from taskboard.models.card import Card
from taskboard.repositories.base import BaseRepository


class CardRepository(BaseRepository[Card]):
    """Persistence-only repository for :class:`Card`."""

    model = Card

    def _updatable_fields(self):
        return {"title", "description", "position", "archived", "list_id"}

    def list_for_list(self, list_id: UUID, *, include_archived: bool = False) -> list[Card]:
        """Cards of a list ordered by ``position``, then creation time, then id."""
        stmt = select(Card).where(Card.list_id == list_id)
        if not include_archived:
            stmt = stmt.where(Card.archived == false())
        stmt = stmt.order_by(Card.position.asc(), Card.created_at.asc(), Card.id.asc())
        return list(self.session.execute(stmt).scalars().all())

    def max_position(self, list_id: UUID) -> float | None:
        """Highest position among the list's non-archived cards (``None`` if none)."""
        value = self._max(Card.position, Card.list_id == list_id, Card.archived == false())
        return None if value is None else float(value)
