"""List repository: ordered columns of a board."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import false, select

from taskboard.models.board_list import BoardList
from taskboard.repositories.base import BaseRepository


class BoardListRepository(BaseRepository[BoardList]):
    """Persistence-only repository for :class:`BoardList`."""

    model = BoardList

    def _updatable_fields(self):
        return {"name", "position", "archived"}

    def list_for_board(self, board_id: UUID, *, include_archived: bool = False) -> list[BoardList]:
        """Lists of a board ordered by ``position``, then creation time, then id."""
        stmt = select(BoardList).where(BoardList.board_id == board_id)
        if not include_archived:
            stmt = stmt.where(BoardList.archived == false())
        stmt = stmt.order_by(
            BoardList.position.asc(), BoardList.created_at.asc(), BoardList.id.asc()
        )
        return list(self.session.execute(stmt).scalars().all())

    def max_position(self, board_id: UUID) -> float | None:
        """Highest position among the board's non-archived lists (``None`` if none)."""
        value = self._max(
            BoardList.position, BoardList.board_id == board_id, BoardList.archived == false()
        )
        return None if value is None else float(value)

    def count_for_board(self, board_id: UUID) -> int:
        return self._count(BoardList.board_id == board_id)
