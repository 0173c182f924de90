"""Repositories for the board aggregate (boards, memberships, stars)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, cast
from uuid import UUID

from sqlalchemy import CursorResult, Select, delete, exists, func, select
from sqlalchemy.orm import aliased

from taskboard.models.board import Board, BoardMember, StarredBoard
from taskboard.repositories.base import BaseRepository


@dataclass(frozen=True, slots=True)
class BoardListingRow:
    """A board as seen by one member: with its star flag and head-count."""

    board: Board
    starred: bool
    member_count: int


class BoardRepository(BaseRepository[Board]):
    """Persistence-only repository for :class:`Board`."""

    model = Board

    def _updatable_fields(self):
        return {"name", "unique_slug", "description", "password_hash"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_slug(self, slug: str) -> Board | None:
        stmt = select(Board).where(Board.unique_slug == slug)
        return cast(Board | None, self.session.execute(stmt).scalars().first())

    def slug_taken(self, slug: str, *, exclude_id: UUID | None = None) -> bool:
        stmt = select(Board.id).where(Board.unique_slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Board.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    # ---------------------------- Member listing ----------------------------

    def _member_boards(self, member_id: UUID, *, starred_only: bool) -> Select[Any]:
        starred = (
            exists()
            .where(StarredBoard.board_id == Board.id, StarredBoard.member_id == member_id)
            .correlate(Board)
        )
        counted = aliased(BoardMember)
        member_count = (
            select(func.count(counted.id))
            .where(counted.board_id == Board.id)
            .correlate(Board)
            .scalar_subquery()
        )
        stmt = (
            select(Board, starred.label("starred"), member_count.label("member_count"))
            .join(BoardMember, BoardMember.board_id == Board.id)
            .where(BoardMember.member_id == member_id)
        )
        if starred_only:
            stmt = stmt.where(starred)
        return stmt

    def list_for_member(
        self,
        member_id: UUID,
        *,
        starred_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> list[BoardListingRow]:
        """Return the boards ``member_id`` belongs to, most recently updated first.

        :param member_id: Member whose memberships drive the listing.
        :type member_id: UUID
        :param starred_only: Restrict to boards this member starred.
        :type starred_only: bool
        :param limit: Page size (already clamped by the caller).
        :type limit: int
        :param offset: Rows to skip (already clamped by the caller).
        :type offset: int
        :rtype: list[BoardListingRow]
        """
        stmt = (
            self._member_boards(member_id, starred_only=starred_only)
            .order_by(Board.updated_at.desc(), Board.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return [
            BoardListingRow(board=row[0], starred=bool(row[1]), member_count=int(row[2]))
            for row in self.session.execute(stmt).all()
        ]

    def count_for_member(self, member_id: UUID, *, starred_only: bool = False) -> int:
        inner = self._member_boards(member_id, starred_only=starred_only).subquery()
        return int(self.session.execute(select(func.count()).select_from(inner)).scalar_one())


class BoardMemberRepository(BaseRepository[BoardMember]):
    """Persistence-only repository for :class:`BoardMember` rows."""

    model = BoardMember

    def _updatable_fields(self):
        return {"role"}

    def get_membership(self, board_id: UUID, member_id: UUID) -> BoardMember | None:
        stmt = select(BoardMember).where(
            BoardMember.board_id == board_id, BoardMember.member_id == member_id
        )
        return cast(BoardMember | None, self.session.execute(stmt).scalars().first())

    def role_of(self, board_id: UUID, member_id: UUID) -> str | None:
        """Return the stored role, or ``None`` when there is no membership row."""
        stmt = select(BoardMember.role).where(
            BoardMember.board_id == board_id, BoardMember.member_id == member_id
        )
        return cast(str | None, self.session.execute(stmt).scalar_one_or_none())

    def list_for_board(self, board_id: UUID) -> list[BoardMember]:
        """Memberships of a board in join order."""
        stmt = (
            select(BoardMember)
            .where(BoardMember.board_id == board_id)
            .order_by(BoardMember.joined_at.asc(), BoardMember.id.asc())
        )
        return list(self.session.execute(stmt).scalars().unique().all())

    def count_for_board(self, board_id: UUID) -> int:
        return self._count(BoardMember.board_id == board_id)

    def remove(self, board_id: UUID, member_id: UUID) -> int:
        """Delete one membership row; returns the number of rows removed."""
        stmt = (
            delete(BoardMember)
            .where(BoardMember.board_id == board_id, BoardMember.member_id == member_id)
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return int(result.rowcount or 0)


class StarredBoardRepository(BaseRepository[StarredBoard]):
    """Persistence-only repository for :class:`StarredBoard` markers."""

    model = StarredBoard

    def is_starred(self, board_id: UUID, member_id: UUID) -> bool:
        return self.exists(board_id=board_id, member_id=member_id)

    def star(self, board_id: UUID, member_id: UUID) -> bool:
        """Insert the marker unless present; returns ``True`` when a row was added.

        A concurrent insert of the same pair surfaces as ``IntegrityError`` on
        ``uq_starred_boards_board_id_member_id``.
        """
        if self.is_starred(board_id, member_id):
            return False
        self.add(StarredBoard(board_id=board_id, member_id=member_id))
        return True

    def unstar(self, board_id: UUID, member_id: UUID) -> int:
        stmt = (
            delete(StarredBoard)
            .where(StarredBoard.board_id == board_id, StarredBoard.member_id == member_id)
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return int(result.rowcount or 0)
