from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from taskboard.models.board import ROLE_OWNER, Board, BoardMember
from taskboard.services._shared.base import BaseService
from taskboard.services._shared.dto import PageMeta, is_set
from taskboard.services._shared.errors import (
    BoardAlreadyExistsError,
    DomainValidationError,
    violates,
)
from taskboard.services._shared.policies.board_rules import validate_slug
from taskboard.services.membership.access import load_board, require_member, require_owner
from taskboard.services.membership.service import membership_to_out

from ._converters import board_to_out, list_to_out
from .dto import (
    BoardCreateIn,
    BoardDetailsOut,
    BoardListIn,
    BoardListOut,
    BoardOut,
    BoardSummaryOut,
    BoardUpdateIn,
)

logger = logging.getLogger(__name__)

_SLUG_MARKERS = ("uq_boards_unique_slug", "boards.unique_slug")


def _require_text(value: Any, field: str, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise DomainValidationError(f"{label} is required", field=field)
    return value


class BoardService(BaseService):
    """Lifecycle of boards: create, list, read, update and delete."""

    def create(self, actor_id: UUID, dto: BoardCreateIn) -> BoardOut:
        """
        Create a board and make ``actor_id`` its owner.

        The board row and the owner membership are written in one Unit of
        Work: if either insert fails, neither is kept.

        :raises InvalidBoardSlugError: When the slug breaks the format.
        :raises BoardAlreadyExistsError: When the slug is taken.
        """
        _require_text(dto.name, "name", "Board name")
        validate_slug(dto.unique_slug)
        _require_text(dto.password, "password", "Board password")

        with self.rw_uow() as uow:
            if uow.boards.slug_taken(dto.unique_slug):
                raise BoardAlreadyExistsError(dto.unique_slug)

            board = Board(
                name=dto.name,
                unique_slug=dto.unique_slug,
                description=dto.description,
                password_hash=self.hasher.hash(dto.password),
                creator_id=actor_id,
            )
            try:
                uow.boards.add(board)
                uow.board_members.add(
                    BoardMember(board_id=board.id, member_id=actor_id, role=ROLE_OWNER)
                )
            except IntegrityError as exc:
                if violates(exc, *_SLUG_MARKERS):
                    raise BoardAlreadyExistsError(dto.unique_slug) from exc
                raise

            logger.info(
                "Board created",
                extra=self.log_extra(board_id=board.id, member_id=actor_id, role=ROLE_OWNER),
            )
            return board_to_out(board)

    def list_for_member(self, actor_id: UUID, dto: BoardListIn | None = None) -> BoardListOut:
        """
        Boards the caller belongs to, most recently updated first.

        ``limit`` outside 1..100 falls back to 20 (or is capped at 100) and a
        negative ``offset`` becomes 0.
        """
        dto = dto or BoardListIn()
        page = self.ensure_page(limit=dto.limit, offset=dto.offset)

        with self.ro_uow() as uow:
            rows = uow.boards.list_for_member(
                actor_id,
                starred_only=dto.starred_only,
                limit=page.limit,
                offset=page.offset,
            )
            total = uow.boards.count_for_member(actor_id, starred_only=dto.starred_only)
            items = [
                BoardSummaryOut(
                    board=board_to_out(row.board),
                    starred=row.starred,
                    member_count=row.member_count,
                )
                for row in rows
            ]
            return BoardListOut(
                items=items,
                meta=PageMeta(
                    limit=page.limit,
                    offset=page.offset,
                    total=total,
                    has_next=page.offset + len(items) < total,
                ),
            )

    def get_details(self, board_id: UUID, actor_id: UUID) -> BoardDetailsOut:
        """
        Board, active lists, members and the caller's star flag.

        :raises BoardNotFoundError: When the board does not exist.
        :raises NotBoardMemberError: When the caller does not belong to it.
        """
        with self.ro_uow() as uow:
            board = load_board(uow, board_id)
            membership = require_member(uow, board_id, actor_id)
            return BoardDetailsOut(
                board=board_to_out(board),
                role=membership.role,
                starred=uow.starred_boards.is_starred(board_id, actor_id),
                lists=[list_to_out(bl) for bl in uow.lists.list_for_board(board_id)],
                members=[membership_to_out(m) for m in uow.board_members.list_for_board(board_id)],
            )

    def update(self, board_id: UUID, actor_id: UUID, dto: BoardUpdateIn) -> BoardOut:
        """
        Owner-only partial update.

        A new slug is validated and checked for uniqueness; a new non-empty
        password is re-hashed.

        :raises BoardNotFoundError: When the board does not exist.
        :raises NotBoardMemberError: When the caller does not belong to it.
        :raises NotBoardOwnerError: When the caller is not the owner.
        :raises InvalidBoardSlugError: When the new slug breaks the format.
        :raises BoardAlreadyExistsError: When the new slug is taken.
        """
        with self.rw_uow() as uow:
            board = load_board(uow, board_id)
            require_owner(uow, board_id, actor_id)

            updates: dict[str, Any] = {}
            if is_set(dto.name):
                updates["name"] = _require_text(dto.name, "name", "Board name")
            if is_set(dto.unique_slug) and dto.unique_slug != board.unique_slug:
                validate_slug(dto.unique_slug)
                if uow.boards.slug_taken(dto.unique_slug, exclude_id=board.id):
                    raise BoardAlreadyExistsError(dto.unique_slug)
                updates["unique_slug"] = dto.unique_slug
            if is_set(dto.description):
                updates["description"] = dto.description
            if is_set(dto.password) and dto.password:
                updates["password_hash"] = self.hasher.hash(dto.password)

            if updates:
                try:
                    uow.boards.assign_updates(board, updates)
                except IntegrityError as exc:
                    if violates(exc, *_SLUG_MARKERS):
                        raise BoardAlreadyExistsError(updates.get("unique_slug", "")) from exc
                    raise

            logger.info(
                "Board updated",
                extra=self.log_extra(board_id=board.id, member_id=actor_id, fields=sorted(updates)),
            )
            return board_to_out(board)

    def delete(self, board_id: UUID, actor_id: UUID) -> None:
        """
        Owner-only delete; lists, cards, memberships and stars go with it.

        :raises BoardNotFoundError: When the board does not exist.
        :raises NotBoardMemberError: When the caller does not belong to it.
        :raises NotBoardOwnerError: When the caller is not the owner.
        """
        with self.rw_uow() as uow:
            board = load_board(uow, board_id)
            require_owner(uow, board_id, actor_id)
            uow.boards.delete(board)
            logger.info(
                "Board deleted", extra=self.log_extra(board_id=board_id, member_id=actor_id)
            )
