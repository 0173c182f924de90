"""Board access checks shared by every board-scoped service.

These helpers run inside the caller's Unit of Work so the role is re-read on
every operation; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from uuid import UUID

from taskboard.models.board import Board, BoardMember
from taskboard.services._shared.errors import (
    BoardNotFoundError,
    NotBoardMemberError,
    NotBoardOwnerError,
)
from taskboard.services._shared.policies.board_rules import is_owner
from taskboard.uow.base import UnitOfWork

logger = logging.getLogger(__name__)


def load_board(uow: UnitOfWork, board_id: UUID) -> Board:
    board = uow.boards.get(board_id)  # type: ignore[attr-defined]
    if board is None:
        raise BoardNotFoundError(board_id)
    return board


def require_member(uow: UnitOfWork, board_id: UUID, member_id: UUID) -> BoardMember:
    """
    Return the caller's membership row.

    :raises NotBoardMemberError: When ``member_id`` does not belong to the board.
    """
    membership = uow.board_members.get_membership(board_id, member_id)  # type: ignore[attr-defined]
    if membership is None:
        logger.info(
            "Board access denied",
            extra={"board_id": board_id, "member_id": member_id, "reason": "not_member"},
        )
        raise NotBoardMemberError()
    return membership


def require_owner(uow: UnitOfWork, board_id: UUID, member_id: UUID) -> BoardMember:
    """
    Return the caller's membership row, which must carry the owner role.

    :raises NotBoardMemberError: When ``member_id`` does not belong to the board.
    :raises NotBoardOwnerError: When the caller is a member but not the owner.
    """
    membership = require_member(uow, board_id, member_id)
    if not is_owner(membership.role):
        logger.info(
            "Board access denied",
            extra={
                "board_id": board_id,
                "member_id": member_id,
                "role": membership.role,
                "reason": "not_owner",
            },
        )
        raise NotBoardOwnerError()
    return membership
