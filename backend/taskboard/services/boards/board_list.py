from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from taskboard.models.board_list import BoardList
from taskboard.services._shared.base import BaseService
from taskboard.services._shared.dto import is_set
from taskboard.services._shared.errors import DomainValidationError, ListNotFoundError
from taskboard.services._shared.policies.ordering import ensure_finite, resolve_position
from taskboard.services.membership.access import load_board, require_member
from taskboard.uow.base import UnitOfWork

from ._converters import card_to_out, list_to_out
from .dto import ListCreateIn, ListOut, ListUpdateIn, ListWithCardsOut

logger = logging.getLogger(__name__)


def _validated_name(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise DomainValidationError("List name is required", field="name")
    return value


def load_list(uow: UnitOfWork, list_id: UUID) -> BoardList:
    board_list = uow.lists.get(list_id)  # type: ignore[attr-defined]
    if board_list is None:
        raise ListNotFoundError(list_id)
    return board_list


class ListService(BaseService):
    """Ordered lists of a board; any board member may manage them."""

    def create(self, actor_id: UUID, dto: ListCreateIn) -> ListOut:
        """
        Create a list at ``dto.position`` or, when ``None``, after the last
        active list of the board.

        :raises BoardNotFoundError: When the board does not exist.
        :raises NotBoardMemberError: When the caller does not belong to it.
        :raises InvalidPositionError: When the position is not finite.
        """
        with self.rw_uow() as uow:
            load_board(uow, dto.board_id)
            require_member(uow, dto.board_id, actor_id)

            name = _validated_name(dto.name)
            position = resolve_position(dto.position, uow.lists.max_position(dto.board_id))

            board_list = BoardList(board_id=dto.board_id, name=name, position=position)
            uow.lists.add(board_list)

            logger.info(
                "List created",
                extra=self.log_extra(
                    board_id=dto.board_id, list_id=board_list.id, position=position
                ),
            )
            return list_to_out(board_list)

    def get_with_cards(self, list_id: UUID, actor_id: UUID) -> ListWithCardsOut:
        """
        A list and its active cards ordered by position.

        :raises ListNotFoundError: When the list does not exist.
        :raises NotBoardMemberError: When the caller does not belong to its board.
        """
        with self.ro_uow() as uow:
            board_list = load_list(uow, list_id)
            require_member(uow, board_list.board_id, actor_id)
            return ListWithCardsOut(
                board_list=list_to_out(board_list),
                cards=[card_to_out(c) for c in uow.cards.list_for_list(list_id)],
            )

    def update(self, list_id: UUID, actor_id: UUID, dto: ListUpdateIn) -> ListOut:
        """Rename, reposition or (un)archive a list."""
        with self.rw_uow() as uow:
            board_list = load_list(uow, list_id)
            require_member(uow, board_list.board_id, actor_id)

            updates: dict[str, Any] = {}
            if is_set(dto.name):
                updates["name"] = _validated_name(dto.name)
            if is_set(dto.position) and dto.position is not None:
                updates["position"] = ensure_finite(dto.position)
            if is_set(dto.archived) and dto.archived is not None:
                updates["archived"] = bool(dto.archived)

            if updates:
                uow.lists.assign_updates(board_list, updates)

            logger.info(
                "List updated",
                extra=self.log_extra(
                    list_id=list_id, board_id=board_list.board_id, fields=sorted(updates)
                ),
            )
            return list_to_out(board_list)

    def delete(self, list_id: UUID, actor_id: UUID) -> None:
        """Delete a list together with its cards."""
        with self.rw_uow() as uow:
            board_list = load_list(uow, list_id)
            require_member(uow, board_list.board_id, actor_id)
            uow.lists.delete(board_list)
            logger.info(
                "List deleted", extra=self.log_extra(list_id=list_id, board_id=board_list.board_id)
            )
