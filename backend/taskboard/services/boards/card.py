from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from taskboard.models.board_list import BoardList
from taskboard.models.card import Card
from taskboard.services._shared.base import BaseService
from taskboard.services._shared.dto import is_set
from taskboard.services._shared.errors import (
    CardNotFoundError,
    CrossBoardMoveError,
    DomainValidationError,
)
from taskboard.services._shared.policies.ordering import ensure_finite, resolve_position
from taskboard.services.membership.access import require_member
from taskboard.uow.base import UnitOfWork

from ._converters import card_to_out
from .board_list import load_list
from .dto import CardCreateIn, CardOut, CardUpdateIn

logger = logging.getLogger(__name__)


def _validated_title(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise DomainValidationError("Card title is required", field="title")
    return value


def _load_card(uow: UnitOfWork, card_id: UUID) -> tuple[Card, BoardList]:
    """Resolve a card and the list it sits in."""
    card = uow.cards.get(card_id)  # type: ignore[attr-defined]
    if card is None:
        raise CardNotFoundError(card_id)
    board_list = uow.lists.get(card.list_id)  # type: ignore[attr-defined]
    if board_list is None:
        raise CardNotFoundError(card_id)
    return card, board_list


class CardService(BaseService):
    """Cards inside lists; any member of the owning board may manage them."""

    def create(self, actor_id: UUID, dto: CardCreateIn) -> CardOut:
        """
        Create a card in ``dto.list_id``.

        :raises ListNotFoundError: When the list does not exist.
        :raises NotBoardMemberError: When the caller does not belong to the board.
        :raises InvalidPositionError: When the position is not finite.
        """
        with self.rw_uow() as uow:
            board_list = load_list(uow, dto.list_id)
            require_member(uow, board_list.board_id, actor_id)

            title = _validated_title(dto.title)
            position = resolve_position(dto.position, uow.cards.max_position(dto.list_id))

            card = Card(
                list_id=dto.list_id,
                title=title,
                description=dto.description,
                position=position,
                created_by=actor_id,
            )
            uow.cards.add(card)

            logger.info(
                "Card created",
                extra=self.log_extra(
                    card_id=card.id,
                    list_id=dto.list_id,
                    board_id=board_list.board_id,
                    position=position,
                ),
            )
            return card_to_out(card)

    def get(self, card_id: UUID, actor_id: UUID) -> CardOut:
        """
        :raises CardNotFoundError: When the card does not exist.
        :raises NotBoardMemberError: When the caller does not belong to the board.
        """
        with self.ro_uow() as uow:
            card, board_list = _load_card(uow, card_id)
            require_member(uow, board_list.board_id, actor_id)
            return card_to_out(card)

    def update(self, card_id: UUID, actor_id: UUID, dto: CardUpdateIn) -> CardOut:
        """
        Edit a card and optionally move it to another list of the same board.

        When moving without an explicit position the card is appended to the
        destination list. An explicit position always wins.

        :raises CardNotFoundError: When the card does not exist.
        :raises NotBoardMemberError: When the caller does not belong to the board.
        :raises ListNotFoundError: When the destination list does not exist.
        :raises CrossBoardMoveError: When the destination list is on another board.
        :raises InvalidPositionError: When the position is not finite.
        """
        with self.rw_uow() as uow:
            card, board_list = _load_card(uow, card_id)
            require_member(uow, board_list.board_id, actor_id)

            updates: dict[str, Any] = {}
            if is_set(dto.title):
                updates["title"] = _validated_title(dto.title)
            if is_set(dto.description):
                updates["description"] = dto.description
            if is_set(dto.archived) and dto.archived is not None:
                updates["archived"] = bool(dto.archived)

            explicit_position: float | None = None
            if is_set(dto.position) and dto.position is not None:
                explicit_position = ensure_finite(dto.position)
                updates["position"] = explicit_position

            if is_set(dto.list_id) and dto.list_id is not None and dto.list_id != card.list_id:
                target = load_list(uow, dto.list_id)
                if target.board_id != board_list.board_id:
                    raise CrossBoardMoveError()
                updates["list_id"] = target.id
                updates["position"] = resolve_position(
                    explicit_position, uow.cards.max_position(target.id)
                )

            if updates:
                uow.cards.assign_updates(card, updates)

            logger.info(
                "Card updated",
                extra=self.log_extra(
                    card_id=card.id,
                    list_id=card.list_id,
                    board_id=board_list.board_id,
                    fields=sorted(updates),
                ),
            )
            return card_to_out(card)

    def delete(self, card_id: UUID, actor_id: UUID) -> None:
        """
        :raises CardNotFoundError: When the card does not exist.
        :raises NotBoardMemberError: When the caller does not belong to the board.
        """
        with self.rw_uow() as uow:
            card, board_list = _load_card(uow, card_id)
            require_member(uow, board_list.board_id, actor_id)
            uow.cards.delete(card)
            logger.info(
                "Card deleted",
                extra=self.log_extra(card_id=card_id, board_id=board_list.board_id),
            )
