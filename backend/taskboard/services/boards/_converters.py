from __future__ import annotations

from taskboard.models.board import Board
from taskboard.models.board_list import BoardList
from taskboard.models.card import Card

from .dto import BoardOut, CardOut, ListOut


def board_to_out(board: Board) -> BoardOut:
    return BoardOut(
        id=board.id,
        name=board.name,
        unique_slug=board.unique_slug,
        description=board.description,
        creator_id=board.creator_id,
        created_at=board.created_at,
        updated_at=board.updated_at,
    )


def list_to_out(board_list: BoardList) -> ListOut:
    return ListOut(
        id=board_list.id,
        board_id=board_list.board_id,
        name=board_list.name,
        position=float(board_list.position),
        archived=bool(board_list.archived),
        created_at=board_list.created_at,
        updated_at=board_list.updated_at,
    )


def card_to_out(card: Card) -> CardOut:
    return CardOut(
        id=card.id,
        list_id=card.list_id,
        title=card.title,
        description=card.description,
        position=float(card.position),
        archived=bool(card.archived),
        created_by=card.created_by,
        created_at=card.created_at,
        updated_at=card.updated_at,
    )
