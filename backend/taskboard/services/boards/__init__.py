"""Board, list and card services exposing orchestration services and DTOs."""

from __future__ import annotations

from .board import BoardService
from .board_list import ListService
from .card import CardService
from .dto import (
    BoardCreateIn,
    BoardDetailsOut,
    BoardListIn,
    BoardListOut,
    BoardOut,
    BoardSummaryOut,
    BoardUpdateIn,
    CardCreateIn,
    CardOut,
    CardUpdateIn,
    ListCreateIn,
    ListOut,
    ListUpdateIn,
    ListWithCardsOut,
)

__all__ = [
    "BoardService",
    "CardService",
    "ListService",
    # DTOs
    "BoardCreateIn",
    "BoardDetailsOut",
    "BoardListIn",
    "BoardListOut",
    "BoardOut",
    "BoardSummaryOut",
    "BoardUpdateIn",
    "CardCreateIn",
    "CardOut",
    "CardUpdateIn",
    "ListCreateIn",
    "ListOut",
    "ListUpdateIn",
    "ListWithCardsOut",
]
