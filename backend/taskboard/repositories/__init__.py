"""Persistence-only repositories, one per aggregate."""

from taskboard.repositories.board import (
    BoardListingRow,
    BoardMemberRepository,
    BoardRepository,
    StarredBoardRepository,
)
from taskboard.repositories.board_list import BoardListRepository
from taskboard.repositories.card import CardRepository
from taskboard.repositories.member import MemberRepository
from taskboard.repositories.refresh_token import RefreshTokenRepository

__all__ = [
    "BoardListRepository",
    "BoardListingRow",
    "BoardMemberRepository",
    "BoardRepository",
    "CardRepository",
    "MemberRepository",
    "RefreshTokenRepository",
    "StarredBoardRepository",
]
