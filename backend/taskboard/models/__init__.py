from taskboard.models.board import (
    ROLE_MEMBER,
    ROLE_MODERATOR,
    ROLE_OWNER,
    Board,
    BoardMember,
    StarredBoard,
)
from taskboard.models.board_list import BoardList
from taskboard.models.card import Card
from taskboard.models.member import Member
from taskboard.models.refresh_token import RefreshToken

__all__ = [
    "ROLE_MEMBER",
    "ROLE_MODERATOR",
    "ROLE_OWNER",
    "Board",
    "BoardList",
    "BoardMember",
    "Card",
    "Member",
    "RefreshToken",
    "StarredBoard",
]
