"""Board membership and authorization."""

from __future__ import annotations

from .access import load_board, require_member, require_owner
from .dto import BoardMemberOut, JoinBoardIn, JoinBoardOut
from .service import MembershipService, membership_to_out

__all__ = [
    "MembershipService",
    "BoardMemberOut",
    "JoinBoardIn",
    "JoinBoardOut",
    "load_board",
    "membership_to_out",
    "require_member",
    "require_owner",
]
