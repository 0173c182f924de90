"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import LoginSchema, RefreshTokenSchema, RegisterSchema, TokenResponseSchema
from .board import (
    BoardCreateSchema,
    BoardDetailsSchema,
    BoardListQuerySchema,
    BoardMemberSchema,
    BoardSchema,
    BoardSummarySchema,
    BoardUpdateSchema,
    JoinBoardResultSchema,
    JoinBoardSchema,
)
from .board_list import ListCreateSchema, ListSchema, ListUpdateSchema, ListWithCardsSchema
from .card import CardCreateSchema, CardSchema, CardUpdateSchema
from .common import MetaSchema, PageQuerySchema, build_meta
from .member import MemberSchema, ProfileUpdateSchema

__all__ = [
    "LoginSchema",
    "RefreshTokenSchema",
    "RegisterSchema",
    "TokenResponseSchema",
    "BoardCreateSchema",
    "BoardDetailsSchema",
    "BoardListQuerySchema",
    "BoardMemberSchema",
    "BoardSchema",
    "BoardSummarySchema",
    "BoardUpdateSchema",
    "JoinBoardResultSchema",
    "JoinBoardSchema",
    "ListCreateSchema",
    "ListSchema",
    "ListUpdateSchema",
    "ListWithCardsSchema",
    "CardCreateSchema",
    "CardSchema",
    "CardUpdateSchema",
    "MetaSchema",
    "PageQuerySchema",
    "build_meta",
    "MemberSchema",
    "ProfileUpdateSchema",
]
