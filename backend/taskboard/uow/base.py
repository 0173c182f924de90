"""
Abstract Unit of Work contract the services are written against.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from taskboard.repositories import (
        BoardListRepository,
        BoardMemberRepository,
        BoardRepository,
        CardRepository,
        MemberRepository,
        RefreshTokenRepository,
        StarredBoardRepository,
    )


class UnitOfWork(ABC):
    """
    One transactional boundary per use-case.

    Every repository below shares the same session, so whatever a service
    stages through them is committed or discarded as a whole.
    """

    members: MemberRepository
    refresh_tokens: RefreshTokenRepository
    boards: BoardRepository
    board_members: BoardMemberRepository
    starred_boards: StarredBoardRepository
    lists: BoardListRepository
    cards: CardRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
