"""DTOs for the board, list and card services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from taskboard.services._shared.dto import UNSET, PageMeta
from taskboard.services.membership.dto import BoardMemberOut

# --------------------------------------------------------------------------- #
# Boards
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class BoardCreateIn:
    """
    Input DTO for creating a board; the creator becomes its owner.

    :param name: Display name.
    :type name: str
    :param unique_slug: Join handle (``^[a-z0-9-]+$``, 3-50 chars).
    :type unique_slug: str
    :param password: Join password, stored hashed.
    :type password: str
    :param description: Optional free text.
    :type description: str | None
    """

    name: str
    unique_slug: str
    password: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class BoardUpdateIn:
    """
    Partial board update (owner only). Unset fields stay untouched;
    ``description=None`` clears the description.
    """

    name: Any = UNSET
    unique_slug: Any = UNSET
    description: Any = UNSET
    password: Any = UNSET


@dataclass(frozen=True, slots=True)
class BoardListIn:
    """
    Listing window for the boards of one member.

    :param starred_only: Only boards the member starred.
    :type starred_only: bool
    :param limit: Page size; clamped to 1..100, default 20.
    :type limit: int | None
    :param offset: Rows to skip; negative values become 0.
    :type offset: int | None
    """

    starred_only: bool = False
    limit: int | None = None
    offset: int | None = None


@dataclass(frozen=True, slots=True)
class BoardOut:
    """Public board fields; the password hash never leaves the service."""

    id: UUID
    name: str
    unique_slug: str
    description: str | None
    creator_id: UUID
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class BoardSummaryOut:
    """
    One entry of a member's board listing.

    :param board: Board fields.
    :type board: BoardOut
    :param starred: Whether the listing member starred it.
    :type starred: bool
    :param member_count: Current number of members.
    :type member_count: int
    """

    board: BoardOut
    starred: bool
    member_count: int


@dataclass(frozen=True, slots=True)
class BoardListOut:
    items: list[BoardSummaryOut]
    meta: PageMeta


# --------------------------------------------------------------------------- #
# Lists
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class ListCreateIn:
    """
    Input DTO for creating a list.

    :param board_id: Owning board.
    :type board_id: UUID
    :param name: Display name.
    :type name: str
    :param position: Explicit position; ``None`` appends after the last list.
    :type position: float | None
    """

    board_id: UUID
    name: str
    position: float | None = None


@dataclass(frozen=True, slots=True)
class ListUpdateIn:
    """Partial list update; ``position=None`` behaves like unset."""

    name: Any = UNSET
    position: Any = UNSET
    archived: Any = UNSET


@dataclass(frozen=True, slots=True)
class ListOut:
    id: UUID
    board_id: UUID
    name: str
    position: float
    archived: bool
    created_at: datetime
    updated_at: datetime


# --------------------------------------------------------------------------- #
# Cards
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class CardCreateIn:
    """
    Input DTO for creating a card.

    :param list_id: Owning list.
    :type list_id: UUID
    :param title: Card title.
    :type title: str
    :param description: Optional free text.
    :type description: str | None
    :param position: Explicit position; ``None`` appends after the last card.
    :type position: float | None
    """

    list_id: UUID
    title: str
    description: str | None = None
    position: float | None = None


@dataclass(frozen=True, slots=True)
class CardUpdateIn:
    """
    Partial card update.

    Setting ``list_id`` to another list of the same board moves the card;
    without an explicit ``position`` it is appended to the destination.
    """

    title: Any = UNSET
    description: Any = UNSET
    list_id: Any = UNSET
    position: Any = UNSET
    archived: Any = UNSET


@dataclass(frozen=True, slots=True)
class CardOut:
    id: UUID
    list_id: UUID
    title: str
    description: str | None
    position: float
    archived: bool
    created_by: UUID
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class ListWithCardsOut:
    """A list and its active cards, ordered."""

    board_list: ListOut
    cards: list[CardOut] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class BoardDetailsOut:
    """
    Board as seen by one of its members.

    :param board: Board fields.
    :type board: BoardOut
    :param role: The caller's role.
    :type role: str
    :param starred: Whether the caller starred it.
    :type starred: bool
    :param lists: Active lists, ordered.
    :type lists: list[ListOut]
    :param members: Members in join order.
    :type members: list[BoardMemberOut]
    """

    board: BoardOut
    role: str
    starred: bool
    lists: list[ListOut]
    members: list[BoardMemberOut]
