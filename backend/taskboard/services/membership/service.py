"""
MembershipService
=================

Board-scoped roles: who belongs to a board, who owns it, joining and
leaving, and per-member star markers.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from taskboard.models.board import ROLE_MEMBER, BoardMember
from taskboard.services._shared.base import BaseService
from taskboard.services._shared.errors import (
    AlreadyBoardMemberError,
    BoardNotFoundError,
    CannotRemoveOwnerError,
    InvalidBoardPasswordError,
    NotBoardMemberError,
    NotBoardOwnerError,
    violates,
)
from taskboard.services._shared.policies.board_rules import is_owner

from .access import load_board, require_member, require_owner
from .dto import BoardMemberOut, JoinBoardIn, JoinBoardOut

logger = logging.getLogger(__name__)

_STAR_MARKERS = ("uq_starred_boards_board_id_member_id", "starred_boards.board_id")


def membership_to_out(membership: BoardMember) -> BoardMemberOut:
    return BoardMemberOut(
        member_id=membership.member_id,
        username=membership.member.username,
        full_name=membership.member.full_name,
        role=membership.role,
        joined_at=membership.joined_at,
    )


class MembershipService(BaseService):
    """
    Application service for board membership and authorization.

    Every check re-reads the membership row; roles are never cached across
    calls. A missing board is reported as :class:`BoardNotFoundError` before
    any membership check runs.
    """

    # --------------------------------------------------------------------- #
    # Role queries
    # --------------------------------------------------------------------- #

    def role_of(self, board_id: UUID, member_id: UUID) -> str | None:
        """Return the member's role on the board, or ``None`` when not a member."""
        with self.ro_uow() as uow:
            return uow.board_members.role_of(board_id, member_id)

    def require_member(self, board_id: UUID, member_id: UUID) -> str:
        """
        :returns: The caller's role.
        :raises BoardNotFoundError: When the board does not exist.
        :raises NotBoardMemberError: When the caller does not belong to it.
        """
        with self.ro_uow() as uow:
            load_board(uow, board_id)
            return require_member(uow, board_id, member_id).role

    def require_owner(self, board_id: UUID, member_id: UUID) -> str:
        """
        :raises BoardNotFoundError: When the board does not exist.
        :raises NotBoardMemberError: When the caller does not belong to it.
        :raises NotBoardOwnerError: When the caller is not the owner.
        """
        with self.ro_uow() as uow:
            load_board(uow, board_id)
            return require_owner(uow, board_id, member_id).role

    def list_members(self, board_id: UUID, actor_id: UUID) -> list[BoardMemberOut]:
        """Members of the board in join order; the caller must be one of them."""
        with self.ro_uow() as uow:
            load_board(uow, board_id)
            require_member(uow, board_id, actor_id)
            return [membership_to_out(m) for m in uow.board_members.list_for_board(board_id)]

    # --------------------------------------------------------------------- #
    # Joining / leaving
    # --------------------------------------------------------------------- #

    def join(self, dto: JoinBoardIn) -> JoinBoardOut:
        """
        Join a board with its handle and password.

        Checks run in a fixed order: board exists, caller is not already a
        member, password matches.

        :raises BoardNotFoundError: Unknown slug.
        :raises AlreadyBoardMemberError: Caller already belongs to the board.
        :raises InvalidBoardPasswordError: Wrong password.
        """
        with self.rw_uow() as uow:
            board = uow.boards.get_by_slug(dto.unique_slug)
            if board is None:
                raise BoardNotFoundError(dto.unique_slug)

            if uow.board_members.get_membership(board.id, dto.member_id) is not None:
                raise AlreadyBoardMemberError()

            if not self.hasher.verify(board.password_hash, dto.password):
                logger.info(
                    "Board join rejected",
                    extra=self.log_extra(
                        board_id=board.id,
                        member_id=dto.member_id,
                        reason="invalid_password",
                    ),
                )
                raise InvalidBoardPasswordError()

            try:
                uow.board_members.add(
                    BoardMember(board_id=board.id, member_id=dto.member_id, role=ROLE_MEMBER)
                )
            except IntegrityError as exc:
                if violates(exc, "uq_board_members_board_id_member_id", "board_members.board_id"):
                    raise AlreadyBoardMemberError() from exc
                raise

            logger.info(
                "Member joined board",
                extra=self.log_extra(board_id=board.id, member_id=dto.member_id, role=ROLE_MEMBER),
            )
            return JoinBoardOut(
                board_id=board.id,
                name=board.name,
                unique_slug=board.unique_slug,
                role=ROLE_MEMBER,
            )

    def remove_member(self, board_id: UUID, target_id: UUID, actor_id: UUID) -> None:
        """
        Remove ``target_id`` from the board on behalf of ``actor_id``.

        Rules:
        - The actor and the target must both be members.
        - Removing somebody else requires the owner role.
        - The owner cannot remove themselves (boards never lose their owner).
        - Any non-owner may leave.

        :raises BoardNotFoundError: When the board does not exist.
        :raises NotBoardMemberError: When the actor or the target is not a member.
        :raises NotBoardOwnerError: When a non-owner removes somebody else.
        :raises CannotRemoveOwnerError: When the owner tries to leave.
        """
        with self.rw_uow() as uow:
            load_board(uow, board_id)
            actor = require_member(uow, board_id, actor_id)

            target = uow.board_members.get_membership(board_id, target_id)
            if target is None:
                raise NotBoardMemberError("Target member does not belong to this board")

            if actor_id != target_id and not is_owner(actor.role):
                raise NotBoardOwnerError()

            if actor_id == target_id and is_owner(target.role):
                raise CannotRemoveOwnerError()

            removed = uow.board_members.remove(board_id, target_id)
            if removed == 0:
                raise NotBoardMemberError("Target member does not belong to this board")

            logger.info(
                "Member removed from board",
                extra=self.log_extra(board_id=board_id, actor_id=actor_id, target_id=target_id),
            )

    # --------------------------------------------------------------------- #
    # Stars
    # --------------------------------------------------------------------- #

    def star(self, board_id: UUID, actor_id: UUID) -> bool:
        """
        Star the board for the caller. Idempotent.

        A concurrent request inserting the same marker first makes this call
        a no-op rather than a conflict.

        :returns: ``True`` when a new marker was created.
        """
        try:
            with self.rw_uow() as uow:
                load_board(uow, board_id)
                require_member(uow, board_id, actor_id)
                created = uow.starred_boards.star(board_id, actor_id)
        except IntegrityError as exc:
            if not violates(exc, *_STAR_MARKERS):
                raise
            created = False
        logger.info(
            "Board starred",
            extra=self.log_extra(board_id=board_id, member_id=actor_id, count=int(created)),
        )
        return created

    def unstar(self, board_id: UUID, actor_id: UUID) -> bool:
        """
        Remove the caller's star. Idempotent.

        :returns: ``True`` when a marker was removed.
        """
        with self.rw_uow() as uow:
            load_board(uow, board_id)
            require_member(uow, board_id, actor_id)
            removed = uow.starred_boards.unstar(board_id, actor_id)
            logger.info(
                "Board unstarred",
                extra=self.log_extra(board_id=board_id, member_id=actor_id, removed=removed),
            )
            return removed > 0
