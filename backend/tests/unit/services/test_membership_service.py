"""Unit tests for MembershipService: joining, removal, roles and stars."""

from __future__ import annotations

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from taskboard.models.board import ROLE_MEMBER, ROLE_MODERATOR, ROLE_OWNER, StarredBoard
from taskboard.repositories.board import BoardMemberRepository, StarredBoardRepository
from taskboard.services._shared.errors import (
    AlreadyBoardMemberError,
    BoardNotFoundError,
    CannotRemoveOwnerError,
    InvalidBoardPasswordError,
    NotBoardMemberError,
    NotBoardOwnerError,
)
from taskboard.services.membership import JoinBoardIn, MembershipService
from tests.factories.board import DEFAULT_BOARD_PASSWORD, add_member, owned_board
from tests.factories.member import MemberFactory


@pytest.fixture()
def service() -> MembershipService:
    return MembershipService()


@pytest.fixture()
def memberships(session) -> BoardMemberRepository:
    return BoardMemberRepository(session=session)


class TestJoinBoard:
    def test_join_with_correct_password_grants_member_role(self, service, memberships):
        """Given the right slug and password, the caller joins as a plain member."""
        board = owned_board(unique_slug="team-alpha", password="open-sesame")
        joiner = MemberFactory()

        result = service.join(
            JoinBoardIn(unique_slug="team-alpha", password="open-sesame", member_id=joiner.id)
        )

        assert result.board_id == board.id
        assert result.role == ROLE_MEMBER
        assert memberships.role_of(board.id, joiner.id) == ROLE_MEMBER

    def test_wrong_password_leaves_membership_unchanged(self, service, memberships, session):
        board = owned_board(unique_slug="team-beta", password="open-sesame")
        joiner = MemberFactory()
        session.commit()

        with pytest.raises(InvalidBoardPasswordError):
            service.join(
                JoinBoardIn(unique_slug="team-beta", password="guess", member_id=joiner.id)
            )

        assert memberships.role_of(board.id, joiner.id) is None

    def test_unknown_slug(self, service):
        joiner = MemberFactory()

        with pytest.raises(BoardNotFoundError):
            service.join(JoinBoardIn(unique_slug="nope", password="x", member_id=joiner.id))

    def test_existing_member_is_reported_before_password(self, service):
        """Given a current member with a wrong password, AlreadyBoardMember wins."""
        board = owned_board(unique_slug="team-gamma")
        member = add_member(board)

        with pytest.raises(AlreadyBoardMemberError):
            service.join(JoinBoardIn(unique_slug="team-gamma", password="wrong", member_id=member.id))

    def test_owner_cannot_join_own_board_again(self, service):
        owner = MemberFactory()
        owned_board(owner, unique_slug="team-delta")

        with pytest.raises(AlreadyBoardMemberError):
            service.join(
                JoinBoardIn(
                    unique_slug="team-delta",
                    password=DEFAULT_BOARD_PASSWORD,
                    member_id=owner.id,
                )
            )


class TestRemoveMember:
    def test_owner_removes_member(self, service, memberships):
        owner = MemberFactory()
        board = owned_board(owner)
        member = add_member(board)

        service.remove_member(board.id, member.id, actor_id=owner.id)

        assert memberships.role_of(board.id, member.id) is None

    def test_member_can_leave(self, service, memberships):
        board = owned_board()
        member = add_member(board)

        service.remove_member(board.id, member.id, actor_id=member.id)

        assert memberships.role_of(board.id, member.id) is None

    def test_member_cannot_remove_someone_else(self, service, memberships, session):
        board = owned_board()
        member = add_member(board)
        other = add_member(board)
        session.commit()

        with pytest.raises(NotBoardOwnerError):
            service.remove_member(board.id, other.id, actor_id=member.id)

        assert memberships.role_of(board.id, other.id) == ROLE_MEMBER

    def test_moderator_cannot_remove_someone_else(self, service):
        board = owned_board()
        moderator = add_member(board, role=ROLE_MODERATOR)
        member = add_member(board)

        with pytest.raises(NotBoardOwnerError):
            service.remove_member(board.id, member.id, actor_id=moderator.id)

    def test_owner_cannot_leave(self, service, memberships, session):
        """Given the owner removing themselves, the board keeps its owner."""
        owner = MemberFactory()
        board = owned_board(owner)
        session.commit()

        with pytest.raises(CannotRemoveOwnerError):
            service.remove_member(board.id, owner.id, actor_id=owner.id)

        assert memberships.role_of(board.id, owner.id) == ROLE_OWNER

    def test_outsider_cannot_remove(self, service):
        board = owned_board()
        member = add_member(board)
        outsider = MemberFactory()

        with pytest.raises(NotBoardMemberError):
            service.remove_member(board.id, member.id, actor_id=outsider.id)

    def test_target_must_be_member(self, service):
        owner = MemberFactory()
        board = owned_board(owner)
        stranger = MemberFactory()

        with pytest.raises(NotBoardMemberError):
            service.remove_member(board.id, stranger.id, actor_id=owner.id)

    def test_unknown_board(self, service):
        member = MemberFactory()

        with pytest.raises(BoardNotFoundError):
            service.remove_member(uuid4(), member.id, actor_id=member.id)


class TestRolesAndListing:
    def test_require_member_and_owner(self, service):
        owner = MemberFactory()
        board = owned_board(owner)
        member = add_member(board)

        assert service.require_member(board.id, member.id) == ROLE_MEMBER
        assert service.require_owner(board.id, owner.id) == ROLE_OWNER
        with pytest.raises(NotBoardOwnerError):
            service.require_owner(board.id, member.id)

    def test_role_of_outsider_is_none(self, service):
        board = owned_board()

        assert service.role_of(board.id, MemberFactory().id) is None

    def test_list_members_hides_emails(self, service):
        owner = MemberFactory()
        board = owned_board(owner)
        member = add_member(board)

        rows = service.list_members(board.id, actor_id=member.id)

        assert {row.member_id for row in rows} == {owner.id, member.id}
        assert all(not hasattr(row, "email") for row in rows)

    def test_list_members_requires_membership(self, service):
        board = owned_board()

        with pytest.raises(NotBoardMemberError):
            service.list_members(board.id, actor_id=MemberFactory().id)


class TestStars:
    def test_star_and_unstar_are_idempotent(self, service, session):
        board = owned_board()
        member = add_member(board)
        stars = StarredBoardRepository(session=session)

        assert service.star(board.id, member.id) is True
        assert service.star(board.id, member.id) is False
        assert stars.is_starred(board.id, member.id)

        assert service.unstar(board.id, member.id) is True
        assert service.unstar(board.id, member.id) is False
        assert not stars.is_starred(board.id, member.id)

    def test_star_lost_to_concurrent_insert_is_a_no_op(self, service, session, monkeypatch):
        board = owned_board()
        member = add_member(board)
        assert service.star(board.id, member.id) is True

        # Another request inserted the marker between the check and the insert.
        monkeypatch.setattr(StarredBoardRepository, "is_starred", lambda self, b, m: False)

        assert service.star(board.id, member.id) is False
        count = session.scalar(
            select(func.count())
            .select_from(StarredBoard)
            .where(StarredBoard.board_id == board.id, StarredBoard.member_id == member.id)
        )
        assert count == 1

    def test_star_requires_membership(self, service):
        board = owned_board()

        with pytest.raises(NotBoardMemberError):
            service.star(board.id, MemberFactory().id)
