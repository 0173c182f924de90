"""Unit tests for BoardService: create, list, details, update and delete."""

from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest

from taskboard.models.base import utcnow
from taskboard.models.board import ROLE_OWNER, Board, BoardMember
from taskboard.models.board_list import BoardList
from taskboard.models.card import Card
from taskboard.repositories.board import BoardMemberRepository, BoardRepository
from taskboard.services._shared.errors import (
    BoardAlreadyExistsError,
    BoardNotFoundError,
    DomainValidationError,
    InvalidBoardSlugError,
    NotBoardMemberError,
    NotBoardOwnerError,
)
from taskboard.services.boards import BoardCreateIn, BoardListIn, BoardService, BoardUpdateIn
from taskboard.services.membership import JoinBoardIn, MembershipService
from tests.factories.board import (
    BoardListFactory,
    CardFactory,
    StarredBoardFactory,
    add_member,
    owned_board,
)
from tests.factories.member import MemberFactory


@pytest.fixture()
def service() -> BoardService:
    return BoardService()


class TestCreateBoard:
    def test_creator_becomes_owner(self, service, session):
        """Given a valid payload, the board and an owner membership are stored."""
        owner = MemberFactory()

        board = service.create(
            owner.id,
            BoardCreateIn(name="Roadmap", unique_slug="roadmap", password="letmein"),
        )

        assert board.creator_id == owner.id
        assert board.unique_slug == "roadmap"
        roles = BoardMemberRepository(session=session)
        assert roles.role_of(board.id, owner.id) == ROLE_OWNER
        stored = BoardRepository(session=session).get(board.id)
        assert stored.password_hash != "letmein"

    def test_duplicate_slug(self, service):
        owned_board(unique_slug="taken-slug")
        owner = MemberFactory()

        with pytest.raises(BoardAlreadyExistsError):
            service.create(
                owner.id, BoardCreateIn(name="Other", unique_slug="taken-slug", password="x")
            )

    @pytest.mark.parametrize("slug", ["ab", "Has-Caps", "no spaces"])
    def test_invalid_slug(self, service, slug):
        owner = MemberFactory()

        with pytest.raises(InvalidBoardSlugError):
            service.create(owner.id, BoardCreateIn(name="B", unique_slug=slug, password="x"))

    @pytest.mark.parametrize(("name", "password"), [("", "x"), ("   ", "x"), ("Board", "")])
    def test_name_and_password_are_required(self, service, name, password):
        owner = MemberFactory()

        with pytest.raises(DomainValidationError):
            service.create(
                owner.id, BoardCreateIn(name=name, unique_slug="valid-slug", password=password)
            )

    def test_failed_membership_insert_keeps_no_board(self, service, session, monkeypatch):
        """Given the owner membership insert fails, the board row is not kept either."""
        owner = MemberFactory()
        session.commit()

        def _boom(self, instance):
            raise RuntimeError("membership insert failed")

        monkeypatch.setattr(BoardMemberRepository, "add", _boom)

        with pytest.raises(RuntimeError):
            service.create(
                owner.id, BoardCreateIn(name="Atomic", unique_slug="atomic", password="x")
            )

        assert BoardRepository(session=session).get_by_slug("atomic") is None
        assert session.query(BoardMember).filter_by(member_id=owner.id).count() == 0


class TestListBoards:
    def test_lists_member_boards_most_recent_first(self, service):
        owner = MemberFactory()
        now = utcnow()
        oldest = owned_board(owner, updated_at=now - timedelta(days=2))
        newest = owned_board(owner, updated_at=now)
        middle = owned_board(owner, updated_at=now - timedelta(days=1))
        owned_board()  # someone else's board

        result = service.list_for_member(owner.id)

        assert [item.board.id for item in result.items] == [newest.id, middle.id, oldest.id]
        assert result.meta.total == 3
        assert result.meta.has_next is False

    def test_pagination_window(self, service):
        owner = MemberFactory()
        now = utcnow()
        for days in range(3):
            owned_board(owner, updated_at=now - timedelta(days=days))

        first = service.list_for_member(owner.id, BoardListIn(limit=2, offset=0))
        second = service.list_for_member(owner.id, BoardListIn(limit=2, offset=2))

        assert len(first.items) == 2
        assert first.meta.has_next is True
        assert len(second.items) == 1
        assert second.meta.has_next is False
        assert {i.board.id for i in first.items}.isdisjoint({i.board.id for i in second.items})

    @pytest.mark.parametrize(
        ("limit", "offset", "expected_limit", "expected_offset"),
        [(0, 0, 20, 0), (500, 0, 100, 0), (None, -5, 20, 0), (7, 3, 7, 3)],
    )
    def test_window_is_clamped(self, service, limit, offset, expected_limit, expected_offset):
        owner = MemberFactory()

        result = service.list_for_member(owner.id, BoardListIn(limit=limit, offset=offset))

        assert result.meta.limit == expected_limit
        assert result.meta.offset == expected_offset

    def test_starred_only_and_member_count(self, service):
        owner = MemberFactory()
        starred = owned_board(owner)
        owned_board(owner)
        add_member(starred)
        StarredBoardFactory(board=starred, member_id=owner.id)

        result = service.list_for_member(owner.id, BoardListIn(starred_only=True))

        assert [item.board.id for item in result.items] == [starred.id]
        assert result.items[0].starred is True
        assert result.items[0].member_count == 2
        assert result.meta.total == 1

    def test_joined_boards_are_listed(self, service):
        board = owned_board()
        member = add_member(board)

        result = service.list_for_member(member.id)

        assert [item.board.id for item in result.items] == [board.id]
        assert result.items[0].starred is False


class TestBoardDetails:
    def test_details_show_active_lists_in_order(self, service):
        owner = MemberFactory()
        board = owned_board(owner)
        later = BoardListFactory(board=board, name="Later", position=200.0)
        first = BoardListFactory(board=board, name="First", position=100.0)
        BoardListFactory(board=board, name="Old", position=50.0, archived=True)
        member = add_member(board)
        StarredBoardFactory(board=board, member_id=member.id)

        details = service.get_details(board.id, member.id)

        assert [bl.id for bl in details.lists] == [first.id, later.id]
        assert details.role == "member"
        assert details.starred is True
        assert {m.member_id for m in details.members} == {owner.id, member.id}

    def test_details_require_membership(self, service):
        board = owned_board()

        with pytest.raises(NotBoardMemberError):
            service.get_details(board.id, MemberFactory().id)

    def test_unknown_board(self, service):
        with pytest.raises(BoardNotFoundError):
            service.get_details(uuid4(), MemberFactory().id)


class TestUpdateBoard:
    def test_owner_updates_fields(self, service):
        owner = MemberFactory()
        board = owned_board(owner)

        updated = service.update(
            board.id,
            owner.id,
            BoardUpdateIn(name="Renamed", unique_slug="renamed-board", description=None),
        )

        assert updated.name == "Renamed"
        assert updated.unique_slug == "renamed-board"
        assert updated.description is None

    def test_member_cannot_update(self, service):
        board = owned_board()
        member = add_member(board)

        with pytest.raises(NotBoardOwnerError):
            service.update(board.id, member.id, BoardUpdateIn(name="Nope"))

    def test_slug_collision(self, service):
        owner = MemberFactory()
        board = owned_board(owner)
        owned_board(unique_slug="already-here")

        with pytest.raises(BoardAlreadyExistsError):
            service.update(board.id, owner.id, BoardUpdateIn(unique_slug="already-here"))

    def test_invalid_new_slug(self, service):
        owner = MemberFactory()
        board = owned_board(owner)

        with pytest.raises(InvalidBoardSlugError):
            service.update(board.id, owner.id, BoardUpdateIn(unique_slug="BAD SLUG"))

    def test_new_password_applies_to_join(self, service):
        """Given a new board password, joining with the old one fails."""
        owner = MemberFactory()
        board = owned_board(owner, unique_slug="rekeyed", password="old-pass")
        joiner = MemberFactory()

        service.update(board.id, owner.id, BoardUpdateIn(password="new-pass"))

        membership = MembershipService()
        result = membership.join(
            JoinBoardIn(unique_slug="rekeyed", password="new-pass", member_id=joiner.id)
        )
        assert result.board_id == board.id


class TestDeleteBoard:
    def test_owner_delete_cascades(self, service, session):
        owner = MemberFactory()
        board = owned_board(owner)
        add_member(board)
        board_list = BoardListFactory(board=board)
        CardFactory(board_list=board_list)
        StarredBoardFactory(board=board, member_id=owner.id)
        board_id, list_id = board.id, board_list.id

        service.delete(board_id, owner.id)

        assert session.get(Board, board_id) is None
        assert session.query(BoardMember).filter_by(board_id=board_id).count() == 0
        assert session.query(BoardList).filter_by(board_id=board_id).count() == 0
        assert session.query(Card).filter_by(list_id=list_id).count() == 0

    def test_member_cannot_delete(self, service, session):
        board = owned_board()
        member = add_member(board)
        session.commit()

        with pytest.raises(NotBoardOwnerError):
            service.delete(board.id, member.id)

        assert session.get(Board, board.id) is not None
