"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

import pytest

from taskboard.models import Member
from taskboard.uow import SQLAlchemyUnitOfWork
from tests.factories.member import MemberFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, db, session):
        """
        GIVEN a writer UoW
        WHEN a member is added inside the context and it exits cleanly
        THEN the row is visible afterwards.
        """
        initial = db.session.query(Member).count()

        with SQLAlchemyUnitOfWork() as uow:
            uow.members.add(MemberFactory.build())

        assert db.session.query(Member).count() == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, db, session):
        """
        GIVEN a writer UoW
        WHEN an exception is raised inside the context
        THEN no rows are persisted.
        """
        initial = db.session.query(Member).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.members.add(MemberFactory.build())
            raise RuntimeError("boom")

        assert db.session.query(Member).count() == initial

    def test_repositories_share_the_uow_session(self):
        with SQLAlchemyUnitOfWork() as uow:
            assert uow.boards.session is uow.session
            assert uow.cards.session is uow.session
            assert uow.refresh_tokens.session is uow.session
