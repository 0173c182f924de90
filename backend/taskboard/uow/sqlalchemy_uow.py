"""
SQLAlchemy units of work bound to the Flask-scoped session.
"""

from __future__ import annotations

from contextlib import suppress

from flask import current_app
from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from taskboard.core.extensions import db
from taskboard.repositories import (
    BoardListRepository,
    BoardMemberRepository,
    BoardRepository,
    CardRepository,
    MemberRepository,
    RefreshTokenRepository,
    StarredBoardRepository,
)
from taskboard.uow.base import UnitOfWork

# Dialects that understand ``SET TRANSACTION`` directives.
_SET_TRANSACTION_DIALECTS = ("postgresql", "mysql", "mariadb")

_ISOLATION_LEVELS = ("READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE", "READ UNCOMMITTED")

# Leading SQL keywords refused inside a read-only unit of work.
_WRITE_KEYWORDS = (
    "insert",
    "update",
    "delete",
    "merge",
    "alter",
    "drop",
    "truncate",
    "create",
    "replace",
    "grant",
    "revoke",
)


class _RepositoryBundle:
    """Instantiate every aggregate repository on a single session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.members = MemberRepository(session=session)
        self.refresh_tokens = RefreshTokenRepository(session=session)
        self.boards = BoardRepository(session=session)
        self.board_members = BoardMemberRepository(session=session)
        self.starred_boards = StarredBoardRepository(session=session)
        self.lists = BoardListRepository(session=session)
        self.cards = CardRepository(session=session)


class SQLAlchemyUnitOfWork(_RepositoryBundle, UnitOfWork):
    """
    Read-write unit of work.

    Leaving the ``with`` block normally commits; leaving it through an
    exception rolls back. Board creation relies on this to insert the board
    and its owner membership together or not at all.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session autobegins on its first statement.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(_RepositoryBundle, UnitOfWork):
    """
    Unit of work for queries; any write attempt raises ``RuntimeError``.

    Two guards are installed for the lifetime of the block: a ``before_flush``
    hook refusing pending ORM changes, and a ``before_cursor_execute`` hook
    refusing DML/DDL text. On PostgreSQL and MySQL the transaction is also
    opened ``READ ONLY`` with the requested isolation level.

    When the session already runs a transaction, the unit of work joins it:
    the guards still apply but the ``SET TRANSACTION`` directives are skipped
    and the outer transaction is left untouched on exit.

    :param isolation_level: Isolation hint such as ``"READ COMMITTED"``;
        ``None`` keeps the connection default.
    :param enforce_db_readonly: Issue ``SET TRANSACTION READ ONLY`` where
        supported.
    """

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(session=db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._owned_txn: SessionTransaction | None = None
        self._conn: Connection | None = None
        self._hooks: tuple | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        try:
            self._owned_txn = self.session.begin()
        except InvalidRequestError:
            self._owned_txn = None

        self._conn = self.session.connection()
        self._install_guards()
        if self._owned_txn is not None and self._conn.dialect.name in _SET_TRANSACTION_DIALECTS:
            self._apply_transaction_directives()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owned_txn is not None:
                with suppress(SQLAlchemyError):
                    self.session.rollback()
                self._owned_txn = None
        finally:
            self._remove_guards()
            self._conn = None

    def commit(self) -> None:
        """:raises RuntimeError: always."""
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ------------------------------------------------------------------ guards

    def _apply_transaction_directives(self) -> None:
        try:
            if self.isolation_level:
                level = self.isolation_level.upper().strip()
                if level not in _ISOLATION_LEVELS:
                    current_app.logger.warning("Unknown isolation level %r; trying as-is.", level)
                self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {level}"))
            if self.enforce_db_readonly:
                self.session.execute(text("SET TRANSACTION READ ONLY"))
        except SQLAlchemyError as exc:
            current_app.logger.warning("SET TRANSACTION failed (%s); relying on guards.", exc)

    def _install_guards(self) -> None:
        if self._hooks is not None:
            return

        def block_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError(
                    "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
                )

        def block_dml(conn, cursor, statement, parameters, context, executemany):
            keyword = statement.lstrip().split(None, 1)[0].lower() if statement else ""
            if keyword.startswith(_WRITE_KEYWORDS):
                raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked: {keyword.upper()}")

        event.listen(self.session, "before_flush", block_flush)
        event.listen(self._conn, "before_cursor_execute", block_dml)
        self._hooks = (block_flush, block_dml)

    def _remove_guards(self) -> None:
        if self._hooks is None:
            return
        block_flush, block_dml = self._hooks
        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", block_flush)
        if self._conn is not None:
            with suppress(InvalidRequestError):
                event.remove(self._conn, "before_cursor_execute", block_dml)
        self._hooks = None
