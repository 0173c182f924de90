# taskboard/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from taskboard.core.extensions import get_password_hasher, get_token_manager
from taskboard.services._shared.dto import PageIn
from taskboard.services._shared.ports import PasswordHasher, TokenProvider
from taskboard.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

MAX_PAGE_LIMIT = 100
DEFAULT_PAGE_LIMIT = 20


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (auth, request ids, etc.).

    :param actor_id: Authenticated member identifier.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: UUID | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Offer shared validation helpers (pagination clamping).
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Services raise the typed errors of :mod:`taskboard.services._shared.errors`
      and let them propagate; the HTTP boundary maps them to responses.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        tokens: TokenProvider | None = None,
        hasher: PasswordHasher | None = None,
    ) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context (auth, tracing).
        :type ctx: ServiceContext | None
        :param tokens: Token provider; defaults to the one built by the app.
        :type tokens: TokenProvider | None
        :param hasher: Password hasher; defaults to the one built by the app.
        :type hasher: PasswordHasher | None
        """
        self.ctx = ctx or ServiceContext()
        self._tokens = tokens
        self._hasher = hasher

    # ------------------------ Collaborators ---------------------------------

    @property
    def tokens(self) -> TokenProvider:
        if self._tokens is None:
            self._tokens = get_token_manager()
        return self._tokens

    @property
    def hasher(self) -> PasswordHasher:
        if self._hasher is None:
            self._hasher = get_password_hasher()
        return self._hasher

    # ---------------------------- Logging -----------------------------------

    def log_extra(self, **fields: Any) -> dict[str, Any]:
        """
        Build the ``extra`` mapping for a service log record.

        The context's ``request_id`` and ``actor_id`` are added unless the
        caller passes its own value for them.

        :returns: Mapping suitable for ``logger.info(..., extra=...)``.
        :rtype: dict[str, Any]
        """
        if self.ctx.request_id is not None:
            fields.setdefault("request_id", self.ctx.request_id)
        if self.ctx.actor_id is not None:
            fields.setdefault("actor_id", self.ctx.actor_id)
        return fields

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level (e.g. "READ COMMITTED").
        :type isolation: str | None
        :param enforce_db_readonly: Apply `SET TRANSACTION READ ONLY` when supported.
        :type enforce_db_readonly: bool
        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    # ----------------------- Validation utilities ---------------------------

    def ensure_page(
        self,
        *,
        limit: int | None,
        offset: int | None,
        max_limit: int = MAX_PAGE_LIMIT,
        default_limit: int = DEFAULT_PAGE_LIMIT,
    ) -> PageIn:
        """
        Build a :class:`PageIn` with clamping.

        A missing or non-positive ``limit`` falls back to ``default_limit``;
        anything above ``max_limit`` is capped. Negative offsets become ``0``.

        :param limit: Requested page size.
        :type limit: int | None
        :param offset: Requested number of rows to skip.
        :type offset: int | None
        :returns: Clamped page window.
        :rtype: PageIn
        """
        size = int(limit) if limit else default_limit
        if size < 1:
            size = default_limit
        size = min(size, max_limit)
        skip = max(0, int(offset or 0))
        return PageIn(limit=size, offset=skip)
