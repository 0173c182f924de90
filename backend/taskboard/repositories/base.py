"""Generic repository base shared by every aggregate repository.

Repositories are persistence-only:

- They never implement use cases or authorization rules.
- They never call commit/rollback; the Unit of Work owns the transaction.
- Updates go through an explicit ``_updatable_fields`` whitelist, so no
  mass-assignment reaches the mapped classes.
- Time-dependent predicates receive ``now`` explicitly; comparisons happen in
  SQL so naive/aware datetime differences between backends never reach Python.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from taskboard.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Persistence-only repository for a single mapped class.

    Subclasses set ``model`` and may override ``_updatable_fields``.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """
        :param session: Session shared across the Unit of Work scope. Falls
            back to the Flask-scoped session when omitted.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    def _updatable_fields(self) -> set[str]:
        """Keys :meth:`assign_updates` may set. Empty means read-only."""
        return set()

    def _by_id(self, entity_id: Any) -> Select[Any]:
        pk = getattr(self.model, "id", None)
        if pk is None:
            raise RuntimeError(f"{self.model.__name__} has no 'id' column.")
        return select(self.model).where(pk == entity_id)

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush so defaults and constraints apply now."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        return cast(E | None, self.session.execute(self._by_id(entity_id)).scalars().first())

    def get_for_update(self, entity_id: Any) -> E | None:
        """Like :meth:`get`, taking a row lock where the backend supports one."""
        stmt = self._by_id(entity_id).with_for_update()
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def exists(self, **filters: Any) -> bool:
        """Return ``True`` when at least one row matches the equality filters."""
        clauses = [getattr(self.model, key) == value for key, value in filters.items()]
        stmt = select(func.count()).select_from(self.model).where(*clauses)
        return bool(self.session.execute(stmt).scalar_one())

    def delete(self, instance: E) -> None:
        """Delete an entity (and its ORM-cascaded children) and flush."""
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    # ----------------------------- Aggregates ---------------------------------

    def _max(self, column: InstrumentedAttribute[Any], *criteria: ColumnElement[bool]) -> Any:
        """Return ``MAX(column)`` over rows matching ``criteria`` (``None`` when empty)."""
        stmt = select(func.max(column)).where(*criteria)
        return self.session.execute(stmt).scalar_one_or_none()

    def _count(self, *criteria: ColumnElement[bool]) -> int:
        stmt = select(func.count()).select_from(self.model).where(*criteria)
        return int(self.session.execute(stmt).scalar_one())

    # ----------------------------- Safe updates -------------------------------

    def assign_updates(self, instance: E, fields: Mapping[str, Any]) -> E:
        """Assign whitelisted keys to ``instance`` and flush.

        ``setattr`` is used so ``@validates`` hooks on the mapped class run.

        :raises ValueError: When ``fields`` names a key outside the whitelist.
        """
        allowed = self._updatable_fields()
        unknown = sorted(k for k in fields if k not in allowed)
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        for key, value in fields.items():
            setattr(instance, key, value)
        self.flush()
        return instance
