# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final


class _Unset:
    """Marker type for "field not provided" in partial updates."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


#: Sentinel distinguishing an absent field from an explicit ``None``.
UNSET: Final[Any] = _Unset()


def is_set(value: Any) -> bool:
    """Return ``True`` when ``value`` was provided (even if it is ``None``)."""
    return value is not UNSET


@dataclass(frozen=True, slots=True)
class PageIn:
    """
    Input pagination window (already clamped).

    :param limit: Page size (1..100).
    :type limit: int
    :param offset: Rows to skip (>= 0).
    :type offset: int
    """

    limit: int = 20
    offset: int = 0


@dataclass(frozen=True, slots=True)
class PageMeta:
    """
    Output pagination metadata.

    :param limit: Page size actually applied.
    :type limit: int
    :param offset: Offset actually applied.
    :type offset: int
    :param total: Total rows available.
    :type total: int
    :param has_next: Whether more rows exist after this page.
    :type has_next: bool
    """

    limit: int
    offset: int
    total: int
    has_next: bool
