"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`taskboard.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``taskboard.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Shared DTOs (from ``taskboard.services._shared.dto``)
    * :data:`UNSET`, :class:`PageIn`, :class:`PageMeta`

- Identity service (from ``taskboard.services.identity``)
    * :class:`IdentityService`

- Membership service (from ``taskboard.services.membership``)
    * :class:`MembershipService`

- Resource services (from ``taskboard.services.boards``)
    * :class:`BoardService`, :class:`ListService`, :class:`CardService`
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext

# Shared DTOs
from ._shared.dto import UNSET, PageIn, PageMeta
from .boards import BoardService, CardService, ListService
from .identity import AuthenticatedMember, IdentityService
from .membership import MembershipService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Shared DTOs
    "UNSET",
    "PageIn",
    "PageMeta",
    # Services
    "AuthenticatedMember",
    "IdentityService",
    "MembershipService",
    "BoardService",
    "ListService",
    "CardService",
]
