"""
taskboard.services._shared.ports
================================

*Ports* (hexagonal interfaces) the service layer depends on for security
infrastructure.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider` plus the :class:`~.IssuedToken` and
    :class:`~.AccessClaims` value objects it exchanges.

- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher` for member and board passwords.

Concrete adapters live under ``taskboard.infra``.
"""

from __future__ import annotations

from .password_hasher import PasswordHasher
from .token_provider import AccessClaims, IssuedToken, TokenProvider, TokenSubject

__all__ = [
    "AccessClaims",
    "IssuedToken",
    "PasswordHasher",
    "TokenProvider",
    "TokenSubject",
]
