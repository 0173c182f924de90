"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import or depend on
Flask or HTTP. They form the closed set of outcomes the services report;
``taskboard/core/errors.py`` maps each family onto an RFC 7807 response.

Every concrete error carries a stable ``code`` so clients can tell apart
conditions that share an HTTP status (e.g. an expired access token versus a
revoked refresh token).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, *markers: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    *markers : str
        Constraint names (e.g. ``uq_boards_unique_slug``) or, for drivers
        that report the offending column instead (SQLite), ``table.column``.

    Returns
    -------
    bool
        True if the IntegrityError message mentions any of the markers.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return any(marker.lower() in message for marker in markers)


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - Subclasses set ``code`` to a stable, machine-readable identifier.
    """

    code: ClassVar[str] = "service_error"


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Board").
    :type entity: str
    :param key: Identifier or search key.
    :type key: object
    """

    code: ClassVar[str] = "not_found"

    entity: str
    key: object

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "Member").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    code: ClassVar[str] = "conflict"

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class AuthenticationError(ServiceError):
    """Credentials or tokens could not establish who the caller is."""

    code: ClassVar[str] = "unauthorized"
    default_message: ClassVar[str] = "Authentication failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class AuthorizationError(ServiceError):
    """The caller is known but not allowed to perform the operation."""

    code: ClassVar[str] = "forbidden"
    default_message: ClassVar[str] = "Operation not permitted"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class DomainValidationError(ServiceError):
    """
    A field value breaks a domain rule.

    :param message: Human-readable explanation.
    :param field: Name of the offending field, when there is one.
    """

    code: ClassVar[str] = "validation_error"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


# --------------------------------------------------------------------------- #
# Not found
# --------------------------------------------------------------------------- #


class UserNotFoundError(NotFoundError):
    code = "user_not_found"

    def __init__(self, key: object) -> None:
        super().__init__("Member", key)


class BoardNotFoundError(NotFoundError):
    code = "board_not_found"

    def __init__(self, key: object) -> None:
        super().__init__("Board", key)


class ListNotFoundError(NotFoundError):
    code = "list_not_found"

    def __init__(self, key: object) -> None:
        super().__init__("List", key)


class CardNotFoundError(NotFoundError):
    code = "card_not_found"

    def __init__(self, key: object) -> None:
        super().__init__("Card", key)


# --------------------------------------------------------------------------- #
# Conflicts
# --------------------------------------------------------------------------- #


class AlreadyExistsError(ConflictError):
    """A unique identity (email, username, slug) is already registered."""

    code = "already_exists"


class UserAlreadyExistsError(AlreadyExistsError):
    code = "user_already_exists"

    def __init__(self, detail: str = "email or username already registered") -> None:
        super().__init__("Member", detail)


class BoardAlreadyExistsError(AlreadyExistsError):
    code = "board_already_exists"

    def __init__(self, slug: str) -> None:
        super().__init__("Board", f"slug '{slug}' is already in use")


class AlreadyBoardMemberError(ConflictError):
    code = "already_board_member"

    def __init__(self) -> None:
        super().__init__("BoardMember", "member already belongs to this board")


class EmailAlreadyTakenError(ConflictError):
    code = "email_already_taken"

    def __init__(self) -> None:
        super().__init__("Member", "email already in use")


class UsernameAlreadyTakenError(ConflictError):
    code = "username_already_taken"

    def __init__(self) -> None:
        super().__init__("Member", "username already in use")


# --------------------------------------------------------------------------- #
# Authentication
# --------------------------------------------------------------------------- #


class InvalidCredentialsError(AuthenticationError):
    code = "invalid_credentials"
    default_message = "Invalid email or password"


class InvalidTokenError(AuthenticationError):
    code = "invalid_token"
    default_message = "Invalid token"


class ExpiredTokenError(AuthenticationError):
    code = "token_expired"
    default_message = "Token has expired"


class InvalidRefreshTokenError(AuthenticationError):
    code = "invalid_refresh_token"
    default_message = "Invalid or expired refresh token"


# --------------------------------------------------------------------------- #
# Authorization
# --------------------------------------------------------------------------- #


class NotBoardMemberError(AuthorizationError):
    code = "not_board_member"
    default_message = "You are not a member of this board"


class NotBoardOwnerError(AuthorizationError):
    code = "not_board_owner"
    default_message = "Only the board owner can perform this action"


class CannotRemoveOwnerError(AuthorizationError):
    code = "cannot_remove_owner"
    default_message = "The board owner cannot leave the board"


class InvalidBoardPasswordError(AuthorizationError):
    code = "invalid_board_password"
    default_message = "Invalid board password"


# --------------------------------------------------------------------------- #
# Validation
# --------------------------------------------------------------------------- #


class InvalidBoardSlugError(DomainValidationError):
    code = "invalid_board_slug"

    def __init__(self, message: str = "Slug must be 3-50 characters of a-z, 0-9 or '-'") -> None:
        super().__init__(message, field="unique_slug")


class PasswordTooShortError(DomainValidationError):
    code = "password_too_short"

    def __init__(self, minimum: int) -> None:
        super().__init__(f"Password must be at least {minimum} characters", field="password")
        self.minimum = minimum


class InvalidPositionError(DomainValidationError):
    code = "invalid_position"

    def __init__(self, message: str = "Position must be a finite number") -> None:
        super().__init__(message, field="position")


class CrossBoardMoveError(DomainValidationError):
    code = "cross_board_move"

    def __init__(self) -> None:
        super().__init__("Cards can only be moved between lists of the same board", field="list_id")
