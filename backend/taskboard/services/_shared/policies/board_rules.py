"""Pure board rules: roles and slug format."""

from __future__ import annotations

import re

from taskboard.models.board import ROLE_OWNER
from taskboard.services._shared.errors import InvalidBoardSlugError

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")
SLUG_MIN_LENGTH = 3
SLUG_MAX_LENGTH = 50


def validate_slug(slug: str) -> str:
    """
    Check a board join handle.

    Accepted: 3 to 50 characters drawn from lowercase ASCII letters, digits
    and ``-``. The value is not normalized; ``"My-Board"`` is rejected rather
    than lower-cased.

    :raises InvalidBoardSlugError: When the slug breaks the format.
    """
    if not isinstance(slug, str):
        raise InvalidBoardSlugError()
    if not SLUG_MIN_LENGTH <= len(slug) <= SLUG_MAX_LENGTH:
        raise InvalidBoardSlugError(
            f"Slug must be between {SLUG_MIN_LENGTH} and {SLUG_MAX_LENGTH} characters"
        )
    if SLUG_PATTERN.fullmatch(slug) is None:
        raise InvalidBoardSlugError("Slug may only contain a-z, 0-9 and '-'")
    return slug


def is_owner(role: str | None) -> bool:
    """Return True if ``role`` grants ownership."""
    return role == ROLE_OWNER


def is_member(role: str | None) -> bool:
    """Any stored role counts as membership."""
    return role is not None
