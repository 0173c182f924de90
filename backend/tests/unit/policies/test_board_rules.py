"""Unit tests for board slug and role rules."""

from __future__ import annotations

import pytest

from taskboard.models.board import ROLE_MEMBER, ROLE_MODERATOR, ROLE_OWNER
from taskboard.services._shared.errors import InvalidBoardSlugError
from taskboard.services._shared.policies.board_rules import is_member, is_owner, validate_slug


class TestValidateSlug:
    @pytest.mark.parametrize("slug", ["abc", "team-42", "a" * 50, "0-0"])
    def test_accepts_valid_slugs(self, slug):
        assert validate_slug(slug) == slug

    @pytest.mark.parametrize(
        "slug",
        ["ab", "a" * 51, "My-Board", "with space", "under_score", "émoji", ""],
    )
    def test_rejects_invalid_slugs(self, slug):
        """Given a slug outside [a-z0-9-]{3,50}, validation raises."""
        with pytest.raises(InvalidBoardSlugError) as excinfo:
            validate_slug(slug)

        assert excinfo.value.field == "unique_slug"

    def test_does_not_normalize(self):
        with pytest.raises(InvalidBoardSlugError):
            validate_slug(" team ")


class TestRoles:
    def test_only_owner_is_owner(self):
        assert is_owner(ROLE_OWNER)
        assert not is_owner(ROLE_MODERATOR)
        assert not is_owner(ROLE_MEMBER)
        assert not is_owner(None)

    def test_any_role_is_membership(self):
        assert is_member(ROLE_MEMBER)
        assert is_member(ROLE_MODERATOR)
        assert not is_member(None)
