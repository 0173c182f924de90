"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .auth import bp as auth_bp  # noqa: E402
from .boards import bp as boards_bp  # noqa: E402
from .cards import bp as cards_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .lists import bp as lists_bp  # noqa: E402
from .members import bp as members_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/v1
    (auth_bp, "/auth"),  # -> /api/v1/auth
    (members_bp, "/members"),
    (boards_bp, "/boards"),
    (lists_bp, "/lists"),
    (cards_bp, "/cards"),
]
