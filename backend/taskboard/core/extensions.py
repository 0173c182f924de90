"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask, current_app
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

if TYPE_CHECKING:
    from taskboard.infra.jwt.token_manager import TokenManager
    from taskboard.infra.security.password_hasher import WerkzeugPasswordHasher

# Global naming convention for all constraints
#   %(table_name)s, %(column_0_name)s, %(referred_table_name)s, etc.
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)

TOKEN_MANAGER_KEY = "taskboard.token_manager"
PASSWORD_HASHER_KEY = "taskboard.password_hasher"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations and the security collaborators.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`taskboard.models` package to ensure SQLAlchemy metadata is ready
        for migrations.

    Raises
    ------
    taskboard.core.config.ConfigurationError
        When the token settings are missing or out of range. The application
        refuses to start rather than serve unsigned or misconfigured tokens.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from taskboard import models as _models  # noqa: F401

    migrate.init_app(app, db)

    from taskboard.infra.jwt.token_manager import TokenConfig, TokenManager
    from taskboard.infra.security.password_hasher import WerkzeugPasswordHasher

    # Built once per process; both objects are immutable after construction.
    app.extensions[TOKEN_MANAGER_KEY] = TokenManager(TokenConfig.from_mapping(app.config))
    app.extensions[PASSWORD_HASHER_KEY] = WerkzeugPasswordHasher(
        method=app.config.get("PASSWORD_HASH_METHOD", "scrypt")
    )


def get_token_manager() -> TokenManager:
    """Return the token manager bound to the current application."""
    manager = current_app.extensions.get(TOKEN_MANAGER_KEY)
    if manager is None:
        raise RuntimeError("Token manager is not initialized. Call init_app() first.")
    return manager


def get_password_hasher() -> WerkzeugPasswordHasher:
    """Return the password hasher bound to the current application."""
    hasher = current_app.extensions.get(PASSWORD_HASHER_KEY)
    if hasher is None:
        raise RuntimeError("Password hasher is not initialized. Call init_app() first.")
    return hasher
