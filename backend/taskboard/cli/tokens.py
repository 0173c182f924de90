"""Flask CLI commands for refresh-token maintenance."""

from __future__ import annotations

import logging
from datetime import timedelta

import click
from flask import current_app
from flask.cli import with_appcontext

from taskboard.services.identity import IdentityService

LOGGER = logging.getLogger(__name__)


@click.group("tokens")
def tokens_cli() -> None:
    """Refresh-token maintenance commands."""


@tokens_cli.command("purge")
@click.option(
    "--retention-days",
    type=click.IntRange(min=0),
    default=None,
    help="Keep revoked tokens this many days (defaults to REFRESH_TOKEN_RETENTION_DAYS).",
)
@with_appcontext
def purge_command(retention_days: int | None) -> None:
    """Delete expired refresh tokens and revoked ones past the retention window."""
    if retention_days is None:
        retention_days = int(current_app.config.get("REFRESH_TOKEN_RETENTION_DAYS", 30))

    removed = IdentityService().purge_expired_tokens(retention=timedelta(days=retention_days))
    LOGGER.info("tokens.purge", extra={"removed": removed})
    click.echo(f"Removed {removed} refresh token(s).")
