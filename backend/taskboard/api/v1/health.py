"""Liveness/readiness probe."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from taskboard.api.deps import json_response, timing
from taskboard.uow import SQLAlchemyReadOnlyUnitOfWork

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Report build metadata and whether the database answers.

    Responds ``503`` with ``status="degraded"`` when the probe query fails so
    load balancers can take the instance out of rotation.
    """

    database_ok = True
    try:
        with SQLAlchemyReadOnlyUnitOfWork(isolation_level=None) as uow:
            uow.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        database_ok = False

    payload = {
        "status": "ok" if database_ok else "degraded",
        "db": "ok" if database_ok else "fail",
        "version": current_app.config.get("APP_VERSION", "dev"),
        "commit": current_app.config.get("APP_COMMIT", "unknown"),
    }
    return json_response(payload, status=200 if database_ok else 503)
