"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from taskboard.core.errors import Unauthorized
from taskboard.core.logger import ensure_request_id
from taskboard.services import IdentityService
from taskboard.services._shared.base import BaseService, ServiceContext

F = TypeVar("F", bound=Callable[..., Any])
S = TypeVar("S", bound=BaseService)

BEARER_SCHEME = "bearer"


def service_context() -> ServiceContext:
    """Build the request-scoped context handed to services."""

    return ServiceContext(actor_id=g.get("actor_id"), request_id=ensure_request_id())


def build_service(cls: type[S]) -> S:
    """Instantiate a resource service bound to the current request."""

    return cls(ctx=service_context())


def identity_service() -> IdentityService:
    """Return an :class:`IdentityService` honouring the rotation setting."""

    return IdentityService(
        ctx=service_context(),
        rotate_refresh=bool(current_app.config.get("REFRESH_TOKEN_ROTATION", False)),
    )


def bearer_token() -> str:
    """Extract the bearer token from ``Authorization``.

    :raises Unauthorized: When the header is missing or not ``Bearer <token>``.
    """

    header = request.headers.get("Authorization", "")
    if not header:
        raise Unauthorized("Missing bearer token", code="missing_token")
    scheme, _, token = header.partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token:
        raise Unauthorized("Malformed Authorization header", code="invalid_token")
    return token


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token.

    The verified identity is passed to the view as the ``actor`` keyword
    argument and its id is stored on ``flask.g`` for logging.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        actor = identity_service().authenticate(bearer_token())
        g.actor_id = actor.id
        return func(*args, actor=actor, **kwargs)

    return wrapper  # type: ignore[return-value]


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def no_content() -> Response:
    """Return an empty ``204 No Content`` response."""

    return Response(status=204)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
