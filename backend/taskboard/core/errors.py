"""RFC 7807 (``application/problem+json``) rendering for every API failure.

Service-layer errors arrive here unchanged and are mapped by family:

=====================  ======
Family                 Status
=====================  ======
NotFoundError          404
ConflictError          409
AuthenticationError    401 (plus ``WWW-Authenticate: Bearer``)
AuthorizationError     403
DomainValidationError  400
anything else          500
=====================  ======

Payload validation failures from Marshmallow become ``422`` with the
per-field messages under ``details.errors``. Database integrity and
connectivity errors become ``409`` and ``503`` without leaking driver text.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from taskboard.core.logger import ensure_request_id
from taskboard.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainValidationError,
    NotFoundError,
    ServiceError,
)

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

# Stable codes for errors raised by Flask/Werkzeug themselves.
_HTTP_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    422: "unprocessable_entity",
    500: "internal_server_error",
    503: "service_unavailable",
}


def status_for(err: ServiceError) -> int:
    """HTTP status for a service-layer error family."""
    if isinstance(err, NotFoundError):
        return HTTPStatus.NOT_FOUND
    if isinstance(err, ConflictError):
        return HTTPStatus.CONFLICT
    if isinstance(err, AuthenticationError):
        return HTTPStatus.UNAUTHORIZED
    if isinstance(err, AuthorizationError):
        return HTTPStatus.FORBIDDEN
    if isinstance(err, DomainValidationError):
        return HTTPStatus.BAD_REQUEST
    return HTTPStatus.INTERNAL_SERVER_ERROR


def problem_response(
    status: int,
    code: str,
    detail: str,
    *,
    details: dict[str, Any] | None = None,
) -> tuple[Response, int]:
    """
    Build the problem document and its response.

    :param status: HTTP status code.
    :param code: Stable machine-readable error code.
    :param detail: Client-safe human-readable message.
    :param details: Optional structured extras (field names, validation map).
    :returns: ``(response, status)`` ready to return from an error handler.
    """
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": detail,
        "instance": request.path,
        "code": code,
    }
    if details:
        problem["details"] = details
    problem["request_id"] = ensure_request_id()

    response = jsonify(problem)
    response.mimetype = PROBLEM_MIMETYPE
    if status == HTTPStatus.UNAUTHORIZED:
        response.headers["WWW-Authenticate"] = "Bearer"
    return response, status


class APIError(Exception):
    """
    Error raised by the HTTP layer itself (not by a service).

    Parameters
    ----------
    message : str
        Client-safe description.
    status_code : int, optional
        HTTP status, ``400`` by default.
    code : str, optional
        Machine-readable identifier, ``"bad_request"`` by default.
    details : dict[str, Any] | None, optional
        Structured extras included in the problem document.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}


class Unauthorized(APIError):
    """401 when the request carries no usable credentials."""

    def __init__(self, message: str = "Unauthorized", code: str = "unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code=code)


def init_app(app: Flask) -> None:
    """Register the problem+json error handlers on ``app``.

    4xx outcomes are logged at WARNING; 5xx at ERROR with the traceback.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level("api_error", extra={"reason": err.code})
        return problem_response(err.status_code, err.code, err.message, details=err.details)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        status = status_for(err)
        if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            return handle_unexpected_error(err)
        details = None
        if isinstance(err, DomainValidationError) and err.field:
            details = {"field": err.field}
        log.warning("service_error", extra={"reason": err.code})
        return problem_response(status, err.code, str(err), details=details)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = _HTTP_CODES.get(status, "error")
        if status == HTTPStatus.NOT_FOUND:
            detail = f"Route '{request.path}' not found"
        else:
            detail = (err.description or code.replace("_", " ").capitalize()).strip()
        (log.error if status >= 500 else log.warning)("http_error", extra={"reason": code})
        return problem_response(status, code, detail)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        log.warning("validation_error", extra={"fields": sorted(err.normalized_messages())})
        return problem_response(
            HTTPStatus.UNPROCESSABLE_ENTITY,
            "validation_error",
            "Validation failed",
            details={"errors": err.normalized_messages()},
        )

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        log.error("integrity_error", exc_info=True)
        return problem_response(HTTPStatus.CONFLICT, "conflict", "Resource conflict")

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("database_unavailable", exc_info=True)
        return problem_response(
            HTTPStatus.SERVICE_UNAVAILABLE,
            "service_unavailable",
            "Service temporarily unavailable",
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("unhandled_exception", exc_info=err)
        return problem_response(
            HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error"
        )
