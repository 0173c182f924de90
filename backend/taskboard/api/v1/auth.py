"""Authentication endpoints using the identity service."""

from __future__ import annotations

from flask import Blueprint, request

from taskboard.api.deps import (
    identity_service,
    json_response,
    no_content,
    require_auth,
    timing,
)
from taskboard.schemas import (
    LoginSchema,
    MemberSchema,
    RefreshTokenSchema,
    RegisterSchema,
    TokenResponseSchema,
)
from taskboard.services import AuthenticatedMember
from taskboard.services.identity import LoginIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
member_schema = MemberSchema()
token_schema = TokenResponseSchema()


@bp.post("/register")
@timing
def register():
    """Register a new member and return the created representation."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    member = identity_service().register(RegisterIn(**payload))
    return json_response({"data": member_schema.dump(member)}, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue an access/refresh token pair."""

    payload = login_schema.load(request.get_json(silent=True) or {})
    result = identity_service().login(LoginIn(**payload))
    return json_response({"data": token_schema.dump(result)})


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a refresh token for a new access token."""

    payload = refresh_schema.load(request.get_json(silent=True) or {})
    result = identity_service().refresh(payload["refresh_token"])
    body = token_schema.dump(result)
    if result.refresh_token is None:
        body.pop("refresh_token", None)
    return json_response({"data": body})


@bp.post("/logout")
@timing
def logout():
    """Revoke one refresh token. Unknown tokens are accepted silently."""

    payload = refresh_schema.load(request.get_json(silent=True) or {})
    identity_service().logout(payload["refresh_token"])
    return no_content()


@bp.post("/logout-all")
@require_auth
@timing
def logout_all(actor: AuthenticatedMember):
    """Revoke every refresh token of the calling member."""

    revoked = identity_service().logout_all(actor.id)
    return json_response({"data": {"revoked": revoked}})
