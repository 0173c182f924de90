"""Profile endpoints for the authenticated member."""

from __future__ import annotations

from flask import Blueprint, request

from taskboard.api.deps import identity_service, json_response, require_auth, timing
from taskboard.schemas import MemberSchema, ProfileUpdateSchema
from taskboard.services import AuthenticatedMember
from taskboard.services.identity import ProfileUpdateIn

bp = Blueprint("members", __name__)

member_schema = MemberSchema()
profile_update_schema = ProfileUpdateSchema()


@bp.get("/me")
@require_auth
@timing
def get_me(actor: AuthenticatedMember):
    member = identity_service().get_profile(actor.id)
    return json_response({"data": member_schema.dump(member)})


@bp.patch("/me")
@require_auth
@timing
def update_me(actor: AuthenticatedMember):
    """Apply a partial profile update; absent keys are left untouched."""

    payload = profile_update_schema.load(request.get_json(silent=True) or {})
    member = identity_service().update_profile(actor.id, ProfileUpdateIn(**payload))
    return json_response({"data": member_schema.dump(member)})
