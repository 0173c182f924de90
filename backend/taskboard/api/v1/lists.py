"""List endpoints."""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint, request

from taskboard.api.deps import build_service, json_response, no_content, require_auth, timing
from taskboard.schemas import ListCreateSchema, ListSchema, ListUpdateSchema, ListWithCardsSchema
from taskboard.services import AuthenticatedMember, ListService
from taskboard.services.boards import ListCreateIn, ListUpdateIn

bp = Blueprint("lists", __name__)

list_schema = ListSchema()
list_create_schema = ListCreateSchema()
list_update_schema = ListUpdateSchema()
list_with_cards_schema = ListWithCardsSchema()


@bp.post("")
@require_auth
@timing
def create_list(actor: AuthenticatedMember):
    """Create a list on a board the caller belongs to."""

    payload = list_create_schema.load(request.get_json(silent=True) or {})
    created = build_service(ListService).create(actor.id, ListCreateIn(**payload))
    return json_response({"data": list_schema.dump(created)}, status=201)


@bp.get("/<uuid:list_id>")
@require_auth
@timing
def get_list(list_id: UUID, actor: AuthenticatedMember):
    """Return a list with its cards in position order."""

    result = build_service(ListService).get_with_cards(list_id, actor.id)
    return json_response({"data": list_with_cards_schema.dump(result)})


@bp.patch("/<uuid:list_id>")
@require_auth
@timing
def update_list(list_id: UUID, actor: AuthenticatedMember):
    payload = list_update_schema.load(request.get_json(silent=True) or {})
    updated = build_service(ListService).update(list_id, actor.id, ListUpdateIn(**payload))
    return json_response({"data": list_schema.dump(updated)})


@bp.delete("/<uuid:list_id>")
@require_auth
@timing
def delete_list(list_id: UUID, actor: AuthenticatedMember):
    build_service(ListService).delete(list_id, actor.id)
    return no_content()
