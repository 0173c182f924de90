"""Card endpoints."""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint, request

from taskboard.api.deps import build_service, json_response, no_content, require_auth, timing
from taskboard.schemas import CardCreateSchema, CardSchema, CardUpdateSchema
from taskboard.services import AuthenticatedMember, CardService
from taskboard.services.boards import CardCreateIn, CardUpdateIn

bp = Blueprint("cards", __name__)

card_schema = CardSchema()
card_create_schema = CardCreateSchema()
card_update_schema = CardUpdateSchema()


@bp.post("")
@require_auth
@timing
def create_card(actor: AuthenticatedMember):
    payload = card_create_schema.load(request.get_json(silent=True) or {})
    card = build_service(CardService).create(actor.id, CardCreateIn(**payload))
    return json_response({"data": card_schema.dump(card)}, status=201)


@bp.get("/<uuid:card_id>")
@require_auth
@timing
def get_card(card_id: UUID, actor: AuthenticatedMember):
    card = build_service(CardService).get(card_id, actor.id)
    return json_response({"data": card_schema.dump(card)})


@bp.patch("/<uuid:card_id>")
@require_auth
@timing
def update_card(card_id: UUID, actor: AuthenticatedMember):
    """Edit, archive or move a card; ``list_id`` must stay on the same board."""

    payload = card_update_schema.load(request.get_json(silent=True) or {})
    card = build_service(CardService).update(card_id, actor.id, CardUpdateIn(**payload))
    return json_response({"data": card_schema.dump(card)})


@bp.delete("/<uuid:card_id>")
@require_auth
@timing
def delete_card(card_id: UUID, actor: AuthenticatedMember):
    build_service(CardService).delete(card_id, actor.id)
    return no_content()
