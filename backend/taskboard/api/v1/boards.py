"""Board endpoints: CRUD, listing, joining, membership and stars."""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint, request

from taskboard.api.deps import build_service, json_response, no_content, require_auth, timing
from taskboard.schemas import (
    BoardCreateSchema,
    BoardDetailsSchema,
    BoardListQuerySchema,
    BoardMemberSchema,
    BoardSchema,
    BoardSummarySchema,
    BoardUpdateSchema,
    JoinBoardResultSchema,
    JoinBoardSchema,
    build_meta,
)
from taskboard.services import AuthenticatedMember, BoardService, MembershipService
from taskboard.services.boards import BoardCreateIn, BoardListIn, BoardUpdateIn
from taskboard.services.membership import JoinBoardIn

bp = Blueprint("boards", __name__)

board_schema = BoardSchema()
board_create_schema = BoardCreateSchema()
board_update_schema = BoardUpdateSchema()
board_query_schema = BoardListQuerySchema()
board_summary_schema = BoardSummarySchema(many=True)
board_details_schema = BoardDetailsSchema()
board_member_schema = BoardMemberSchema(many=True)
join_schema = JoinBoardSchema()
join_result_schema = JoinBoardResultSchema()


@bp.get("")
@require_auth
@timing
def list_boards(actor: AuthenticatedMember):
    """List the caller's boards, optionally only the starred ones."""

    query = board_query_schema.load(request.args)
    dto = BoardListIn(
        starred_only=query["starred"],
        limit=query["limit"],
        offset=query["offset"],
    )
    result = build_service(BoardService).list_for_member(actor.id, dto)
    return json_response(
        {"data": board_summary_schema.dump(result.items), "meta": build_meta(result.meta)}
    )


@bp.post("")
@require_auth
@timing
def create_board(actor: AuthenticatedMember):
    """Create a board owned by the caller."""

    payload = board_create_schema.load(request.get_json(silent=True) or {})
    board = build_service(BoardService).create(actor.id, BoardCreateIn(**payload))
    return json_response({"data": board_schema.dump(board)}, status=201)


@bp.post("/join")
@require_auth
@timing
def join_board(actor: AuthenticatedMember):
    """Join a board by slug and shared password."""

    payload = join_schema.load(request.get_json(silent=True) or {})
    result = build_service(MembershipService).join(JoinBoardIn(member_id=actor.id, **payload))
    return json_response({"data": join_result_schema.dump(result)})


@bp.get("/<uuid:board_id>")
@require_auth
@timing
def get_board(board_id: UUID, actor: AuthenticatedMember):
    details = build_service(BoardService).get_details(board_id, actor.id)
    return json_response({"data": board_details_schema.dump(details)})


@bp.patch("/<uuid:board_id>")
@require_auth
@timing
def update_board(board_id: UUID, actor: AuthenticatedMember):
    payload = board_update_schema.load(request.get_json(silent=True) or {})
    board = build_service(BoardService).update(board_id, actor.id, BoardUpdateIn(**payload))
    return json_response({"data": board_schema.dump(board)})


@bp.delete("/<uuid:board_id>")
@require_auth
@timing
def delete_board(board_id: UUID, actor: AuthenticatedMember):
    build_service(BoardService).delete(board_id, actor.id)
    return no_content()


@bp.get("/<uuid:board_id>/members")
@require_auth
@timing
def list_board_members(board_id: UUID, actor: AuthenticatedMember):
    members = build_service(MembershipService).list_members(board_id, actor.id)
    return json_response({"data": board_member_schema.dump(members)})


@bp.delete("/<uuid:board_id>/members/<uuid:member_id>")
@require_auth
@timing
def remove_board_member(board_id: UUID, member_id: UUID, actor: AuthenticatedMember):
    """Remove a member; members may remove themselves (leave)."""

    build_service(MembershipService).remove_member(board_id, member_id, actor.id)
    return no_content()


@bp.post("/<uuid:board_id>/star")
@require_auth
@timing
def star_board(board_id: UUID, actor: AuthenticatedMember):
    build_service(MembershipService).star(board_id, actor.id)
    return no_content()


@bp.delete("/<uuid:board_id>/star")
@require_auth
@timing
def unstar_board(board_id: UUID, actor: AuthenticatedMember):
    build_service(MembershipService).unstar(board_id, actor.id)
    return no_content()
