"""Board, membership and listing schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from .board_list import ListSchema
from .common import PageQuerySchema


class BoardCreateSchema(Schema):
    """Input payload for creating a board.

    The slug format is checked by the board service, which reports
    ``invalid_board_slug``.
    """

    name = fields.String(required=True, validate=validate.Length(min=1, max=120))
    unique_slug = fields.String(required=True)
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    description = fields.String(load_default=None, allow_none=True)


class BoardUpdateSchema(Schema):
    """Partial board update (owner only)."""

    name = fields.String(validate=validate.Length(min=1, max=120))
    unique_slug = fields.String()
    password = fields.String(validate=validate.Length(max=128))
    description = fields.String(allow_none=True)


class JoinBoardSchema(Schema):
    unique_slug = fields.String(required=True)
    password = fields.String(required=True)


class BoardListQuerySchema(PageQuerySchema):
    """Query string of ``GET /boards``."""

    starred = fields.Boolean(load_default=False)


class BoardSchema(Schema):
    """Public representation of a board (never the password hash)."""

    id = fields.UUID(required=True)
    name = fields.String(required=True)
    unique_slug = fields.String(required=True)
    description = fields.String(allow_none=True)
    creator_id = fields.UUID()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class BoardSummarySchema(Schema):
    """One row of the caller's board listing."""

    board = fields.Nested(BoardSchema)
    starred = fields.Boolean()
    member_count = fields.Integer()


class BoardMemberSchema(Schema):
    member_id = fields.UUID()
    username = fields.String()
    full_name = fields.String(allow_none=True)
    role = fields.String()
    joined_at = fields.DateTime()


class BoardDetailsSchema(Schema):
    board = fields.Nested(BoardSchema)
    role = fields.String()
    starred = fields.Boolean()
    lists = fields.List(fields.Nested(ListSchema))
    members = fields.List(fields.Nested(BoardMemberSchema))


class JoinBoardResultSchema(Schema):
    board_id = fields.UUID()
    name = fields.String()
    unique_slug = fields.String()
    role = fields.String()
