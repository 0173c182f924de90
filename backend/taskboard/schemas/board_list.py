"""List schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from .card import CardSchema


class ListCreateSchema(Schema):
    """Input payload for creating a list; omit ``position`` to append."""

    board_id = fields.UUID(required=True)
    name = fields.String(required=True, validate=validate.Length(min=1, max=120))
    position = fields.Float(load_default=None, allow_none=True, allow_nan=False)


class ListUpdateSchema(Schema):
    name = fields.String(validate=validate.Length(min=1, max=120))
    position = fields.Float(allow_nan=False)
    archived = fields.Boolean()


class ListSchema(Schema):
    id = fields.UUID(required=True)
    board_id = fields.UUID()
    name = fields.String()
    position = fields.Float()
    archived = fields.Boolean()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class ListWithCardsSchema(Schema):
    board_list = fields.Nested(ListSchema, data_key="list")
    cards = fields.List(fields.Nested(CardSchema))
