"""Card schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class CardCreateSchema(Schema):
    """Input payload for creating a card; omit ``position`` to append."""

    list_id = fields.UUID(required=True)
    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    description = fields.String(load_default=None, allow_none=True)
    position = fields.Float(load_default=None, allow_none=True, allow_nan=False)


class CardUpdateSchema(Schema):
    """Partial card update; ``list_id`` moves the card within its board."""

    title = fields.String(validate=validate.Length(min=1, max=200))
    description = fields.String(allow_none=True)
    list_id = fields.UUID()
    position = fields.Float(allow_nan=False)
    archived = fields.Boolean()


class CardSchema(Schema):
    id = fields.UUID(required=True)
    list_id = fields.UUID()
    title = fields.String()
    description = fields.String(allow_none=True)
    position = fields.Float()
    archived = fields.Boolean()
    created_by = fields.UUID()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
