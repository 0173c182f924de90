"""Member (profile) schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class MemberSchema(Schema):
    """Public representation of a member."""

    id = fields.UUID(required=True)
    email = fields.Email(required=True)
    username = fields.String(required=True)
    full_name = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class ProfileUpdateSchema(Schema):
    """Partial profile update; only the keys present in the payload change."""

    email = fields.Email(validate=validate.Length(max=254))
    username = fields.String(validate=validate.Length(min=1, max=50))
    full_name = fields.String(allow_none=True, validate=validate.Length(max=100))
    password = fields.String(validate=validate.Length(max=128))
