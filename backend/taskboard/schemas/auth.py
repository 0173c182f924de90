"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from .member import MemberSchema


class RegisterSchema(Schema):
    """Input payload for account registration.

    Password length is enforced by the identity service so the client gets
    the same ``password_too_short`` error from every entry point.
    """

    email = fields.Email(required=True, validate=validate.Length(max=254))
    username = fields.String(required=True, validate=validate.Length(min=1, max=50))
    password = fields.String(required=True, validate=validate.Length(max=128))
    full_name = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=100))


class LoginSchema(Schema):
    """Input payload for authenticating a member."""

    email = fields.String(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshTokenSchema(Schema):
    """Input payload carrying a refresh token (refresh and logout)."""

    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class TokenResponseSchema(Schema):
    """Response payload for login and refresh."""

    access_token = fields.String(required=True)
    refresh_token = fields.String()
    token_type = fields.String(dump_default="bearer")
    expires_in = fields.Integer(required=True)
    member = fields.Nested(MemberSchema)
