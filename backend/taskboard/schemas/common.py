"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields


class PageQuerySchema(Schema):
    """Parse ``limit``/``offset`` query parameters.

    Out-of-range values are not rejected here; the service clamps them
    (``limit`` to 1..100 with 20 as fallback, ``offset`` to >= 0).
    """

    limit = fields.Integer(load_default=None)
    offset = fields.Integer(load_default=None)


class MetaSchema(Schema):
    """Metadata block for paginated responses."""

    total = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    offset = fields.Integer(required=True)
    has_next = fields.Boolean(required=True)


def build_meta(meta: Any) -> dict[str, Any]:
    """Return a ``meta`` mapping for paginated responses."""

    return MetaSchema().dump(meta)
