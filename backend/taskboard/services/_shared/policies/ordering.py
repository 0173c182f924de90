"""Gap-based fractional positions for lists and cards.

Siblings are spaced ``POSITION_GAP`` apart so an item can later be dropped
between two neighbours by picking any value in the gap, without renumbering.
"""

from __future__ import annotations

import math

from taskboard.services._shared.errors import InvalidPositionError

POSITION_GAP = 65536.0


def next_position(current_max: float | None) -> float:
    """Position that appends after the last sibling (``GAP`` for an empty parent)."""
    return (current_max or 0.0) + POSITION_GAP


def ensure_finite(position: float) -> float:
    """
    Coerce ``position`` to float and reject NaN/infinity.

    :raises InvalidPositionError: When the value is not a finite number.
    """
    try:
        value = float(position)
    except (TypeError, ValueError) as exc:
        raise InvalidPositionError() from exc
    if not math.isfinite(value):
        raise InvalidPositionError()
    return value


def resolve_position(explicit: float | None, current_max: float | None) -> float:
    """
    Pick the stored position for a new or moved item.

    :param explicit: Caller-supplied position; ``None`` means "append". Any
        finite value, ``0.0`` included, is stored verbatim.
    :type explicit: float | None
    :param current_max: Highest non-archived sibling position in the target
        parent, or ``None`` when it has none.
    :type current_max: float | None
    :returns: Position to persist.
    :rtype: float
    :raises InvalidPositionError: When ``explicit`` is not finite.
    """
    if explicit is None:
        return next_position(current_max)
    return ensure_finite(explicit)
