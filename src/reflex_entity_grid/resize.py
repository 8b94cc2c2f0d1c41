"""Pointer-driven column resizing.

A grid is either **idle** (no :class:`ResizeSession`) or **dragging** one
column.  A press on a column's resize handle starts a session that
remembers the pointer position and the column width at that moment;
every pointer move recomputes the width from those anchors, and the
pointer release ends the session wherever the pointer is.  There is no
cancel gesture.

Only one column can be resized at a time.  A press that arrives while a
session is active is ignored.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

MIN_COLUMN_WIDTH: int = 50


@dataclass(frozen=True)
class ResizeSession:
    """Anchors captured when the user pressed a resize handle."""

    column_id: str
    anchor_x: float
    anchor_width: int


def resized_width(
    anchor_width: int,
    anchor_x: float,
    pointer_x: float,
    min_width: int = MIN_COLUMN_WIDTH,
) -> int:
    """Width after dragging from *anchor_x* to *pointer_x*, floored at *min_width*."""
    return max(min_width, int(round(anchor_width + (pointer_x - anchor_x))))


def begin_resize(
    session: ResizeSession | None,
    columns: Iterable[dict[str, Any]],
    column_id: str,
    pointer_x: float,
) -> ResizeSession | None:
    """Start a session on *column_id*, or return ``None`` to ignore the press.

    The press is ignored when a session is already active or when the
    column does not exist.
    """
    if session is not None:
        return None
    for col in columns:
        if col["id"] == column_id:
            return ResizeSession(column_id, float(pointer_x), int(col["width"]))
    return None


def apply_resize(
    columns: Iterable[dict[str, Any]],
    session: ResizeSession,
    pointer_x: float,
    min_width: int = MIN_COLUMN_WIDTH,
) -> list[dict[str, Any]]:
    """Return a copy of *columns* with the session's column resized."""
    width = resized_width(session.anchor_width, session.anchor_x, pointer_x, min_width)
    return [
        {**col, "width": width} if col["id"] == session.column_id else col
        for col in columns
    ]
