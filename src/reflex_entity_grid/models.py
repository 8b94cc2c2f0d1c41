"""Column and filter models shared by the list grid and its host pages."""

from typing import Any, Literal, TypedDict

from reflex.components.props import PropsBase

from reflex_entity_grid.resize import MIN_COLUMN_WIDTH

DEFAULT_COLUMN_WIDTH: int = 150


class FilterEntry(TypedDict):
    """One ``(column_id, value)`` pair of a draft or committed filter list."""

    column_id: str
    value: str


class ColumnDef(PropsBase):
    """Column descriptor for the list grid.

    ``width`` is the only attribute that changes after the grid is
    configured, and only through a column resize.  Attribute names are
    single words so the camelCase conversion done by ``PropsBase`` leaves
    them untouched.

    Attributes:
        id: Stable column identifier, also used as the filter key sent
            to the host.
        label: Header text.
        width: Width in pixels.
        field: Row key rendered in the cell.  Defaults to ``id``.
        filterable: Whether the column gets a filter input.
        align: Cell text alignment.
    """

    id: str
    label: str
    width: int = DEFAULT_COLUMN_WIDTH
    field: str | None = None
    filterable: bool = False
    align: Literal["left", "center", "right"] | None = None


def normalize_columns(columns: list[ColumnDef | dict[str, Any]]) -> list[dict[str, Any]]:
    """Turn column descriptors into JSON-safe dicts for grid state.

    ``field`` defaults to the column id, missing widths get
    :data:`DEFAULT_COLUMN_WIDTH` and widths below the resize floor are
    raised to :data:`~reflex_entity_grid.resize.MIN_COLUMN_WIDTH`.

    Raises:
        ValueError: If a column has no id or two columns share an id.
    """
    normalized: list[dict[str, Any]] = []
    seen: set[str] = set()
    for col in columns:
        raw = col.dict() if isinstance(col, ColumnDef) else dict(col)
        col_id = raw.get("id")
        if not col_id:
            raise ValueError(f"Column without an id: {raw!r}")
        if col_id in seen:
            raise ValueError(f"Duplicate column id: {col_id!r}")
        seen.add(col_id)

        width = raw.get("width")
        if width is None:
            width = DEFAULT_COLUMN_WIDTH
        normalized.append(
            {
                "id": col_id,
                "label": raw.get("label") or col_id,
                "width": max(MIN_COLUMN_WIDTH, int(width)),
                "field": raw.get("field") or col_id,
                "filterable": bool(raw.get("filterable", False)),
                "align": raw.get("align") or "left",
            }
        )
    return normalized
