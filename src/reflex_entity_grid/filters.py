"""Draft and committed column filters for the list grid.

The grid keeps two parallel filter lists per instance:

* **draft** filters follow every keystroke in a filter input and are
  never seen by the host;
* **committed** filters hold the last confirmed value per column and are
  published to the host whenever they change.

A draft value is promoted to committed only on an explicit commit (the
input losing focus, or Enter).  This keeps the typing feedback live
without running one backend query per keystroke.

Both lists are ordered ``[{"column_id": ..., "value": ...}, ...]`` with
at most one entry per column.  Every function here is pure and returns
a new list; the callers store the result in Reflex state.
"""

from collections.abc import Collection, Iterable
from typing import Any

from reflex_entity_grid.models import FilterEntry


def filter_value(entries: Iterable[FilterEntry], column_id: str) -> str:
    """Return the filter value for *column_id*, or ``""`` when absent."""
    for entry in entries:
        if entry.get("column_id") == column_id:
            return entry.get("value", "")
    return ""


def upsert_filter(
    entries: Iterable[FilterEntry],
    column_id: str,
    value: str,
) -> list[FilterEntry]:
    """Set *value* for *column_id*, keeping the position of an existing entry.

    New columns are appended.  No validation is done: an empty string is a
    legitimate value meaning "no filter".
    """
    updated: list[FilterEntry] = []
    found = False
    for entry in entries:
        if entry.get("column_id") == column_id:
            updated.append({"column_id": column_id, "value": value})
            found = True
        else:
            updated.append({"column_id": entry["column_id"], "value": entry.get("value", "")})
    if not found:
        updated.append({"column_id": column_id, "value": value})
    return updated


def commit_filter(
    committed: Iterable[FilterEntry],
    column_id: str,
    value: str,
    filterable: Collection[str] | None = None,
) -> list[FilterEntry] | None:
    """Promote *value* to the committed filter of *column_id*.

    Args:
        committed: The current committed filter list.
        column_id: Column being committed.
        value: The value to commit (usually the current draft).
        filterable: Ids of the filterable columns.  When given, commits on
            any other column are rejected so the committed list stays a
            subset of the filterable columns.

    Returns:
        The new committed list, or ``None`` when nothing changed (same
        value as already committed, or a non-filterable column).  ``None``
        tells the caller to skip the host notification and keep the
        current page.
    """
    committed = list(committed)
    if filterable is not None and column_id not in filterable:
        return None
    if filter_value(committed, column_id) == value:
        return None
    return upsert_filter(committed, column_id, value)


def filterable_column_ids(columns: Iterable[dict[str, Any]]) -> list[str]:
    """Return the ids of columns flagged ``filterable``, in column order."""
    return [col["id"] for col in columns if col.get("filterable")]


def has_filterable_columns(columns: Iterable[dict[str, Any]]) -> bool:
    """Whether the filter row should be rendered at all."""
    return any(col.get("filterable") for col in columns)


def filter_values_by_column(
    entries: Iterable[FilterEntry],
    columns: Iterable[dict[str, Any]],
) -> dict[str, str]:
    """Map every column id to its filter value (``""`` when unset)."""
    entries = list(entries)
    return {col["id"]: filter_value(entries, col["id"]) for col in columns}


def active_filters(entries: Iterable[FilterEntry]) -> dict[str, str]:
    """Turn committed entries into query constraints for the backend.

    Entries whose value is blank after trimming are dropped: committing an
    empty string clears that column's constraint even though the entry
    itself stays in the committed list.
    """
    constraints: dict[str, str] = {}
    for entry in entries:
        value = entry.get("value", "")
        if value.strip():
            constraints[entry["column_id"]] = value
    return constraints
