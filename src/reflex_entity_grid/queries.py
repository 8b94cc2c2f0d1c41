"""Backend list queries over polars LazyFrames.

Every entity page asks its backend for ``list(filters) -> rows``.  This
module implements that collaborator:

* :class:`EntityStore` holds the named tables (one LazyFrame per file in
  a data directory, or frames registered in code).
* :class:`EntityQuery` describes one entity list: how to build its frame
  (usually the main table left-joined with a lookup table), which filter
  fields it accepts, how results are ordered and how a row is turned into
  the nested record sent over HTTP or exported as XML.
* :func:`run_list_query` applies the active filters as case-insensitive
  substring matches, sorts, and collects only the final result.

Rows stay flat (``category_code``, ``category_description``, ...), which
is what the grid renders.  :func:`to_record` rebuilds the nested shape
(``customerCategory: {code, description}``) from :class:`WireField`
trees.
"""

import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import polars as pl

from reflex_entity_grid.models import ColumnDef


# ---------------------------------------------------------------------------
# File scanner
# ---------------------------------------------------------------------------

def _scan_tsv(path: Path) -> pl.LazyFrame:
    return pl.scan_csv(path, separator="\t")


def _read_json(path: Path) -> pl.LazyFrame:
    # No streaming scan for JSON arrays: read then convert to lazy.
    return pl.read_json(path).lazy()


_SCANNERS: dict[str, Callable[[Path], pl.LazyFrame]] = {
    ".csv": pl.scan_csv,
    ".tsv": _scan_tsv,
    ".parquet": pl.scan_parquet,
    ".pq": pl.scan_parquet,
    ".json": _read_json,
    ".ndjson": pl.scan_ndjson,
    ".jsonl": pl.scan_ndjson,
    ".ipc": pl.scan_ipc,
    ".arrow": pl.scan_ipc,
    ".feather": pl.scan_ipc,
}


def scan_file(path: Path) -> pl.LazyFrame:
    """Scan a data file into a LazyFrame, picking the reader by extension.

    Supported: ``.csv``, ``.tsv``, ``.parquet`` / ``.pq``, ``.json``,
    ``.ndjson`` / ``.jsonl``, ``.ipc`` / ``.arrow`` / ``.feather``.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file extension is not recognised.
    """
    path = Path(path).resolve()
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    scanner = _SCANNERS.get(path.suffix.lower())
    if scanner is None:
        raise ValueError(
            f"Unsupported file extension: {path.suffix!r}. "
            f"Supported: {', '.join(sorted(_SCANNERS))}"
        )
    return scanner(path)


# ---------------------------------------------------------------------------
# Table store
# ---------------------------------------------------------------------------

class EntityStore:
    """Named tables the entity queries read from.

    LazyFrames are not JSON-serialisable, so the store lives outside
    Reflex state (see :func:`reflex_entity_grid.entities.set_entity_store`).
    """

    def __init__(self, tables: Mapping[str, pl.LazyFrame | pl.DataFrame] | None = None) -> None:
        self._tables: dict[str, pl.LazyFrame] = {}
        for name, data in (tables or {}).items():
            self.add(name, data)

    @classmethod
    def from_directory(cls, directory: Path) -> "EntityStore":
        """Register every supported file in *directory* under its stem.

        ``customers.csv`` becomes the ``customers`` table.  Files with other
        extensions are skipped.

        Raises:
            FileNotFoundError: If *directory* is not a directory.
        """
        directory = Path(directory).resolve()
        if not directory.is_dir():
            raise FileNotFoundError(f"Data directory not found: {directory}")

        store = cls()
        for path in sorted(directory.iterdir()):
            if path.is_file() and path.suffix.lower() in _SCANNERS:
                store.add(path.stem, scan_file(path))
        print(f"[EntityStore] {directory}: tables={store.names()}")
        return store

    def add(self, name: str, data: pl.LazyFrame | pl.DataFrame) -> None:
        self._tables[name] = data.lazy() if isinstance(data, pl.DataFrame) else data

    def names(self) -> list[str]:
        return sorted(self._tables)

    def table(self, name: str) -> pl.LazyFrame:
        """Return the LazyFrame registered as *name*.

        Raises:
            KeyError: If no such table exists.
        """
        try:
            return self._tables[name]
        except KeyError:
            raise KeyError(
                f"No table named {name!r}; available: {', '.join(self.names()) or 'none'}"
            ) from None


# ---------------------------------------------------------------------------
# Query descriptors
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WireField:
    """One key of the record sent to clients.

    A leaf reads ``row[column]`` (``column`` defaults to ``name``).  A group
    has ``children`` and becomes a nested object, or ``None`` when every
    child is null (e.g. a customer without a category).

    Attributes:
        name: Key in the JSON record (camelCase).
        column: Flat row column of a leaf.
        children: Nested fields of a group.
        xml_name: Element name in the XML export when it differs from
            ``name``.
    """

    name: str
    column: str | None = None
    children: tuple["WireField", ...] = ()
    xml_name: str | None = None

    @property
    def element(self) -> str:
        return self.xml_name or self.name


@dataclass(frozen=True, eq=False)
class EntityQuery:
    """Description of one entity list endpoint and page.

    Attributes:
        name: Registry key and plural name (``"customers"``); also the XML
            root element.
        title: Page heading.
        item_name: Singular name (``"customer"``); the XML item element.
        route: Path under ``/api`` of the HTTP list route.
        build: Returns the unfiltered, flat frame from the store.
        filter_exprs: Accepted filter fields mapped to the expression
            searched for that field.
        sort_by: Text columns ordering the result, ascending and ignoring
            case.
        key: Unique row column, used as the grid row key.
        columns: Grid columns of the entity page.
        wire_fields: Shape of the records sent to clients.
        xml_fields: Fields of one XML item, in element order, read from
            the client record; defaults to ``wire_fields``.
    """

    name: str
    title: str
    item_name: str
    route: str
    build: Callable[[EntityStore], pl.LazyFrame]
    filter_exprs: Mapping[str, pl.Expr]
    sort_by: tuple[str, ...]
    key: str = "id"
    columns: tuple[ColumnDef | dict[str, Any], ...] = ()
    wire_fields: tuple[WireField, ...] = ()
    xml_fields: tuple[WireField, ...] = ()

    @property
    def filter_fields(self) -> list[str]:
        return list(self.filter_exprs)

    @property
    def export_fields(self) -> tuple[WireField, ...]:
        return self.xml_fields or self.wire_fields


# ---------------------------------------------------------------------------
# Running a query
# ---------------------------------------------------------------------------

def _contains_ignore_case(expr: pl.Expr, needle: str) -> pl.Expr:
    # Literal match: user input is never interpreted as a regex.
    return (
        expr.cast(pl.String)
        .str.to_lowercase()
        .str.contains(needle.lower(), literal=True)
    )


def apply_filters(
    query: EntityQuery,
    lf: pl.LazyFrame,
    filters: Mapping[str, str] | None,
) -> pl.LazyFrame:
    """Apply every non-blank filter on a known field (AND-combined).

    Unknown fields are ignored and reported; rows whose searched value is
    null never match.  The frame is not collected.
    """
    exprs: list[pl.Expr] = []
    for filter_field, needle in (filters or {}).items():
        if needle is None or not str(needle).strip():
            continue
        searched = query.filter_exprs.get(filter_field)
        if searched is None:
            print(f"[EntityQuery] {query.name}: ignoring unknown filter field {filter_field!r}")
            continue
        exprs.append(_contains_ignore_case(searched, str(needle)))

    if not exprs:
        return lf
    combined = exprs[0]
    for e in exprs[1:]:
        combined = combined & e
    return lf.filter(combined)


def run_list_query(
    query: EntityQuery,
    store: EntityStore,
    filters: Mapping[str, str] | None = None,
) -> list[dict[str, Any]]:
    """Return the flat, sorted rows of *query* matching *filters*.

    Args:
        query: The entity to list.
        store: Tables to read from.
        filters: ``{field: needle}``; blank needles are skipped.

    Returns:
        JSON-safe row dicts.

    Raises:
        KeyError: If a table the query needs is missing from *store*.
    """
    t0 = time.perf_counter()
    lf = apply_filters(query, query.build(store), filters)
    if query.sort_by:
        # Alphabetical, ignoring case.
        keys = [pl.col(c).cast(pl.String).str.to_lowercase() for c in query.sort_by]
        lf = lf.sort(keys, nulls_last=True, maintain_order=True)
    df = lf.collect()
    rows = _dataframe_to_dicts(df)
    elapsed_ms = (time.perf_counter() - t0) * 1000
    print(
        f"[EntityQuery] {query.name}: filters={dict(filters or {})}, "
        f"rows={len(rows)}, elapsed={elapsed_ms:.1f}ms"
    )
    return rows


def _dataframe_to_dicts(df: pl.DataFrame) -> list[dict[str, Any]]:
    """Convert a DataFrame to a list of JSON-safe dicts.

    Temporal columns become ISO-8601 strings and List columns
    comma-joined strings; other types are left to ``to_dicts()``.
    """
    exprs: list[pl.Expr] = []
    needs_cast = False
    for name, dtype in df.schema.items():
        if isinstance(dtype, (pl.Date, pl.Datetime, pl.Time, pl.Duration)):
            exprs.append(pl.col(name).cast(pl.String))
            needs_cast = True
        elif isinstance(dtype, pl.List):
            exprs.append(pl.col(name).cast(pl.List(pl.String)).list.join(","))
            needs_cast = True
        else:
            exprs.append(pl.col(name))

    if not needs_cast:
        return df.to_dicts()
    return df.select(exprs).to_dicts()


# ---------------------------------------------------------------------------
# Wire records
# ---------------------------------------------------------------------------

def _build_record(fields: Sequence[WireField], row: Mapping[str, Any]) -> dict[str, Any]:
    record: dict[str, Any] = {}
    for wire in fields:
        if wire.children:
            nested = _build_record(wire.children, row)
            has_value = any(value is not None for value in nested.values())
            record[wire.name] = nested if has_value else None
        else:
            record[wire.name] = row.get(wire.column or wire.name)
    return record


def to_record(query: EntityQuery, row: Mapping[str, Any]) -> dict[str, Any]:
    """Turn a flat result row into the nested camelCase client record."""
    return _build_record(query.wire_fields, row)


def to_records(query: EntityQuery, rows: Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
    return [to_record(query, row) for row in rows]
