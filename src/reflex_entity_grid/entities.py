"""Customer, employee and supplier list definitions and the store registry."""

import os
from pathlib import Path

import polars as pl

from reflex_entity_grid.models import ColumnDef
from reflex_entity_grid.queries import EntityQuery, EntityStore, WireField

DATA_DIR_ENV_VAR: str = "ENTITY_GRID_DATA_DIR"


# ---------------------------------------------------------------------------
# Frame builders (main table left-joined with its lookup table)
# ---------------------------------------------------------------------------

def _lookup(store: EntityStore, table: str, key: str, prefix: str) -> pl.LazyFrame:
    return store.table(table).select(
        pl.col("id").cast(pl.Int64).alias(key),
        pl.col("code").cast(pl.String).alias(f"{prefix}_code"),
        pl.col("description").cast(pl.String).alias(f"{prefix}_description"),
    )


def _customers_frame(store: EntityStore) -> pl.LazyFrame:
    customers = store.table("customers").with_columns(
        pl.col("customer_category_id").cast(pl.Int64)
    )
    categories = _lookup(store, "customer_categories", "customer_category_id", "category")
    return customers.join(
        categories, on="customer_category_id", how="left", maintain_order="left"
    )


def _employees_frame(store: EntityStore) -> pl.LazyFrame:
    employees = store.table("employees").with_columns(
        pl.col("department_id").cast(pl.Int64),
        pl.concat_str(
            [pl.col("first_name"), pl.col("last_name")], separator=" ", ignore_nulls=True
        ).alias("full_name"),
    )
    departments = _lookup(store, "departments", "department_id", "department")
    return employees.join(
        departments, on="department_id", how="left", maintain_order="left"
    )


def _suppliers_frame(store: EntityStore) -> pl.LazyFrame:
    return store.table("suppliers")


# ---------------------------------------------------------------------------
# Entity lists
# ---------------------------------------------------------------------------

CUSTOMERS = EntityQuery(
    name="customers",
    title="Customers",
    item_name="customer",
    route="customer/list",
    build=_customers_frame,
    filter_exprs={"name": pl.col("name"), "email": pl.col("email")},
    sort_by=("name",),
    columns=(
        ColumnDef(id="name", label="Name", width=160, filterable=True),
        ColumnDef(id="email", label="Email", width=220, filterable=True),
        ColumnDef(id="category", label="Category", width=150, field="category_description"),
        ColumnDef(id="iban", label="IBAN", width=240),
        ColumnDef(id="phone", label="Phone", width=140),
    ),
    wire_fields=(
        WireField("id"),
        WireField("name"),
        WireField("address"),
        WireField("email"),
        WireField("phone"),
        WireField("iban"),
        WireField(
            "customerCategory",
            children=(
                WireField("code", "category_code"),
                WireField("description", "category_description"),
            ),
            xml_name="category",
        ),
    ),
    # The XML item carries no address and lists iban right after id.
    xml_fields=(
        WireField("id"),
        WireField("iban"),
        WireField("name"),
        WireField("email"),
        WireField("phone"),
        WireField(
            "customerCategory",
            children=(WireField("code"), WireField("description")),
            xml_name="category",
        ),
    ),
)

EMPLOYEES = EntityQuery(
    name="employees",
    title="Employees",
    item_name="employee",
    route="employees/list",
    build=_employees_frame,
    filter_exprs={"name": pl.col("full_name"), "email": pl.col("email")},
    sort_by=("last_name", "first_name"),
    columns=(
        ColumnDef(id="name", label="Name", width=200, field="full_name", filterable=True),
        ColumnDef(id="code", label="Code", width=100),
        ColumnDef(id="department", label="Department", width=160, field="department_description"),
        ColumnDef(id="address", label="Address", width=200),
        ColumnDef(id="email", label="Email", width=220, filterable=True),
        ColumnDef(id="phone", label="Phone", width=140),
    ),
    wire_fields=(
        WireField("id"),
        WireField("code"),
        WireField("firstName", "first_name"),
        WireField("lastName", "last_name"),
        WireField("address"),
        WireField("email"),
        WireField("phone"),
        WireField(
            "department",
            children=(
                WireField("code", "department_code"),
                WireField("description", "department_description"),
            ),
        ),
    ),
)

SUPPLIERS = EntityQuery(
    name="suppliers",
    title="Suppliers",
    item_name="supplier",
    route="suppliers/list",
    build=_suppliers_frame,
    filter_exprs={"name": pl.col("name"), "email": pl.col("email")},
    sort_by=("name",),
    columns=(
        ColumnDef(id="name", label="Name", width=200, filterable=True),
        ColumnDef(id="address", label="Address", width=260),
        ColumnDef(id="email", label="Email", width=220, filterable=True),
        ColumnDef(id="phone", label="Phone", width=140),
    ),
    wire_fields=(
        WireField("id"),
        WireField("name"),
        WireField("address"),
        WireField("email"),
        WireField("phone"),
    ),
)

ENTITIES: dict[str, EntityQuery] = {
    query.name: query for query in (CUSTOMERS, EMPLOYEES, SUPPLIERS)
}


def get_entity(name: str) -> EntityQuery:
    """Look up an entity list by name (``"customers"``, ``"employees"``, ...).

    Raises:
        KeyError: If *name* is not a known entity.
    """
    try:
        return ENTITIES[name]
    except KeyError:
        raise KeyError(
            f"Unknown entity {name!r}; expected one of {', '.join(ENTITIES)}"
        ) from None


# ---------------------------------------------------------------------------
# Store registry
# ---------------------------------------------------------------------------
# The store holds LazyFrames, which cannot live in Reflex state.

_store_registry: dict[str, EntityStore] = {}


def set_entity_store(store: EntityStore | None) -> None:
    """Install the store used by the entity pages and API routes."""
    if store is None:
        _store_registry.pop("default", None)
    else:
        _store_registry["default"] = store


def get_entity_store() -> EntityStore:
    """Return the installed store.

    Without one, the directory named by ``ENTITY_GRID_DATA_DIR`` is
    scanned once and installed.

    Raises:
        LookupError: If no store is installed and the variable is unset.
        FileNotFoundError: If the variable names a missing directory.
    """
    store = _store_registry.get("default")
    if store is not None:
        return store
    data_dir = os.environ.get(DATA_DIR_ENV_VAR)
    if not data_dir:
        raise LookupError(
            f"No entity store configured; call set_entity_store() or set {DATA_DIR_ENV_VAR}"
        )
    store = EntityStore.from_directory(Path(data_dir))
    _store_registry["default"] = store
    return store
