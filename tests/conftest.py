"""Shared fixtures: small in-memory tables and the same tables on disk."""

from pathlib import Path

import polars as pl
import pytest

from reflex_entity_grid.entities import set_entity_store
from reflex_entity_grid.queries import EntityStore

CUSTOMERS = pl.DataFrame(
    {
        "id": [1, 2, 3, 4],
        "name": ["Rossi Forniture", "acme trading", "Bianchi", "Zeta"],
        "address": ["Via Roma 1", "1 Main St", "Corso Italia 4", "Via Po 2"],
        "email": ["info@rossi.it", "sales@acme.com", "ROSSI@bianchi.it", None],
        "phone": ["0101", "0102", "0103", "0104"],
        "iban": ["IT01", "GB02", "IT03", "IT04"],
        "customer_category_id": [1, None, 2, 1],
    }
)

CUSTOMER_CATEGORIES = pl.DataFrame(
    {
        "id": [1, 2],
        "code": ["GOLD", "SILVER"],
        "description": ["Gold customers", "Silver customers"],
    }
)

EMPLOYEES = pl.DataFrame(
    {
        "id": [1, 2, 3],
        "code": ["E001", "E002", "E003"],
        "first_name": ["Marco", "Anna", "Luca"],
        "last_name": ["Verdi", "Verdi", "Bianchi"],
        "department_id": [1, 2, None],
        "address": ["Via A", "Via B", "Via C"],
        "email": ["marco@example.com", "anna@example.com", "luca@example.com"],
        "phone": ["1", "2", "3"],
    }
)

DEPARTMENTS = pl.DataFrame(
    {
        "id": [1, 2],
        "code": ["ADM", "SAL"],
        "description": ["Administration", "Sales"],
    }
)

SUPPLIERS = pl.DataFrame(
    {
        "id": [1, 2],
        "name": ["Metalli Uniti", "Carta & Co"],
        "address": ["Via Acciaio 45", "Via Cartiera 1"],
        "email": ["vendite@metalli.it", "ordini@carta.it"],
        "phone": ["0301", "0302"],
    }
)

TABLES: dict[str, pl.DataFrame] = {
    "customers": CUSTOMERS,
    "customer_categories": CUSTOMER_CATEGORIES,
    "employees": EMPLOYEES,
    "departments": DEPARTMENTS,
    "suppliers": SUPPLIERS,
}


@pytest.fixture
def store() -> EntityStore:
    return EntityStore(TABLES)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """The fixture tables written as CSV files, plus a file to skip."""
    for name, df in TABLES.items():
        df.write_csv(tmp_path / f"{name}.csv")
    (tmp_path / "notes.txt").write_text("not a table\n")
    return tmp_path


@pytest.fixture
def installed_store(store: EntityStore):
    set_entity_store(store)
    yield store
    set_entity_store(None)
