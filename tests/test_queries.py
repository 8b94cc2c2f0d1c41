"""Tests for the polars-backed list queries."""

from pathlib import Path

import polars as pl
import pytest

from reflex_entity_grid.entities import CUSTOMERS, EMPLOYEES, SUPPLIERS
from reflex_entity_grid.queries import (
    EntityStore,
    WireField,
    run_list_query,
    scan_file,
    to_record,
)


def _names(rows):
    return [row["name"] for row in rows]


class TestScanFile:
    def test_csv(self, data_dir: Path):
        lf = scan_file(data_dir / "suppliers.csv")
        assert lf.collect().height == 2

    def test_tsv(self, tmp_path: Path):
        path = tmp_path / "codes.tsv"
        path.write_text("id\tcode\n1\tA\n2\tB\n")
        assert scan_file(path).collect()["code"].to_list() == ["A", "B"]

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            scan_file(tmp_path / "nope.csv")

    def test_unsupported_extension(self, data_dir: Path):
        with pytest.raises(ValueError, match="Unsupported"):
            scan_file(data_dir / "notes.txt")


class TestEntityStore:
    def test_from_directory_uses_file_stems(self, data_dir: Path):
        store = EntityStore.from_directory(data_dir)
        assert store.names() == [
            "customer_categories",
            "customers",
            "departments",
            "employees",
            "suppliers",
        ]

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            EntityStore.from_directory(tmp_path / "missing")

    def test_missing_table(self):
        with pytest.raises(KeyError, match="customers"):
            EntityStore().table("customers")

    def test_dataframes_are_made_lazy(self):
        store = EntityStore({"t": pl.DataFrame({"a": [1]})})
        assert isinstance(store.table("t"), pl.LazyFrame)


class TestCustomerQuery:
    def test_no_filters_sorted_by_name_ignoring_case(self, store):
        rows = run_list_query(CUSTOMERS, store)
        assert _names(rows) == ["acme trading", "Bianchi", "Rossi Forniture", "Zeta"]

    def test_name_filter_is_case_insensitive(self, store):
        rows = run_list_query(CUSTOMERS, store, {"name": "ROSS"})
        assert _names(rows) == ["Rossi Forniture"]

    def test_email_filter(self, store):
        rows = run_list_query(CUSTOMERS, store, {"email": "rossi"})
        assert _names(rows) == ["Bianchi", "Rossi Forniture"]

    def test_filters_are_combined(self, store):
        assert run_list_query(CUSTOMERS, store, {"name": "ross", "email": "bianchi"}) == []

    def test_blank_filters_are_skipped(self, store):
        assert len(run_list_query(CUSTOMERS, store, {"name": "  ", "email": ""})) == 4

    def test_unknown_field_is_ignored(self, store):
        assert len(run_list_query(CUSTOMERS, store, {"iban": "IT"})) == 4

    def test_needle_is_literal(self, store):
        assert run_list_query(CUSTOMERS, store, {"name": "."}) == []

    def test_null_values_never_match(self, store):
        rows = run_list_query(CUSTOMERS, store, {"email": "."})
        assert "Zeta" not in _names(rows)
        assert len(rows) == 3

    def test_category_is_joined(self, store):
        rows = {row["id"]: row for row in run_list_query(CUSTOMERS, store)}
        assert rows[1]["category_code"] == "GOLD"
        assert rows[3]["category_description"] == "Silver customers"
        assert rows[2]["category_code"] is None

    def test_missing_lookup_table(self, store):
        partial = EntityStore({"customers": store.table("customers")})
        with pytest.raises(KeyError, match="customer_categories"):
            run_list_query(CUSTOMERS, partial)


class TestEmployeeQuery:
    def test_sorted_by_last_then_first_name(self, store):
        rows = run_list_query(EMPLOYEES, store)
        assert [row["full_name"] for row in rows] == [
            "Luca Bianchi",
            "Anna Verdi",
            "Marco Verdi",
        ]

    def test_name_filter_spans_first_and_last_name(self, store):
        rows = run_list_query(EMPLOYEES, store, {"name": "anna ver"})
        assert [row["id"] for row in rows] == [2]

    def test_department_is_joined(self, store):
        rows = {row["id"]: row for row in run_list_query(EMPLOYEES, store)}
        assert rows[2]["department_description"] == "Sales"
        assert rows[3]["department_description"] is None


class TestSupplierQuery:
    def test_sorted_by_name(self, store):
        assert _names(run_list_query(SUPPLIERS, store)) == ["Carta & Co", "Metalli Uniti"]


class TestRecords:
    def test_customer_record_nests_category(self, store):
        rows = {row["id"]: row for row in run_list_query(CUSTOMERS, store)}
        record = to_record(CUSTOMERS, rows[1])
        assert record == {
            "id": 1,
            "name": "Rossi Forniture",
            "address": "Via Roma 1",
            "email": "info@rossi.it",
            "phone": "0101",
            "iban": "IT01",
            "customerCategory": {"code": "GOLD", "description": "Gold customers"},
        }

    def test_missing_category_is_null(self, store):
        rows = {row["id"]: row for row in run_list_query(CUSTOMERS, store)}
        assert to_record(CUSTOMERS, rows[2])["customerCategory"] is None

    def test_employee_record_uses_camel_case(self, store):
        rows = {row["id"]: row for row in run_list_query(EMPLOYEES, store)}
        record = to_record(EMPLOYEES, rows[1])
        assert record["firstName"] == "Marco"
        assert record["lastName"] == "Verdi"
        assert record["department"] == {"code": "ADM", "description": "Administration"}

    def test_leaf_defaults_to_its_name(self):
        assert WireField("email").element == "email"
        assert WireField("customerCategory", xml_name="category").element == "category"
