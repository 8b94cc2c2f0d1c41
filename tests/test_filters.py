"""Tests for draft / committed filter bookkeeping."""

from reflex_entity_grid.filters import (
    active_filters,
    commit_filter,
    filter_value,
    filter_values_by_column,
    filterable_column_ids,
    has_filterable_columns,
    upsert_filter,
)

COLUMNS = [
    {"id": "name", "filterable": True},
    {"id": "email", "filterable": True},
    {"id": "phone", "filterable": False},
]


class TestUpsertFilter:
    def test_appends_new_column(self):
        entries = upsert_filter([], "name", "ro")
        assert entries == [{"column_id": "name", "value": "ro"}]

    def test_replaces_in_place_keeping_order(self):
        entries = [
            {"column_id": "name", "value": "ro"},
            {"column_id": "email", "value": "x"},
        ]
        updated = upsert_filter(entries, "name", "ros")
        assert updated == [
            {"column_id": "name", "value": "ros"},
            {"column_id": "email", "value": "x"},
        ]

    def test_does_not_mutate_input(self):
        entries = [{"column_id": "name", "value": "ro"}]
        upsert_filter(entries, "name", "ros")
        assert entries == [{"column_id": "name", "value": "ro"}]

    def test_empty_value_is_kept(self):
        entries = upsert_filter([{"column_id": "name", "value": "ro"}], "name", "")
        assert entries == [{"column_id": "name", "value": ""}]


class TestCommitFilter:
    def test_first_commit_appends(self):
        committed = commit_filter([], "name", "ros")
        assert committed == [{"column_id": "name", "value": "ros"}]

    def test_unchanged_value_returns_none(self):
        committed = [{"column_id": "name", "value": "ros"}]
        assert commit_filter(committed, "name", "ros") is None

    def test_empty_commit_on_absent_column_is_no_change(self):
        assert commit_filter([], "name", "") is None

    def test_changed_value_replaces(self):
        committed = [
            {"column_id": "name", "value": "ros"},
            {"column_id": "email", "value": "acme"},
        ]
        assert commit_filter(committed, "name", "") == [
            {"column_id": "name", "value": ""},
            {"column_id": "email", "value": "acme"},
        ]

    def test_commit_order_is_preserved(self):
        committed = commit_filter([], "email", "acme")
        committed = commit_filter(committed, "name", "ros")
        assert [e["column_id"] for e in committed] == ["email", "name"]

    def test_non_filterable_column_is_rejected(self):
        filterable = filterable_column_ids(COLUMNS)
        assert commit_filter([], "phone", "555", filterable=filterable) is None


class TestColumnHelpers:
    def test_filterable_ids_in_column_order(self):
        assert filterable_column_ids(COLUMNS) == ["name", "email"]

    def test_filter_row_visibility(self):
        assert has_filterable_columns(COLUMNS)
        assert not has_filterable_columns([{"id": "phone", "filterable": False}])
        assert not has_filterable_columns([])

    def test_values_by_column_fill_blanks(self):
        entries = [{"column_id": "email", "value": "acme"}]
        assert filter_values_by_column(entries, COLUMNS) == {
            "name": "",
            "email": "acme",
            "phone": "",
        }

    def test_filter_value_absent(self):
        assert filter_value([], "name") == ""


class TestActiveFilters:
    def test_blank_values_are_dropped(self):
        entries = [
            {"column_id": "name", "value": "   "},
            {"column_id": "email", "value": "acme"},
            {"column_id": "code", "value": ""},
        ]
        assert active_filters(entries) == {"email": "acme"}

    def test_value_is_not_trimmed(self):
        assert active_filters([{"column_id": "name", "value": " ros "}]) == {"name": " ros "}
