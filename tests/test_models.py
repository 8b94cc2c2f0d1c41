"""Tests for column normalisation."""

import pytest

from reflex_entity_grid.models import DEFAULT_COLUMN_WIDTH, normalize_columns


class TestNormalizeColumns:
    def test_defaults(self):
        (col,) = normalize_columns([{"id": "name", "label": "Name"}])
        assert col == {
            "id": "name",
            "label": "Name",
            "width": DEFAULT_COLUMN_WIDTH,
            "field": "name",
            "filterable": False,
            "align": "left",
        }

    def test_explicit_values(self):
        (col,) = normalize_columns(
            [
                {
                    "id": "category",
                    "label": "Category",
                    "width": 180,
                    "field": "category_description",
                    "filterable": True,
                    "align": "center",
                }
            ]
        )
        assert col["field"] == "category_description"
        assert col["width"] == 180
        assert col["filterable"] is True
        assert col["align"] == "center"

    def test_narrow_width_is_raised_to_minimum(self):
        (col,) = normalize_columns([{"id": "code", "label": "Code", "width": 10}])
        assert col["width"] == 50

    def test_label_defaults_to_id(self):
        (col,) = normalize_columns([{"id": "code"}])
        assert col["label"] == "code"

    def test_duplicate_id(self):
        with pytest.raises(ValueError, match="Duplicate"):
            normalize_columns([{"id": "name"}, {"id": "name"}])

    def test_missing_id(self):
        with pytest.raises(ValueError):
            normalize_columns([{"label": "Name"}])
