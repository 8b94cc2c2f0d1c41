"""Tests for the column resize session."""

from reflex_entity_grid.resize import (
    MIN_COLUMN_WIDTH,
    ResizeSession,
    apply_resize,
    begin_resize,
    resized_width,
)

COLUMNS = [
    {"id": "name", "width": 120},
    {"id": "email", "width": 200},
]


class TestResizedWidth:
    def test_follows_pointer(self):
        assert resized_width(120, 100.0, 150.0) == 170
        assert resized_width(120, 100.0, 80.0) == 100

    def test_floor(self):
        assert resized_width(120, 100.0, -500.0) == MIN_COLUMN_WIDTH == 50

    def test_custom_floor(self):
        assert resized_width(120, 100.0, 0.0, min_width=80) == 80


class TestSession:
    def test_begin_captures_anchors(self):
        session = begin_resize(None, COLUMNS, "email", 300.0)
        assert session == ResizeSession("email", 300.0, 200)

    def test_second_press_is_ignored(self):
        active = ResizeSession("name", 10.0, 120)
        assert begin_resize(active, COLUMNS, "email", 300.0) is None

    def test_unknown_column_is_ignored(self):
        assert begin_resize(None, COLUMNS, "phone", 300.0) is None

    def test_apply_only_touches_session_column(self):
        session = ResizeSession("name", 10.0, 120)
        resized = apply_resize(COLUMNS, session, 40.0)
        assert resized == [{"id": "name", "width": 150}, {"id": "email", "width": 200}]
        assert COLUMNS[0]["width"] == 120

    def test_moves_are_relative_to_the_press(self):
        session = ResizeSession("name", 10.0, 120)
        columns = apply_resize(COLUMNS, session, 60.0)
        columns = apply_resize(columns, session, 20.0)
        assert columns[0]["width"] == 130
