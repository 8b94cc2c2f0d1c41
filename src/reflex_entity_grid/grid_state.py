"""Reflex state mixin holding the client state of one list grid.

``ListGridMixin`` is a Reflex **state mixin** (``mixin=True``).  Each
concrete subclass gets its own set of ``grid_*`` reactive variables, so
several grids (one per entity page) never share filters, widths or the
current page.

The grid never talks to the backend.  The host state:

* configures the columns once when its page mounts
  (:meth:`ListGridMixin._configure_grid`),
* sets ``grid_loading`` around its own queries and hands back the
  result with :meth:`ListGridMixin._replace_grid_rows`,
* overrides :meth:`ListGridMixin.handle_grid_filter_change`, which is
  chained after every real filter commit with the full committed list.

Typical usage::

    class CustomerGrid(ListGridMixin, rx.State):
        def mount(self):
            self._configure_grid(CUSTOMER_COLUMNS)

        def handle_grid_filter_change(self, filters: list[dict[str, str]]):
            self.grid_loading = True
            yield
            self._replace_grid_rows(query_customers(active_filters(filters)))
            self.grid_loading = False
"""

from collections.abc import Sequence
from typing import Any

import reflex as rx

from reflex_entity_grid.filters import (
    commit_filter,
    filter_values_by_column,
    filterable_column_ids,
    has_filterable_columns,
    upsert_filter,
)
from reflex_entity_grid.models import ColumnDef, normalize_columns
from reflex_entity_grid.pagination import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_PAGE_SIZE_OPTIONS,
    clamp_page,
    displayed_rows_label,
    normalize_page_size,
    page_count,
    page_slice,
)
from reflex_entity_grid.resize import ResizeSession, apply_resize, begin_resize


class ListGridMixin(rx.State, mixin=True):
    """Reflex State mixin for a paginated, filterable, resizable list grid.

    All state variable names are prefixed with ``grid_`` to avoid
    collisions when composed with host state.
    """

    # -- Host-supplied data --
    grid_rows: list[dict[str, Any]] = []
    grid_columns: list[dict[str, Any]] = []
    grid_row_key: str = "id"
    grid_loading: bool = False

    # -- Filters: live typing vs last confirmed value --
    grid_draft_filters: list[dict[str, str]] = []
    grid_committed_filters: list[dict[str, str]] = []

    # -- Pagination --
    grid_page: int = 0
    grid_page_size: int = DEFAULT_PAGE_SIZE
    grid_page_size_options: list[int] = list(DEFAULT_PAGE_SIZE_OPTIONS)

    # -- Resize session (empty column id means idle) --
    grid_resizing_column: str = ""

    # -- Backend-only vars (not sent to frontend) --
    _grid_resize_anchor_x: float = 0.0
    _grid_resize_anchor_width: int = 0

    # ------------------------------------------------------------------
    # Computed vars
    # ------------------------------------------------------------------

    @rx.var
    def grid_page_rows(self) -> list[dict[str, Any]]:
        """Rows of the current page."""
        return page_slice(self.grid_rows, self.grid_page, self.grid_page_size)

    @rx.var
    def grid_row_count(self) -> int:
        return len(self.grid_rows)

    @rx.var
    def grid_displayed_rows_label(self) -> str:
        return displayed_rows_label(len(self.grid_rows), self.grid_page, self.grid_page_size)

    @rx.var
    def grid_has_previous_page(self) -> bool:
        return self.grid_page > 0

    @rx.var
    def grid_has_next_page(self) -> bool:
        return self.grid_page + 1 < page_count(len(self.grid_rows), self.grid_page_size)

    @rx.var
    def grid_show_filter_row(self) -> bool:
        """True when at least one column is filterable."""
        return has_filterable_columns(self.grid_columns)

    @rx.var
    def grid_draft_values(self) -> dict[str, str]:
        """Draft filter value for every column id (``""`` when unset)."""
        return filter_values_by_column(self.grid_draft_filters, self.grid_columns)

    @rx.var
    def grid_page_size_labels(self) -> list[str]:
        return [str(size) for size in self.grid_page_size_options]

    @rx.var
    def grid_page_size_label(self) -> str:
        """Current page size as the ``<select>`` value."""
        return str(self.grid_page_size)

    # ------------------------------------------------------------------
    # Host API (backend-only helpers)
    # ------------------------------------------------------------------

    def _configure_grid(
        self,
        columns: Sequence[ColumnDef | dict[str, Any]],
        row_key: str = "id",
        default_page_size: int = DEFAULT_PAGE_SIZE,
        page_size_options: Sequence[int] = DEFAULT_PAGE_SIZE_OPTIONS,
    ) -> None:
        """Install the column set and reset filters, paging and resizing.

        Called by the host when its page mounts.

        Args:
            columns: Column descriptors, as :class:`ColumnDef` or dicts.
            row_key: Row field used as the stable per-row render key.
            default_page_size: Initial page size; must be one of
                *page_size_options*.
            page_size_options: Allowed page sizes for the rows-per-page
                selector.

        Raises:
            ValueError: On an empty option list, a default page size that
                is not an option, or invalid column descriptors.
        """
        options = sorted({int(size) for size in page_size_options})
        if not options:
            raise ValueError("page_size_options must not be empty")
        if default_page_size not in options:
            raise ValueError(
                f"default_page_size {default_page_size} is not one of {options}"
            )

        self.grid_columns = normalize_columns(list(columns))  # type: ignore[assignment]
        self.grid_row_key = row_key  # type: ignore[assignment]
        self.grid_page_size_options = options  # type: ignore[assignment]
        self.grid_page_size = default_page_size  # type: ignore[assignment]
        self.grid_page = 0  # type: ignore[assignment]
        self.grid_draft_filters = []  # type: ignore[assignment]
        self.grid_committed_filters = []  # type: ignore[assignment]
        self.grid_resizing_column = ""  # type: ignore[assignment]

    def _replace_grid_rows(self, rows: list[dict[str, Any]]) -> None:
        """Hand a new result set to the grid.

        The current page is kept when it still exists.  Filter-driven
        loads start from page 0 anyway because the commit resets it.
        """
        self.grid_rows = rows  # type: ignore[assignment]
        self.grid_page = clamp_page(self.grid_page, len(rows), self.grid_page_size)  # type: ignore[assignment]

    def _grid_resize_session(self) -> ResizeSession | None:
        if not self.grid_resizing_column:
            return None
        return ResizeSession(
            self.grid_resizing_column,
            self._grid_resize_anchor_x,
            self._grid_resize_anchor_width,
        )

    # ------------------------------------------------------------------
    # Host hook
    # ------------------------------------------------------------------

    def handle_grid_filter_change(self, filters: list[dict[str, str]]):
        """Called after every commit that changed the committed filters.

        Override in the host state to re-query the backend.  *filters* is
        the full committed list in commit order, including entries whose
        value is empty.
        """
        print(f"[ListGrid] committed filters: {filters} (no host handler)")

    # ------------------------------------------------------------------
    # Filter event handlers
    # ------------------------------------------------------------------

    def edit_grid_filter(self, column_id: str, value: str) -> None:
        """Record a keystroke in a filter input (draft only, no host effect)."""
        self.grid_draft_filters = upsert_filter(self.grid_draft_filters, column_id, value)  # type: ignore[assignment]

    def commit_grid_filter(self, column_id: str, value: str):
        """Promote a filter value on blur or Enter.

        Unchanged values are ignored, so re-focusing and leaving an input
        neither notifies the host nor moves the page.  While the grid is
        loading the commit is dropped; the typed text stays in the draft
        and is committed by the next blur or Enter.
        """
        self.grid_draft_filters = upsert_filter(self.grid_draft_filters, column_id, value)  # type: ignore[assignment]
        if self.grid_loading:
            print(f"[ListGrid] commit on '{column_id}' ignored while loading")
            return None

        committed = commit_filter(
            self.grid_committed_filters,
            column_id,
            value,
            filterable=filterable_column_ids(self.grid_columns),
        )
        if committed is None:
            return None

        self.grid_committed_filters = committed  # type: ignore[assignment]
        self.grid_page = 0  # type: ignore[assignment]
        print(f"[ListGrid] filter commit: {column_id}={value!r}, {len(committed)} committed")
        return type(self).handle_grid_filter_change(committed)

    # ------------------------------------------------------------------
    # Pagination event handlers
    # ------------------------------------------------------------------

    def change_grid_page(self, page: int) -> None:
        """Jump to *page*.  A page past the end simply shows no rows."""
        if self.grid_loading:
            return
        self.grid_page = max(int(page), 0)  # type: ignore[assignment]

    def show_previous_grid_page(self) -> None:
        if self.grid_loading or self.grid_page == 0:
            return
        self.grid_page = self.grid_page - 1  # type: ignore[assignment]

    def show_next_grid_page(self) -> None:
        if self.grid_loading:
            return
        if self.grid_page + 1 < page_count(len(self.grid_rows), self.grid_page_size):
            self.grid_page = self.grid_page + 1  # type: ignore[assignment]

    def change_grid_page_size(self, value: str) -> None:
        """Apply a rows-per-page choice and go back to the first page."""
        if self.grid_loading:
            return
        size = normalize_page_size(value, self.grid_page_size_options, self.grid_page_size)
        if size == self.grid_page_size:
            return
        self.grid_page_size = size  # type: ignore[assignment]
        self.grid_page = 0  # type: ignore[assignment]

    # ------------------------------------------------------------------
    # Resize event handlers
    # ------------------------------------------------------------------

    def start_grid_resize(self, column_id: str, client_x: float) -> None:
        """Pointer pressed on a resize handle."""
        session = begin_resize(
            self._grid_resize_session(), self.grid_columns, column_id, client_x
        )
        if session is None:
            print(
                f"[ListGrid] resize press on '{column_id}' ignored "
                f"(active: '{self.grid_resizing_column}')"
            )
            return
        self.grid_resizing_column = session.column_id  # type: ignore[assignment]
        self._grid_resize_anchor_x = session.anchor_x  # type: ignore[assignment]
        self._grid_resize_anchor_width = session.anchor_width  # type: ignore[assignment]

    def move_grid_resize(self, column_id: str, client_x: float) -> None:
        """Pointer moved while dragging."""
        session = self._grid_resize_session()
        if session is None or session.column_id != column_id:
            return
        self.grid_columns = apply_resize(self.grid_columns, session, client_x)  # type: ignore[assignment]

    def end_grid_resize(self, column_id: str) -> None:
        """Pointer released (or handle unmounted) after a drag."""
        if self.grid_resizing_column != column_id:
            return
        self.grid_resizing_column = ""  # type: ignore[assignment]
