"""Entity list pages: a list grid wired to an entity query.

:class:`EntityListMixin` plays the host role for :class:`ListGridMixin`:
it configures the grid for one entity when the page loads, re-queries the
backend whenever the committed filters change and exports the loaded
rows as XML.

Typical usage::

    class CustomerListState(EntityListMixin, rx.State):
        pass

    def customers() -> rx.Component:
        return entity_list_page(CustomerListState)

    app.add_page(
        customers,
        route="/customers",
        on_load=CustomerListState.open_entity_list("customers"),
    )
"""

import time
from collections.abc import Sequence
from typing import Any

import polars as pl
import reflex as rx

from reflex_entity_grid.datagrid import CellRenderer, list_grid
from reflex_entity_grid.entities import get_entity, get_entity_store
from reflex_entity_grid.filters import active_filters
from reflex_entity_grid.grid_state import ListGridMixin
from reflex_entity_grid.models import FilterEntry
from reflex_entity_grid.queries import run_list_query
from reflex_entity_grid.xml_export import rows_to_xml, xml_filename

ERROR_TOAST_DURATION_MS: int = 6000

_LOAD_ERRORS: tuple[type[Exception], ...] = (
    pl.exceptions.PolarsError,
    OSError,
    LookupError,
    ValueError,
)


class EntityListMixin(ListGridMixin, mixin=True):
    """Host state for one entity list page."""

    entity_title: str = ""

    # -- Backend-only vars (not sent to frontend) --
    _entity_name: str = ""

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def open_entity_list(self, entity_name: str):
        """Configure the grid for *entity_name* and run the initial query.

        Used as the page ``on_load`` handler.  The grid starts from empty
        rows with the loading overlay shown until the first result arrives.
        """
        try:
            query = get_entity(entity_name)
        except KeyError as exc:
            print(f"[EntityList] {exc}")
            yield rx.toast.error(str(exc), duration=ERROR_TOAST_DURATION_MS, close_button=True)
            return

        self._entity_name = query.name  # type: ignore[assignment]
        self.entity_title = query.title  # type: ignore[assignment]
        self._configure_grid(query.columns, row_key=query.key)
        self.grid_rows = []  # type: ignore[assignment]
        yield from self._load_entities([])

    def handle_grid_filter_change(self, filters: list[dict[str, str]]):
        """Re-query with the committed filters (blank values dropped)."""
        if not self._entity_name:
            return
        yield from self._load_entities(filters)

    def reload_entity_list(self):
        """Run the current query again, e.g. after a failed load."""
        if not self._entity_name or self.grid_loading:
            return
        yield from self._load_entities(self.grid_committed_filters)

    def download_entity_xml(self) -> rx.event.EventSpec | None:
        """Download the loaded rows as ``<entity>.xml``."""
        if not self._entity_name:
            return None
        query = get_entity(self._entity_name)
        return rx.download(  # type: ignore[return-value]
            data=rows_to_xml(query, self.grid_rows),
            filename=xml_filename(query),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load_entities(self, filters: Sequence[FilterEntry]):
        """Query the backend and hand the result to the grid.

        A generator so the loading overlay reaches the frontend before the
        query runs.  On failure the previous rows are kept, loading is
        cleared and an error toast is shown; nothing is retried
        automatically.
        """
        self.grid_loading = True  # type: ignore[assignment]
        yield

        query = get_entity(self._entity_name)
        constraints = active_filters(filters)
        t0 = time.perf_counter()
        try:
            rows: list[dict[str, Any]] = run_list_query(
                query, get_entity_store(), constraints
            )
        except _LOAD_ERRORS as exc:
            self.grid_loading = False  # type: ignore[assignment]
            print(f"[EntityList] {query.name}: load failed: {exc!r}")
            yield rx.toast.error(
                f"Could not load {query.title.lower()}: {exc}",
                duration=ERROR_TOAST_DURATION_MS,
                close_button=True,
            )
            return

        self._replace_grid_rows(rows)
        self.grid_loading = False  # type: ignore[assignment]
        elapsed_ms = (time.perf_counter() - t0) * 1000
        print(
            f"[EntityList] {query.name}: {len(rows)} rows for {constraints}, "
            f"elapsed={elapsed_ms:.1f}ms"
        )


# ---------------------------------------------------------------------------
# UI helper
# ---------------------------------------------------------------------------

def entity_list_page(
    state_cls: type,
    *,
    render_cells: dict[str, CellRenderer] | None = None,
    **grid_kwargs: Any,
) -> rx.Component:
    """Heading, toolbar buttons and the list grid of an entity page.

    Args:
        state_cls: A state class inheriting from :class:`EntityListMixin`.
        render_cells: Per-column cell renderers, see
            :func:`~reflex_entity_grid.datagrid.grid_view`.
        **grid_kwargs: Extra keyword arguments for the grid.
    """
    busy = state_cls.grid_loading
    return rx.container(
        rx.hstack(
            rx.heading(state_cls.entity_title, size="6"),
            rx.spacer(),
            rx.icon_button(
                rx.icon("refresh_cw", size=16),
                on_click=state_cls.reload_entity_list,
                disabled=busy,
                variant="soft",
                aria_label="Reload",
            ),
            rx.button(
                rx.icon("download", size=16),
                "Export XML",
                on_click=state_cls.download_entity_xml,
                disabled=busy | (state_cls.grid_row_count == 0),
            ),
            align="center",
            width="100%",
            margin_bottom="1em",
        ),
        list_grid(state_cls, render_cells=render_cells, **grid_kwargs),
        size="4",
        padding_y="2em",
    )
