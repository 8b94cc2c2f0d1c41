"""Reflex list grid: table, filter row, pagination bar and loading overlay.

The grid is rendered with plain Reflex components driven by a
:class:`~reflex_entity_grid.grid_state.ListGridMixin` state.  Two small
pieces need direct access to DOM events and are written as React
components injected into the compiled page via ``add_imports()`` +
``add_custom_code()``:

* ``GridColumnResizeHandle`` registers document-level ``pointermove`` /
  ``pointerup`` listeners only while its column is being dragged and
  removes them on release or unmount.
* ``GridFilterInput`` keeps a local copy of the draft text so the caret
  never jumps while server round-trips are in flight, reports each
  keystroke as a draft edit, and commits on blur or Enter.

Both use the ``@mui/material`` package for the text field, the same
npm stack as the MUI data grid wrapper this package grew out of.
"""

from collections.abc import Callable
from typing import Any

import reflex as rx

from reflex_entity_grid.models import ColumnDef

CellRenderer = Callable[[rx.Var], rx.Component]


# ---------------------------------------------------------------------------
# Event-handler argument helpers
# ---------------------------------------------------------------------------
# The injected widgets call their callbacks with plain values (column id,
# pointer x, text), so the event specs just forward them to the Python handlers.

def _on_resize_start_spec(column_id: rx.Var, client_x: rx.Var) -> list[rx.Var]:
    return [column_id, client_x]


def _on_resize_move_spec(column_id: rx.Var, client_x: rx.Var) -> list[rx.Var]:
    return [column_id, client_x]


def _on_resize_end_spec(column_id: rx.Var) -> list[rx.Var]:
    return [column_id]


def _on_filter_text_spec(column_id: rx.Var, value: rx.Var) -> list[rx.Var]:
    return [column_id, value]


# ---------------------------------------------------------------------------
# Inline JS widgets – injected into compiled pages via add_custom_code().
# ---------------------------------------------------------------------------
_INLINE_GRID_JS = """
// ---------------------------------------------------------------------------
// 1. Debug logger – opt-in via debugLog={true} prop.
// ---------------------------------------------------------------------------
const _gridLog = (() => {
  let _seq = 0;
  return (enabled, ...args) => {
    if (!enabled) return;
    _seq++;
    console.log(
      `%c[ListGrid #${_seq}] %c${new Date().toISOString()}`,
      "color:#2196f3;font-weight:bold",
      "color:#999",
      ...args
    );
  };
})();

// ---------------------------------------------------------------------------
// 2. Column resize handle.
//
// Pressing the handle opens a drag session: pointermove / pointerup
// listeners are added to the document so the drag keeps tracking when the
// pointer leaves the header.  They are removed on pointerup and, if the
// handle unmounts mid-drag, by the effect cleanup, which also reports the
// end of the drag so the server-side session does not stay open.
// ---------------------------------------------------------------------------
const GridColumnResizeHandle = (props) => {
  const { columnId, active, debugLog } = props;
  const log = !!debugLog;
  const propsRef = React.useRef(props);
  propsRef.current = props;
  const sessionRef = React.useRef(null);

  const release = React.useCallback(() => {
    const session = sessionRef.current;
    if (!session) return false;
    document.removeEventListener("pointermove", session.move);
    document.removeEventListener("pointerup", session.up);
    sessionRef.current = null;
    return true;
  }, []);

  React.useEffect(() => {
    return () => {
      if (release()) {
        const onEnd = propsRef.current.onResizeEnd;
        if (typeof onEnd === "function") onEnd(columnId);
      }
    };
  }, [release, columnId]);

  const handlePointerDown = React.useCallback((event) => {
    if (event.button !== undefined && event.button !== 0) return;
    event.preventDefault();
    event.stopPropagation();
    if (sessionRef.current) return;

    const move = (e) => {
      const onMove = propsRef.current.onResizeMove;
      if (typeof onMove === "function") onMove(columnId, e.clientX);
    };
    const up = (e) => {
      release();
      _gridLog(log, "resize end", { columnId, clientX: e.clientX });
      const onEnd = propsRef.current.onResizeEnd;
      if (typeof onEnd === "function") onEnd(columnId);
    };
    sessionRef.current = { move, up };
    document.addEventListener("pointermove", move);
    document.addEventListener("pointerup", up);

    _gridLog(log, "resize start", { columnId, clientX: event.clientX });
    const onStart = propsRef.current.onResizeStart;
    if (typeof onStart === "function") onStart(columnId, event.clientX);
  }, [columnId, release, log]);

  return React.createElement("div", {
    role: "separator",
    "aria-orientation": "vertical",
    "aria-label": `Resize column ${columnId}`,
    onPointerDown: handlePointerDown,
    style: {
      position: "absolute",
      right: 0,
      top: 0,
      height: "100%",
      width: "5px",
      cursor: "col-resize",
      touchAction: "none",
      zIndex: 1,
      backgroundColor: active ? "rgba(255, 255, 255, 0.35)" : "transparent",
    },
  });
};
GridColumnResizeHandle.displayName = "GridColumnResizeHandle";

// ---------------------------------------------------------------------------
// 3. Filter input with explicit commit.
//
// Every keystroke updates the local value and is reported as a draft edit;
// only blur and Enter report a commit.  The server copy of the draft only
// overwrites the local text while the input is not focused, so late
// round-trips never clobber what the user is typing.
// ---------------------------------------------------------------------------
const GridFilterInput = (props) => {
  const { columnId, value, loading, placeholder, debugLog } = props;
  const log = !!debugLog;
  const propsRef = React.useRef(props);
  propsRef.current = props;
  const focusedRef = React.useRef(false);
  const [localValue, setLocalValue] = React.useState(value ?? "");

  React.useEffect(() => {
    if (!focusedRef.current) setLocalValue(value ?? "");
  }, [value]);

  const commit = (text) => {
    _gridLog(log, "filter commit", { columnId, text, loading: !!propsRef.current.loading });
    const onCommit = propsRef.current.onCommit;
    if (typeof onCommit === "function") onCommit(columnId, text);
  };

  return React.createElement(MuiTextField_, {
    value: localValue,
    placeholder: placeholder || "Filter...",
    size: "small",
    fullWidth: true,
    variant: "outlined",
    onFocus: () => {
      focusedRef.current = true;
    },
    onChange: (e) => {
      const text = e.target.value;
      setLocalValue(text);
      const onDraft = propsRef.current.onDraftChange;
      if (typeof onDraft === "function") onDraft(columnId, text);
    },
    onBlur: (e) => {
      focusedRef.current = false;
      commit(e.target.value);
    },
    onKeyDown: (e) => {
      if (e.key === "Enter") {
        e.preventDefault();
        commit(e.target.value);
      }
    },
    slotProps: {
      htmlInput: {
        "aria-label": `Filter ${columnId}`,
        "aria-busy": loading ? "true" : "false",
      },
    },
    sx: { opacity: loading ? 0.6 : 1, backgroundColor: "background.paper" },
  });
};
GridFilterInput.displayName = "GridFilterInput";
"""


# ---------------------------------------------------------------------------
# Injected widgets
# ---------------------------------------------------------------------------

class _GridWidget(rx.Component):
    """Shared plumbing for the widgets defined in ``_INLINE_GRID_JS``."""

    library: str = "@mui/material"
    is_default: bool = False

    lib_dependencies: list[str] = [
        "@emotion/react@^11.14.0",
        "@emotion/styled@^11.14.0",
    ]

    @property
    def import_var(self) -> rx.ImportVar:
        """Install the npm package but do NOT emit an import for the tag.

        The widget tags are defined by ``add_custom_code()``, not exported
        by ``@mui/material``.
        """
        return rx.ImportVar(tag=None, render=False)

    def add_imports(self) -> dict:
        return {
            "@mui/material": [rx.ImportVar(tag="TextField", alias="MuiTextField_")],
            "react": [rx.ImportVar(tag="React", is_default=True)],
        }

    def add_custom_code(self) -> list[str]:
        """Inject the widget components into the compiled page."""
        return [_INLINE_GRID_JS]

    debug_log: rx.Var[bool]


class ColumnResizeHandle(_GridWidget):
    """Drag handle on the right edge of a header cell."""

    tag: str = "GridColumnResizeHandle"

    column_id: rx.Var[str]
    active: rx.Var[bool]

    on_resize_start: rx.EventHandler[_on_resize_start_spec]
    on_resize_move: rx.EventHandler[_on_resize_move_spec]
    on_resize_end: rx.EventHandler[_on_resize_end_spec]


class FilterInput(_GridWidget):
    """Text input bound to a column's draft filter."""

    tag: str = "GridFilterInput"

    column_id: rx.Var[str]
    value: rx.Var[str]
    loading: rx.Var[bool]
    placeholder: rx.Var[str]

    on_draft_change: rx.EventHandler[_on_filter_text_spec]
    on_commit: rx.EventHandler[_on_filter_text_spec]


# ---------------------------------------------------------------------------
# Grid view
# ---------------------------------------------------------------------------

def _cell_content(
    row: rx.Var,
    col: rx.Var,
    render_cells: dict[str, CellRenderer] | None,
) -> Any:
    default = row[col["field"].to(str)]
    if not render_cells:
        return default
    cases = [(column_id, render(row)) for column_id, render in render_cells.items()]
    # Every branch of a match must be a component.
    return rx.match(col["id"].to(str), *cases, rx.fragment(default))


def _header_row(state_cls: type, debug_log: bool) -> rx.Component:
    return rx.table.row(
        rx.foreach(
            state_cls.grid_columns,
            lambda col: rx.table.column_header_cell(
                rx.text(col["label"], weight="bold", truncate=True),
                ColumnResizeHandle.create(
                    column_id=col["id"],
                    active=state_cls.grid_resizing_column == col["id"],
                    debug_log=debug_log,
                    on_resize_start=state_cls.start_grid_resize,
                    on_resize_move=state_cls.move_grid_resize,
                    on_resize_end=state_cls.end_grid_resize,
                ),
                position="relative",
                user_select="none",
                background_color="var(--accent-9)",
                color="var(--accent-contrast)",
                style={"width": col["width"], "minWidth": col["width"]},
            ),
        ),
    )


def _filter_row(state_cls: type, placeholder: str, debug_log: bool) -> rx.Component:
    return rx.table.row(
        rx.foreach(
            state_cls.grid_columns,
            lambda col: rx.table.cell(
                rx.cond(
                    col["filterable"],
                    FilterInput.create(
                        column_id=col["id"],
                        value=state_cls.grid_draft_values[col["id"].to(str)],
                        loading=state_cls.grid_loading,
                        placeholder=placeholder,
                        debug_log=debug_log,
                        on_draft_change=state_cls.edit_grid_filter,
                        on_commit=state_cls.commit_grid_filter,
                    ),
                ),
                padding="8px",
            ),
        ),
    )


def _body_rows(
    state_cls: type,
    render_cells: dict[str, CellRenderer] | None,
    empty_text: str,
) -> rx.Component:
    # A single full-width row when there is nothing to show; it stays
    # blank while loading so the overlay is the only message.
    empty_row = rx.table.row(
        rx.table.cell(
            rx.cond(state_cls.grid_loading, "", empty_text),
            col_span=state_cls.grid_columns.length(),  # type: ignore[union-attr]
            text_align="center",
            padding_y="24px",
        ),
    )
    return rx.cond(
        state_cls.grid_row_count > 0,
        rx.foreach(
            state_cls.grid_page_rows,
            lambda row: rx.table.row(
                rx.foreach(
                    state_cls.grid_columns,
                    lambda col: rx.table.cell(
                        _cell_content(row, col, render_cells),
                        text_align=col["align"],
                        style={"width": col["width"]},
                    ),
                ),
                key=row[state_cls.grid_row_key].to(str),
            ),
        ),
        empty_row,
    )


def _pagination_bar(state_cls: type) -> rx.Component:
    return rx.hstack(
        rx.text("Rows per page:", size="2", color="var(--gray-11)"),
        rx.select(
            state_cls.grid_page_size_labels,
            value=state_cls.grid_page_size_label,
            on_change=state_cls.change_grid_page_size,
            disabled=state_cls.grid_loading,
            size="1",
        ),
        rx.text(state_cls.grid_displayed_rows_label, size="2"),
        rx.icon_button(
            rx.icon("chevron_left", size=16),
            on_click=state_cls.show_previous_grid_page,
            disabled=state_cls.grid_loading | ~state_cls.grid_has_previous_page,
            variant="ghost",
            size="1",
            aria_label="Previous page",
        ),
        rx.icon_button(
            rx.icon("chevron_right", size=16),
            on_click=state_cls.show_next_grid_page,
            disabled=state_cls.grid_loading | ~state_cls.grid_has_next_page,
            variant="ghost",
            size="1",
            aria_label="Next page",
        ),
        justify="end",
        align="center",
        spacing="3",
        padding="0.5em 1em",
        width="100%",
    )


def _loading_overlay(state_cls: type, loading_text: str) -> rx.Component:
    # Layered over the table (absolute), so the table keeps its layout and
    # nothing below it jumps when loading toggles.
    return rx.cond(
        state_cls.grid_loading,
        rx.center(
            rx.vstack(
                rx.spinner(size="3"),
                rx.text(loading_text, size="4", weight="medium"),
                align="center",
                spacing="3",
            ),
            position="absolute",
            top="0",
            left="0",
            right="0",
            bottom="0",
            z_index="10",
            color="white",
            background="rgba(0, 0, 0, 0.3)",
            border_radius="inherit",
        ),
    )


def grid_view(
    state_cls: type,
    *,
    render_cells: dict[str, CellRenderer] | None = None,
    empty_text: str = "No data found",
    loading_text: str = "Searching...",
    filter_placeholder: str = "Filter...",
    min_width: str = "650px",
    debug_log: bool = False,
    **box_props: Any,
) -> rx.Component:
    """Return the list grid bound to a :class:`ListGridMixin` state.

    Args:
        state_cls: The ``rx.State`` subclass that also inherits from
            :class:`~reflex_entity_grid.grid_state.ListGridMixin`.
        render_cells: Optional ``{column_id: fn(row)}`` overrides for cell
            rendering.  *row* is the row ``Var``; columns without an
            override show ``row[column.field]``.
        empty_text: Message of the "no data" row.
        loading_text: Caption under the overlay spinner.
        filter_placeholder: Placeholder of the filter inputs.
        min_width: CSS minimum width of the table.
        debug_log: Enable browser console debug logging in the widgets.
        **box_props: Extra props for the outer container.

    Returns:
        A Reflex component.
    """
    box_props.setdefault("border_radius", "8px")
    box_props.setdefault("border", "1px solid var(--gray-a6)")
    box_props.setdefault("background", "var(--color-panel-solid)")
    return rx.box(
        _loading_overlay(state_cls, loading_text),
        rx.box(
            rx.table.root(
                rx.table.header(
                    _header_row(state_cls, debug_log),
                    rx.cond(
                        state_cls.grid_show_filter_row,
                        _filter_row(state_cls, filter_placeholder, debug_log),
                    ),
                ),
                rx.table.body(_body_rows(state_cls, render_cells, empty_text)),
                min_width=min_width,
                width="100%",
                style={"tableLayout": "fixed"},
            ),
            overflow_x="auto",
        ),
        _pagination_bar(state_cls),
        position="relative",
        **box_props,
    )


# ---------------------------------------------------------------------------
# Namespace (so users can write ``list_grid(State)`` and ``list_grid.column_def``)
# ---------------------------------------------------------------------------

class ListGridNamespace(rx.ComponentNamespace):
    """Namespace for the list grid component family."""

    column_def = ColumnDef
    filter_input = FilterInput.create
    resize_handle = ColumnResizeHandle.create
    __call__ = staticmethod(grid_view)


list_grid = ListGridNamespace()
