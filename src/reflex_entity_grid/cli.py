"""CLI for reflex-entity-grid -- browse and export entity lists.

Usage::

    # Serve the customer / employee / supplier pages for a data directory
    reflex-entity-grid serve ./data

    # Print matching records as JSON
    reflex-entity-grid list customers --data-dir ./data --filter name=ros

    # Export matching records as XML
    reflex-entity-grid export customers --data-dir ./data -o customers.xml

The data directory holds one file per table (``customers.csv``,
``customer_categories.csv``, ``employees.csv``, ``departments.csv``,
``suppliers.csv``); any format supported by ``scan_file`` works.
"""

import contextlib
import json
import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Annotated, Any, NoReturn, Optional

import polars as pl
import typer

from reflex_entity_grid.entities import DATA_DIR_ENV_VAR, get_entity
from reflex_entity_grid.queries import EntityQuery, EntityStore, run_list_query, to_records
from reflex_entity_grid.xml_export import rows_to_xml

app = typer.Typer(
    name="reflex-entity-grid",
    help="Browse customer, employee and supplier lists in the browser or from the shell.",
    no_args_is_help=True,
)


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _parse_filters(values: list[str] | None) -> dict[str, str]:
    """Turn ``["name=ros", "email=acme"]`` into ``{"name": "ros", ...}``."""
    filters: dict[str, str] = {}
    for item in values or []:
        field, sep, value = item.partition("=")
        if not sep or not field.strip():
            _fail(f"invalid filter {item!r}, expected FIELD=VALUE")
        filters[field.strip()] = value
    return filters


def _run(
    entity: str,
    data_dir: Path,
    filters: list[str] | None,
) -> tuple[EntityQuery, list[dict[str, Any]]]:
    constraints = _parse_filters(filters)
    try:
        query = get_entity(entity)
    except KeyError as exc:
        _fail(str(exc.args[0]))

    # Diagnostics go to stderr so stdout stays machine-readable.
    with contextlib.redirect_stdout(sys.stderr):
        try:
            store = EntityStore.from_directory(data_dir)
            unknown = sorted(set(constraints) - set(query.filter_fields))
            if unknown:
                _fail(
                    f"{query.name} cannot be filtered by {', '.join(unknown)}; "
                    f"filter fields: {', '.join(query.filter_fields)}"
                )
            rows = run_list_query(query, store, constraints)
        except (FileNotFoundError, KeyError, ValueError, pl.exceptions.PolarsError) as exc:
            _fail(str(exc.args[0]) if isinstance(exc, KeyError) else str(exc))
    return query, rows


def _write(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    typer.echo(f"Wrote {output}", err=True)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

EntityArg = Annotated[str, typer.Argument(help="Entity list: customers, employees or suppliers")]
DataDirOpt = Annotated[
    Path,
    typer.Option("--data-dir", "-d", help="Directory with the table files", envvar=DATA_DIR_ENV_VAR),
]
FilterOpt = Annotated[
    Optional[list[str]],
    typer.Option("--filter", "-f", help="FIELD=VALUE substring filter (repeatable)"),
]
OutputOpt = Annotated[
    Optional[Path],
    typer.Option("--output", "-o", help="Write to this file instead of stdout"),
]


@app.command("list")
def list_command(
    entity: EntityArg,
    data_dir: DataDirOpt,
    filters: FilterOpt = None,
    output: OutputOpt = None,
) -> None:
    """Print the matching records as JSON, ordered like the list page."""
    query, rows = _run(entity, data_dir, filters)
    _write(json.dumps(to_records(query, rows), indent=2, ensure_ascii=False), output)


@app.command()
def export(
    entity: EntityArg,
    data_dir: DataDirOpt,
    filters: FilterOpt = None,
    output: OutputOpt = None,
) -> None:
    """Export the matching records as XML."""
    query, rows = _run(entity, data_dir, filters)
    _write(rows_to_xml(query, rows), output)


def _build_app_code(data_dir: Path, title: str) -> str:
    """Generate the Reflex app module source code."""
    abs_path = str(data_dir.resolve())
    # Escape backslashes and quotes for embedding in Python string literal
    safe_path = abs_path.replace("\\", "\\\\").replace('"', '\\"')

    template = _APP_TEMPLATE
    template = template.replace("__DATA_DIR__", data_dir.name)
    template = template.replace("__SAFE_PATH__", safe_path)
    template = template.replace("__TITLE__", title.replace("\\", "\\\\").replace('"', '\\"'))
    return template


# ---------------------------------------------------------------------------
# App template -- uses __PLACEHOLDER__ tokens for dynamic parts.
# ---------------------------------------------------------------------------

_APP_TEMPLATE = '''"""Auto-generated entity list app for: __DATA_DIR__"""

from pathlib import Path

import reflex as rx

from reflex_entity_grid import (
    EntityListMixin,
    EntityStore,
    create_api,
    entity_list_page,
    set_entity_store,
)

set_entity_store(EntityStore.from_directory(Path("__SAFE_PATH__")))


class CustomerListState(EntityListMixin, rx.State):
    """Customer list page state."""


class EmployeeListState(EntityListMixin, rx.State):
    """Employee list page state."""


class SupplierListState(EntityListMixin, rx.State):
    """Supplier list page state."""


def _nav() -> rx.Component:
    return rx.hstack(
        rx.text("__TITLE__", weight="bold"),
        rx.link("Customers", href="/"),
        rx.link("Employees", href="/employees"),
        rx.link("Suppliers", href="/suppliers"),
        spacing="5",
        padding="1em 2em",
        border_bottom="1px solid var(--gray-a5)",
    )


def customers() -> rx.Component:
    return rx.fragment(_nav(), entity_list_page(CustomerListState))


def employees() -> rx.Component:
    return rx.fragment(_nav(), entity_list_page(EmployeeListState))


def suppliers() -> rx.Component:
    return rx.fragment(_nav(), entity_list_page(SupplierListState))


app = rx.App(api_transformer=create_api())
app.add_page(customers, route="/", on_load=CustomerListState.open_entity_list("customers"))
app.add_page(employees, route="/employees", on_load=EmployeeListState.open_entity_list("employees"))
app.add_page(suppliers, route="/suppliers", on_load=SupplierListState.open_entity_list("suppliers"))
'''


@app.command()
def serve(
    data_dir: Annotated[Path, typer.Argument(help="Directory with the table files")],
    port: Annotated[int, typer.Option("--port", "-p", help="Port for the Reflex frontend")] = 3000,
    title: Annotated[Optional[str], typer.Option("--title", "-t", help="Navigation bar title")] = None,
) -> None:
    """Serve the entity list pages for DATA_DIR in the browser."""
    data_dir = data_dir.resolve()
    if not data_dir.is_dir():
        _fail(f"data directory not found: {data_dir}")

    if title is None:
        title = f"{data_dir.name} -- Entity Lists"

    app_code = _build_app_code(data_dir, title)

    # Create a temporary Reflex app directory.
    tmp_dir = Path(tempfile.mkdtemp(prefix="entity_grid_"))
    app_name = "entity_app"
    app_pkg = tmp_dir / app_name
    app_pkg.mkdir()
    (app_pkg / "__init__.py").write_text("")
    (app_pkg / f"{app_name}.py").write_text(app_code)

    rxconfig_code = f"""import reflex as rx
config = rx.Config(app_name="{app_name}", frontend_port={port})
"""
    (tmp_dir / "rxconfig.py").write_text(rxconfig_code)

    typer.echo(f"Serving entity lists from: {data_dir}")
    typer.echo(f"Port: {port}")

    os.chdir(tmp_dir)

    # Step 1: initialise the Reflex project (creates .web/ with node_modules).
    # We use subprocess because reflex's CLI calls sys.exit() on completion.
    typer.echo("Initializing Reflex project...")
    subprocess.run(
        [sys.executable, "-m", "reflex", "init"],
        cwd=str(tmp_dir),
        check=True,
    )

    # Step 2: run the app via exec (replaces this process).
    typer.echo("Starting app...")
    os.execvp(sys.executable, [sys.executable, "-m", "reflex", "run"])


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
