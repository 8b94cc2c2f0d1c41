"""CLI for the entity admin demo app.

Run from ``examples/entity_admin``::

    python -m entity_admin.cli          # Run the Reflex demo app
    python -m entity_admin.cli run      # Same as above
"""

import os
from pathlib import Path

import typer

app = typer.Typer(
    name="demo",
    help="Entity admin demo app (customers, employees, suppliers).",
    invoke_without_command=True,
)


def _run_app() -> None:
    """Start the Reflex demo app."""
    app_dir = Path(__file__).resolve().parent.parent
    os.chdir(app_dir)

    from reflex.reflex import cli

    cli(["run"])


@app.callback(invoke_without_command=True)
def default(ctx: typer.Context) -> None:
    """Run the demo app (default when no subcommand is given)."""
    if ctx.invoked_subcommand is None:
        _run_app()


@app.command()
def run() -> None:
    """Run the Reflex demo app."""
    _run_app()


def main() -> None:
    """Entry point for the demo CLI."""
    app()


if __name__ == "__main__":
    main()
