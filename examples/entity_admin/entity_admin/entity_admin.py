"""Example Reflex app: customer, employee and supplier list pages.

Three pages share the same list grid, each with its own state so filters,
column widths and the current page are kept per page:
  1. Customers -- name/email filters, category from the lookup table,
     e-mail rendered as a ``mailto:`` link, XML export.
  2. Employees -- name filter over "first last", department lookup.
  3. Suppliers -- plain name/email filters.

The same data is served as JSON under ``/api/customer/list``,
``/api/employees/list`` and ``/api/suppliers/list``.
"""

from pathlib import Path

import reflex as rx

from reflex_entity_grid import (
    EntityListMixin,
    EntityStore,
    create_api,
    entity_list_page,
    set_entity_store,
)

DATA_DIR: Path = Path(__file__).parent / "data"

set_entity_store(EntityStore.from_directory(DATA_DIR))


# ---------------------------------------------------------------------------
# State (one per page)
# ---------------------------------------------------------------------------

class CustomerListState(EntityListMixin, rx.State):
    """Customer list page state."""


class EmployeeListState(EntityListMixin, rx.State):
    """Employee list page state."""


class SupplierListState(EntityListMixin, rx.State):
    """Supplier list page state."""


# ---------------------------------------------------------------------------
# Cell renderers
# ---------------------------------------------------------------------------

def _email_link(row: rx.Var) -> rx.Component:
    return rx.link(row["email"], href="mailto:" + row["email"].to(str))


def _or_dash(field: str):
    def render(row: rx.Var) -> rx.Component:
        return rx.cond(row[field], row[field], "-")

    return render


CUSTOMER_CELLS = {
    "email": _email_link,
    "category": _or_dash("category_description"),
}

EMPLOYEE_CELLS = {
    "email": _email_link,
    "department": _or_dash("department_description"),
}


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

def _nav() -> rx.Component:
    return rx.hstack(
        rx.text("Entity Admin", weight="bold"),
        rx.link("Customers", href="/"),
        rx.link("Employees", href="/employees"),
        rx.link("Suppliers", href="/suppliers"),
        spacing="5",
        padding="1em 2em",
        border_bottom="1px solid var(--gray-a5)",
    )


def customers() -> rx.Component:
    return rx.fragment(
        _nav(),
        entity_list_page(CustomerListState, render_cells=CUSTOMER_CELLS),
    )


def employees() -> rx.Component:
    return rx.fragment(
        _nav(),
        entity_list_page(EmployeeListState, render_cells=EMPLOYEE_CELLS),
    )


def suppliers() -> rx.Component:
    return rx.fragment(
        _nav(),
        entity_list_page(SupplierListState, render_cells={"email": _email_link}),
    )


app = rx.App(api_transformer=create_api())
app.add_page(
    customers,
    route="/",
    title="Customers",
    on_load=CustomerListState.open_entity_list("customers"),
)
app.add_page(
    employees,
    route="/employees",
    title="Employees",
    on_load=EmployeeListState.open_entity_list("employees"),
)
app.add_page(
    suppliers,
    route="/suppliers",
    title="Suppliers",
    on_load=SupplierListState.open_entity_list("suppliers"),
)
