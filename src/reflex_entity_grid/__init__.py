"""reflex-entity-grid – filterable, paginated list grids for Reflex admin apps.

Install the package for the grid component, the customer / employee /
supplier list pages and their HTTP routes::

    pip install reflex-entity-grid

Each list page is a Reflex state inheriting from :class:`EntityListMixin`
rendered with :func:`entity_list_page`; the bare grid is available as
:class:`ListGridMixin` + :func:`list_grid` for other hosts.
"""

from reflex_entity_grid.api import create_api, router
from reflex_entity_grid.datagrid import (
    ColumnResizeHandle,
    FilterInput,
    ListGridNamespace,
    grid_view,
    list_grid,
)
from reflex_entity_grid.entities import (
    CUSTOMERS,
    EMPLOYEES,
    ENTITIES,
    SUPPLIERS,
    get_entity,
    get_entity_store,
    set_entity_store,
)
from reflex_entity_grid.entity_list import EntityListMixin, entity_list_page
from reflex_entity_grid.filters import active_filters, commit_filter, upsert_filter
from reflex_entity_grid.grid_state import ListGridMixin
from reflex_entity_grid.models import ColumnDef, FilterEntry, normalize_columns
from reflex_entity_grid.pagination import displayed_rows_label, page_count, page_slice
from reflex_entity_grid.queries import (
    EntityQuery,
    EntityStore,
    WireField,
    run_list_query,
    scan_file,
    to_record,
)
from reflex_entity_grid.resize import MIN_COLUMN_WIDTH, ResizeSession, resized_width
from reflex_entity_grid.xml_export import rows_to_xml
