"""XML export of entity list rows.

The document mirrors the client record shape::

    <customers>
      <customer>
        <id>1</id>
        ...
        <category>
          <code>GOLD</code>
          <description>Gold customers</description>
        </category>
      </customer>
    </customers>

Missing values (including a missing nested group) become empty elements
so every item has the same structure.
"""

import xml.etree.ElementTree as ET
from collections.abc import Mapping, Sequence
from typing import Any

from reflex_entity_grid.queries import EntityQuery, WireField, to_record


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _append_fields(
    parent: ET.Element,
    fields: Sequence[WireField],
    record: Mapping[str, Any] | None,
) -> None:
    for wire in fields:
        child = ET.SubElement(parent, wire.element)
        value = record.get(wire.name) if record else None
        if wire.children:
            _append_fields(child, wire.children, value)
        else:
            child.text = _text(value)


def rows_to_element(query: EntityQuery, rows: Sequence[Mapping[str, Any]]) -> ET.Element:
    """Build the ``<{name}>`` root element holding one item per row."""
    root = ET.Element(query.name)
    for row in rows:
        item = ET.SubElement(root, query.item_name)
        _append_fields(item, query.export_fields, to_record(query, row))
    return root


def rows_to_xml(query: EntityQuery, rows: Sequence[Mapping[str, Any]]) -> str:
    """Serialise *rows* (flat result rows) as an indented XML document."""
    root = rows_to_element(query, rows)
    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="unicode", short_empty_elements=True)


def xml_filename(query: EntityQuery) -> str:
    return f"{query.name}.xml"
