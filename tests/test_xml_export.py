"""Tests for the XML export."""

import xml.etree.ElementTree as ET

from reflex_entity_grid.entities import CUSTOMERS, EMPLOYEES
from reflex_entity_grid.queries import run_list_query
from reflex_entity_grid.xml_export import rows_to_xml, xml_filename


class TestCustomerXml:
    def test_document_structure(self, store):
        root = ET.fromstring(rows_to_xml(CUSTOMERS, run_list_query(CUSTOMERS, store)))
        assert root.tag == "customers"
        items = root.findall("customer")
        assert [item.findtext("name") for item in items] == [
            "acme trading",
            "Bianchi",
            "Rossi Forniture",
            "Zeta",
        ]
        first = items[2]
        assert first.findtext("id") == "1"
        assert first.findtext("iban") == "IT01"
        assert first.findtext("category/code") == "GOLD"
        assert first.findtext("category/description") == "Gold customers"

    def test_missing_category_gives_empty_elements(self, store):
        root = ET.fromstring(rows_to_xml(CUSTOMERS, run_list_query(CUSTOMERS, store)))
        acme = root.findall("customer")[0]
        assert acme.find("category") is not None
        assert (acme.findtext("category/code") or "") == ""
        assert (acme.findtext("category/description") or "") == ""

    def test_missing_leaf_is_empty(self, store):
        root = ET.fromstring(rows_to_xml(CUSTOMERS, run_list_query(CUSTOMERS, store)))
        zeta = root.findall("customer")[3]
        assert (zeta.findtext("email") or "") == ""

    def test_element_order_without_address(self, store):
        root = ET.fromstring(rows_to_xml(CUSTOMERS, run_list_query(CUSTOMERS, store)))
        item = root.findall("customer")[2]
        assert [child.tag for child in item] == [
            "id",
            "iban",
            "name",
            "email",
            "phone",
            "category",
        ]
        assert [child.tag for child in item.find("category")] == ["code", "description"]

    def test_two_space_indent(self, store):
        xml = rows_to_xml(CUSTOMERS, run_list_query(CUSTOMERS, store))
        assert xml.startswith("<customers>\n  <customer>\n    <id>")

    def test_empty_list(self):
        assert ET.fromstring(rows_to_xml(CUSTOMERS, [])).tag == "customers"

    def test_special_characters_are_escaped(self, store):
        rows = run_list_query(CUSTOMERS, store)
        rows[0] = {**rows[0], "name": "Bianchi & Figli <srl>"}
        root = ET.fromstring(rows_to_xml(CUSTOMERS, rows))
        assert root.findall("customer")[0].findtext("name") == "Bianchi & Figli <srl>"


class TestEmployeeXml:
    def test_department_group(self, store):
        root = ET.fromstring(rows_to_xml(EMPLOYEES, run_list_query(EMPLOYEES, store)))
        assert root.tag == "employees"
        anna = root.findall("employee")[1]
        assert anna.findtext("firstName") == "Anna"
        assert anna.findtext("department/description") == "Sales"

    def test_items_follow_wire_fields(self, store):
        root = ET.fromstring(rows_to_xml(EMPLOYEES, run_list_query(EMPLOYEES, store)))
        anna = root.findall("employee")[1]
        assert [child.tag for child in anna] == [
            "id",
            "code",
            "firstName",
            "lastName",
            "address",
            "email",
            "phone",
            "department",
        ]

    def test_filename(self):
        assert xml_filename(EMPLOYEES) == "employees.xml"
