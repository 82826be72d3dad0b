"""
Tests for the streaming schema parser.

The fixture schema under test_data/xsd/base.xsd covers the common constructs;
smaller cases are parsed from inline documents.
"""

from __future__ import annotations

from pathlib import Path
from unittest import TestCase

import pytest

from xsd_to_code.pipeline.config import ParserConfig
from xsd_to_code.pipeline.errors import MalformedSchemaError, SchemaIOError
from xsd_to_code.pipeline.schema_ast import (
    Attribute,
    AttributeGroup,
    ComplexType,
    Element,
    Group,
    SchemaParser,
    SimpleType,
)

XSD_DIR = Path(__file__).parent / "test_data" / "xsd"


def schema(body: str) -> str:
    return f'<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">{body}</xs:schema>'


def parse(body: str, **config) -> list:
    return SchemaParser(ParserConfig(**config)).parse_string(schema(body))


def by_name(tree: list, name: str):
    return next(node for node in tree if node.name == name)


class TestBaseSchema(TestCase):
    """Parse the base fixture once per test and check each construct."""

    def setUp(self):
        self.tree = SchemaParser(ParserConfig(lang="Go")).parse_file(XSD_DIR / "base.xsd")

    def test_discovery_order(self):
        names = [node.name for node in self.tree]
        self.assertEqual(
            names,
            [
                "Flags",
                "Color",
                "ZipCode",
                "Percent",
                "IdOrCode",
                "Code",
                "Person",
                "Shape",
                "Employee",
                "Price",
                "Item",
                "Order",
                "Contact",
                "Audit",
                "Customer",
                "Comment",
                "version",
            ],
        )

    def test_list_simple_type(self):
        flags = by_name(self.tree, "Flags")
        self.assertIsInstance(flags, SimpleType)
        self.assertTrue(flags.is_list)
        self.assertEqual(flags.base, "string")
        self.assertEqual(flags.doc, "Space separated flags")

    def test_enumeration_order(self):
        color = by_name(self.tree, "Color")
        self.assertEqual(color.base, "string")
        self.assertEqual(color.restriction.enum, ("Red", "Green", "Blue"))

    def test_facets(self):
        zip_code = by_name(self.tree, "ZipCode")
        self.assertEqual(zip_code.restriction.pattern, "[0-9]{5}")
        self.assertEqual(zip_code.restriction.min_length, 5)
        self.assertEqual(zip_code.restriction.max_length, 10)

        percent = by_name(self.tree, "Percent").restriction
        self.assertEqual(percent.min, 0.0)
        self.assertFalse(percent.min_exclusive)
        self.assertEqual(percent.max, 100.0)
        self.assertTrue(percent.max_exclusive)
        self.assertEqual(percent.precision, 2)
        self.assertEqual(percent.total_digits, 5)

    def test_union_forward_reference(self):
        union = by_name(self.tree, "IdOrCode")
        self.assertTrue(union.is_union)
        # Code is declared after the union and restricts xs:token
        self.assertEqual(union.member_types, {"int": "int", "Code": "string"})

    def test_complex_type_elements(self):
        person = by_name(self.tree, "Person")
        self.assertIsInstance(person, ComplexType)
        self.assertEqual(person.doc, "A person")
        elements = {element.name: element for element in person.elements}
        self.assertEqual([element.name for element in person.elements], ["Name", "Tag", "Nick", "Age", "Favorite"])

        self.assertFalse(elements["Name"].plural)
        self.assertTrue(elements["Tag"].plural)
        self.assertEqual(elements["Tag"].type, "string")
        self.assertTrue(elements["Nick"].plural)
        self.assertTrue(elements["Nick"].optional)
        self.assertFalse(elements["Age"].plural)
        self.assertEqual(elements["Age"].type, "int")
        self.assertTrue(elements["Favorite"].nillable)
        self.assertEqual(elements["Favorite"].default, "Red")
        # A simple type reference resolves to the type it restricts
        self.assertEqual(elements["Favorite"].type, "string")

    def test_attribute_use(self):
        person = by_name(self.tree, "Person")
        attributes = {attribute.name: attribute for attribute in person.attributes}
        self.assertFalse(attributes["id"].optional)
        self.assertTrue(attributes["lang"].optional)
        self.assertEqual(attributes["id"].type, "string")

    def test_choice_plurality_is_inherited(self):
        shape = by_name(self.tree, "Shape")
        self.assertTrue(all(element.plural for element in shape.elements))

    def test_extension(self):
        employee = by_name(self.tree, "Employee")
        self.assertEqual(employee.base, "Person")
        self.assertEqual([element.name for element in employee.elements], ["Salary"])

        price = by_name(self.tree, "Price")
        self.assertEqual(price.base, "float64")
        self.assertEqual([attribute.name for attribute in price.attributes], ["currency"])

    def test_inline_complex_types(self):
        order = by_name(self.tree, "Order")
        self.assertIsInstance(order, ComplexType)
        self.assertTrue(order.anonymous)
        item, note = order.elements
        self.assertEqual((item.name, item.type, item.plural), ("Item", "Item", True))
        self.assertEqual((note.name, note.type, note.plural), ("Note", "string", False))

        item_type = by_name(self.tree, "Item")
        self.assertIsInstance(item_type, ComplexType)
        self.assertEqual(item_type.attributes[0].name, "sku")
        self.assertFalse(item_type.attributes[0].optional)

    def test_group_and_attribute_group(self):
        contact = by_name(self.tree, "Contact")
        self.assertIsInstance(contact, Group)
        self.assertEqual([(e.name, e.plural) for e in contact.elements], [("Email", False), ("Phone", True)])

        audit = by_name(self.tree, "Audit")
        self.assertIsInstance(audit, AttributeGroup)
        self.assertEqual([a.name for a in audit.attributes], ["created", "author"])
        self.assertEqual(audit.attributes[0].type, "time.Time")

        customer = by_name(self.tree, "Customer")
        self.assertEqual(len(customer.groups), 1)
        self.assertEqual(customer.groups[0].name, "Contact")
        self.assertEqual(customer.groups[0].ref, "Contact")
        self.assertTrue(customer.groups[0].plural)
        self.assertEqual(customer.attribute_groups[0].ref, "Audit")

    def test_top_level_element_and_attribute(self):
        comment = by_name(self.tree, "Comment")
        self.assertIsInstance(comment, Element)
        self.assertEqual(comment.type, "string")
        version = by_name(self.tree, "version")
        self.assertIsInstance(version, Attribute)
        self.assertTrue(version.optional)

    def test_idempotence(self):
        again = SchemaParser(ParserConfig(lang="Go")).parse_file(XSD_DIR / "base.xsd")
        self.assertEqual(self.tree, again)

    def test_language_column(self):
        tree = SchemaParser(ParserConfig(lang="TypeScript")).parse_file(XSD_DIR / "base.xsd")
        self.assertEqual(by_name(tree, "Price").base, "number")
        self.assertEqual(by_name(tree, "Flags").base, "string")


def test_flags_scenario():
    tree = parse('<xs:simpleType name="Flags"><xs:list itemType="xs:string"/></xs:simpleType>')
    assert tree == [SimpleType(name="Flags", is_list=True, base="string")]


def test_person_scenario():
    tree = parse(
        '<xs:complexType name="Person"><xs:sequence>'
        '<xs:element name="Tag" type="xs:string" maxOccurs="unbounded"/>'
        "</xs:sequence></xs:complexType>"
    )
    assert len(tree) == 1
    person = tree[0]
    assert person.name == "Person"
    assert person.elements == (Element(name="Tag", type="string", plural=True),)


@pytest.mark.parametrize(
    "max_occurs, plural",
    [
        (' maxOccurs="unbounded"', True),
        (' maxOccurs="5"', True),
        (' maxOccurs="1"', False),
        ("", False),
    ],
)
def test_max_occurs(max_occurs, plural):
    tree = parse(f'<xs:element name="E" type="xs:int"{max_occurs}/>')
    assert tree[0].plural is plural


def test_malformed_max_occurs():
    with pytest.raises(MalformedSchemaError) as exc_info:
        parse('<xs:element name="E" type="xs:int" maxOccurs="many"/>')
    assert exc_info.value.attribute == "maxOccurs"
    assert exc_info.value.value == "many"
    assert exc_info.value.element == "element"


def test_malformed_facet():
    with pytest.raises(MalformedSchemaError):
        parse(
            '<xs:simpleType name="S"><xs:restriction base="xs:string">'
            '<xs:maxLength value="ten"/></xs:restriction></xs:simpleType>'
        )


def test_non_numeric_bounds_are_ignored():
    tree = parse(
        '<xs:simpleType name="Since"><xs:restriction base="xs:date">'
        '<xs:minInclusive value="2000-01-01"/></xs:restriction></xs:simpleType>'
    )
    assert tree[0].restriction.min is None


def test_malformed_xml():
    with pytest.raises(MalformedSchemaError):
        SchemaParser().parse_string("<xs:schema xmlns:xs='http://www.w3.org/2001/XMLSchema'><xs:element>")


def test_missing_file():
    with pytest.raises(SchemaIOError):
        SchemaParser().parse_file(XSD_DIR / "does_not_exist.xsd")


def test_directory_instead_of_file():
    with pytest.raises(SchemaIOError):
        SchemaParser().parse_file(XSD_DIR)


def test_failed_parse_is_not_cached(tmp_path):
    broken = tmp_path / "broken.xsd"
    broken.write_text(schema('<xs:element name="E" maxOccurs="x"/>'))
    parser = SchemaParser()
    with pytest.raises(MalformedSchemaError):
        parser.parse_file(broken)
    assert parser.session.parsed_files == {}


def test_choice_plurality_reaches_nested_sequence():
    tree = parse(
        '<xs:complexType name="T"><xs:choice maxOccurs="unbounded"><xs:sequence>'
        '<xs:element name="A" type="xs:string"/>'
        "</xs:sequence></xs:choice></xs:complexType>"
    )
    assert tree[0].elements[0].plural


def test_redeclared_element_is_merged():
    tree = parse(
        '<xs:complexType name="T"><xs:choice>'
        '<xs:element name="V" type="xs:string"/>'
        '<xs:element name="V" type="xs:string" maxOccurs="unbounded"/>'
        "</xs:choice></xs:complexType>"
    )
    assert tree[0].elements == (Element(name="V", type="string", plural=True),)


def test_list_inside_element_is_plural():
    tree = parse('<xs:element name="Sizes"><xs:simpleType><xs:list itemType="xs:int"/></xs:simpleType></xs:element>')
    assert tree == [Element(name="Sizes", type="int", plural=True)]


def test_union_with_anonymous_member():
    tree = parse(
        '<xs:simpleType name="Size"><xs:union memberTypes="xs:int"><xs:simpleType>'
        '<xs:restriction base="xs:string">'
        '<xs:enumeration value="small"/><xs:enumeration value="large"/>'
        "</xs:restriction></xs:simpleType></xs:union></xs:simpleType>"
    )
    assert len(tree) == 1
    size = tree[0]
    assert size.member_types == {"int": "int", "string": "string"}
    assert size.restriction.enum == ("small", "large")


def test_attribute_with_inline_simple_type():
    tree = parse(
        '<xs:complexType name="T"><xs:attribute name="mode">'
        '<xs:simpleType><xs:restriction base="xs:boolean"/></xs:simpleType>'
        "</xs:attribute></xs:complexType>"
    )
    assert tree[0].attributes == (Attribute(name="mode", type="bool"),)


def test_wildcard_and_mixed():
    tree = parse(
        '<xs:complexType name="Bag" mixed="true"><xs:sequence>'
        '<xs:any minOccurs="0" maxOccurs="unbounded"/>'
        "</xs:sequence></xs:complexType>"
    )
    bag = tree[0]
    assert bag.mixed
    assert bag.elements == (Element(name="any", type="string", plural=True, optional=True, wildcard=True),)


def test_untyped_declarations_default_to_any():
    tree = parse('<xs:element name="E"/><xs:attribute name="a"/>')
    assert tree[0].type == "string"
    assert tree[1].type == "string"


def test_nested_group_reference():
    tree = parse(
        '<xs:group name="Outer"><xs:sequence><xs:group ref="Inner"/>'
        '<xs:element name="X" type="xs:string"/></xs:sequence></xs:group>'
        '<xs:group name="Inner"><xs:sequence><xs:element name="Y" type="xs:int"/></xs:sequence></xs:group>'
    )
    outer, inner = tree
    assert outer.groups == (Group(name="Inner", ref="Inner"),)
    assert [element.name for element in outer.elements] == ["X"]
    assert inner.elements == (Element(name="Y", type="int"),)


def test_element_ref():
    tree = parse(
        '<xs:element name="Code" type="xs:token"/>'
        '<xs:complexType name="T"><xs:sequence><xs:element ref="Code" minOccurs="0"/></xs:sequence></xs:complexType>'
    )
    assert tree[1].elements == (Element(name="Code", type="string", optional=True),)


def test_documentation_of_enumeration_values_is_dropped():
    tree = parse(
        '<xs:simpleType name="S"><xs:annotation><xs:documentation>Kind</xs:documentation></xs:annotation>'
        '<xs:restriction base="xs:string"><xs:enumeration value="a">'
        "<xs:annotation><xs:documentation>The a kind</xs:documentation></xs:annotation>"
        "</xs:enumeration></xs:restriction></xs:simpleType>"
    )
    assert tree[0].doc == "Kind"


def test_unbounded_attribute_marks_element_plural():
    tree = parse(
        '<xs:complexType name="T"><xs:sequence>'
        '<xs:element name="A" type="xs:string" unbounded="1"/>'
        '<xs:element name="B" type="xs:string" unbounded="0"/>'
        "</xs:sequence></xs:complexType>"
    )
    assert [(element.name, element.plural) for element in tree[0].elements] == [("A", True), ("B", False)]


def test_complex_content_restriction_sets_base():
    tree = parse(
        '<xs:complexType name="B"><xs:sequence>'
        '<xs:element name="X" type="xs:string" minOccurs="0"/>'
        "</xs:sequence></xs:complexType>"
        '<xs:complexType name="D"><xs:complexContent><xs:restriction base="B"><xs:sequence>'
        '<xs:element name="X" type="xs:string"/>'
        "</xs:sequence></xs:restriction></xs:complexContent></xs:complexType>"
    )
    derived = by_name(tree, "D")
    assert derived.base == "B"
    assert derived.elements == (Element(name="X", type="string"),)


def test_choice_inside_group_sequence_is_plural():
    tree = parse(
        '<xs:group name="G"><xs:sequence>'
        '<xs:element name="Head" type="xs:string"/>'
        '<xs:choice maxOccurs="unbounded">'
        '<xs:element name="A" type="xs:string"/><xs:element name="B" type="xs:int"/>'
        "</xs:choice></xs:sequence></xs:group>"
    )
    assert [(element.name, element.plural) for element in tree[0].elements] == [
        ("Head", False),
        ("A", True),
        ("B", True),
    ]


def test_anonymous_union_keeps_forward_reference():
    tree = parse(
        '<xs:element name="E"><xs:simpleType><xs:union memberTypes="Later xs:int"/></xs:simpleType></xs:element>'
        '<xs:simpleType name="Later"><xs:restriction base="xs:boolean"/></xs:simpleType>'
    )
    # Named later in the file, so the element carries the bare name
    assert by_name(tree, "E").type == "Later"


def test_parse_string_ignores_declared_encoding():
    doc = '<?xml version="1.0" encoding="ISO-8859-1"?>\n' + schema(
        '<xs:simpleType name="Size"><xs:annotation><xs:documentation>Größe</xs:documentation></xs:annotation>'
        '<xs:restriction base="xs:string"/></xs:simpleType>'
    )
    assert SchemaParser().parse_string(doc)[0].doc == "Größe"
