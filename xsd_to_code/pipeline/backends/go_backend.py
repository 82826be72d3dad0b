"""
Go code generation backend.

Generates ``encoding/xml`` compatible Go declarations from a prototype tree.
"""

from __future__ import annotations

from typing import Any

from ...utils import make_first_upper_case
from ..config import ParserConfig
from ..hooks import Hook
from ..schema_ast.nodes import (
    Attribute,
    AttributeGroup,
    ComplexType,
    Element,
    Group,
    SchemaNode,
    SimpleType,
)
from .base import CodeBackend


class GoBackend(CodeBackend):
    """Go code generation backend."""

    TEMPLATE_LANG = "go"
    FILE_EXTENSION = "go"
    STRIP_CHARS = "-_"

    BUILTIN_TYPES = frozenset(
        {
            "xml.Name",
            "byte",
            "[]byte",
            "bool",
            "[]bool",
            "complex64",
            "complex128",
            "float32",
            "float64",
            "int",
            "int8",
            "int16",
            "int32",
            "int64",
            "interface",
            "[]interface{}",
            "string",
            "[]string",
            "time.Time",
            "uint",
            "uint8",
            "uint16",
            "uint32",
            "uint64",
        }
    )

    def __init__(self, config: ParserConfig, hook: Hook | None = None):
        super().__init__(config, hook)
        self.reset()

    def reset(self) -> None:
        self.import_time = False
        self.import_encoding_xml = False

    def prefix_context(self, generation_comment: str) -> dict[str, Any]:
        imports = []
        if self.import_time:
            imports.append("time")
        if self.import_encoding_xml:
            imports.append("encoding/xml")
        context = super().prefix_context(generation_comment)
        context["package"] = self.config.package or "schema"
        context["imports"] = imports
        return context

    def declare(self, node: SchemaNode) -> dict[str, Any] | None:
        if isinstance(node, SimpleType):
            return self._declare_simple_type(node)
        if isinstance(node, ComplexType):
            return self._declare_complex_type(node)
        if isinstance(node, Group):
            return self._declare_group(node)
        if isinstance(node, AttributeGroup):
            return self._declare_attribute_group(node)
        if isinstance(node, (Element, Attribute)):
            plural = "[]" if node.plural else ""
            alias = f"{plural}{self.go_type(self.base_type(node.type))}"
            return self._alias(node, self.field_name(node.name, unique=isinstance(node, Attribute)), alias)
        return None

    def go_type(self, name: str) -> str:
        """Go type for a resolved type name; schema types are referenced by pointer."""
        if self.is_builtin(name):
            if "time.Time" in name:
                self.import_time = True
            elif "xml.Name" in name:
                self.import_encoding_xml = True
            return name
        field_type = "".join(make_first_upper_case(part) for part in name.split("."))
        for char in self.STRIP_CHARS:
            field_type = field_type.replace(char, "")
        if field_type:
            return "*" + make_first_upper_case(field_type)
        return "interface{}"

    def _alias(self, node: SchemaNode, name: str, alias: str) -> dict[str, Any]:
        return {"kind": "alias", "name": name, "doc": node.doc, "type": alias}

    def _struct(self, node: SchemaNode, fields: list[dict[str, str]]) -> dict[str, Any]:
        name = self.field_name(node.name, unique=True)
        if name != node.name:
            # Keep the schema name on the wire
            self.import_encoding_xml = True
            fields.insert(0, {"name": "XMLName", "type": "xml.Name", "tag": f'xml:"{node.name}"'})
        return {"kind": "struct", "name": name, "doc": node.doc, "fields": fields}

    def _declare_simple_type(self, node: SimpleType) -> dict[str, Any] | None:
        if node.is_list:
            alias = "[]" + self.go_type(self.base_type(node.base))
            return self._alias(node, self.field_name(node.name, unique=True), alias)
        if node.is_union:
            if not node.member_types:
                return None
            fields = []
            for member, member_type in sorted(node.member_types.items()):
                if not member_type:
                    member_type = self.base_type(member)
                fields.append({"name": self.field_name(member), "type": self.go_type(member_type), "tag": ""})
            return self._struct(node, fields)
        alias = self.go_type(self.base_type(node.base))
        return self._alias(node, self.field_name(node.name, unique=True), alias)

    def _attribute_field(self, attribute: Attribute) -> dict[str, str]:
        omitempty = ",omitempty" if attribute.optional else ""
        plural = "[]" if attribute.plural else ""
        return {
            "name": f"{self.field_name(attribute.name)}Attr",
            "type": plural + self.go_type(self.base_type(attribute.type)),
            "tag": f'xml:"{attribute.name},attr{omitempty}"',
        }

    def _attribute_group_field(self, group: AttributeGroup) -> dict[str, str]:
        return {"name": self.field_name(group.name), "type": self.go_type(self.base_type(group.ref)), "tag": ""}

    def _group_field(self, group: Group) -> dict[str, str]:
        plural = "[]" if group.plural else ""
        return {
            "name": self.field_name(group.name),
            "type": plural + self.go_type(self.base_type(group.ref)),
            "tag": "",
        }

    def _declare_complex_type(self, node: ComplexType) -> dict[str, Any]:
        fields = [self._attribute_group_field(group) for group in node.attribute_groups]
        fields.extend(self._attribute_field(attribute) for attribute in node.attributes)
        fields.extend(self._group_field(group) for group in node.groups)
        for element in node.elements:
            plural = "[]" if element.plural else ""
            omitempty = ",omitempty" if element.optional else ""
            tag_name = ",any" if element.wildcard else element.name
            fields.append(
                {
                    "name": self.field_name(element.name),
                    "type": plural + self.go_type(self.base_type(element.type)),
                    "tag": f'xml:"{tag_name}{omitempty}"',
                }
            )
        if node.base:
            if self.is_builtin(node.base):
                fields.append({"name": "Value", "type": self.go_type(node.base), "tag": 'xml:",chardata"'})
            else:
                # Embedding inherits the fields of the base type
                fields.append({"name": self.go_type(node.base), "type": "", "tag": ""})
        return self._struct(node, fields)

    def _declare_group(self, node: Group) -> dict[str, Any]:
        fields = []
        for element in node.elements:
            plural = "[]" if element.plural else ""
            fields.append(
                {
                    "name": self.field_name(element.name),
                    "type": plural + self.go_type(self.base_type(element.type)),
                    "tag": "",
                }
            )
        fields.extend(self._group_field(group) for group in node.groups)
        return self._struct(node, fields)

    def _declare_attribute_group(self, node: AttributeGroup) -> dict[str, Any]:
        fields = [self._attribute_group_field(group) for group in node.attribute_groups]
        fields.extend(self._attribute_field(attribute) for attribute in node.attributes)
        return self._struct(node, fields)
