"""
TypeScript code generation backend.

Generates TypeScript type aliases, enums and classes from a prototype tree.
"""

from __future__ import annotations

import re
from typing import Any

from ...utils import make_first_upper_case
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


class TypeScriptBackend(CodeBackend):
    """TypeScript code generation backend."""

    TEMPLATE_LANG = "ts"
    FILE_EXTENSION = "ts"

    BUILTIN_TYPES = frozenset({"boolean", "number", "string", "void", "null", "undefined", "Uint8Array"})

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
            alias = self.ts_type(self.base_type(node.type), node.plural)
            return self._alias(node, alias)
        return None

    def ts_type(self, name: str, plural: bool = False) -> str:
        """TypeScript type for a resolved type name."""
        if self.is_builtin(name):
            field_type = name
        else:
            field_type = "".join(make_first_upper_case(part) for part in name.split("."))
            field_type = make_first_upper_case(field_type.replace("-", ""))
            if field_type in ("", "Any"):
                field_type = "any"
        if plural:
            return f"Array<{field_type}>"
        return field_type

    def _alias(self, node: SchemaNode, alias: str) -> dict[str, Any]:
        return {"kind": "alias", "name": self.field_name(node.name, unique=True), "doc": node.doc, "type": alias}

    def _class(self, node: SchemaNode, fields: list[dict[str, str]], extends: str = "") -> dict[str, Any]:
        return {
            "kind": "class",
            "name": self.field_name(node.name, unique=True),
            "doc": node.doc,
            "fields": fields,
            "extends": extends,
        }

    def _declare_simple_type(self, node: SimpleType) -> dict[str, Any] | None:
        if node.is_list:
            return self._alias(node, self.ts_type(self.base_type(node.base), plural=True))
        if node.is_union:
            if not node.member_types:
                return None
            fields = []
            for member, member_type in sorted(node.member_types.items()):
                if not member_type:
                    member_type = self.base_type(member)
                fields.append({"name": self.field_name(member), "type": self.ts_type(member_type)})
            return self._class(node, fields)
        if node.restriction.enum:
            base = self.ts_type(self.base_type(node.base))
            return {
                "kind": "enum",
                "name": self.field_name(node.name, unique=True),
                "doc": node.doc,
                "members": [self._enum_member(value, base) for value in node.restriction.enum],
            }
        return self._alias(node, self.ts_type(self.base_type(node.base)))

    @staticmethod
    def _enum_member(value: str, base: str) -> dict[str, str]:
        identifier = re.sub(r"\W", "_", value)
        if base == "number":
            return {"name": f"Enum{identifier}", "value": value}
        if base != "string" or not identifier or identifier[0].isdigit():
            identifier = f"Enum{identifier}"
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        return {"name": identifier, "value": f"'{escaped}'"}

    def _attribute_field(self, attribute: Attribute) -> dict[str, str]:
        nullable = " | null" if attribute.optional else ""
        field_type = self.ts_type(self.base_type(attribute.type), attribute.plural)
        return {"name": f"{self.field_name(attribute.name)}Attr", "type": f"{field_type}{nullable}"}

    def _attribute_group_field(self, group: AttributeGroup) -> dict[str, str]:
        return {"name": self.field_name(group.name), "type": self.ts_type(self.base_type(group.ref))}

    def _group_field(self, group: Group) -> dict[str, str]:
        return {"name": self.field_name(group.name), "type": self.ts_type(self.base_type(group.ref), group.plural)}

    def _element_field(self, element: Element) -> dict[str, str]:
        return {
            "name": self.field_name(element.name),
            "type": self.ts_type(self.base_type(element.type), element.plural),
        }

    def _declare_complex_type(self, node: ComplexType) -> dict[str, Any]:
        fields = [self._attribute_group_field(group) for group in node.attribute_groups]
        fields.extend(self._attribute_field(attribute) for attribute in node.attributes)
        fields.extend(self._group_field(group) for group in node.groups)
        fields.extend(self._element_field(element) for element in node.elements)

        extends = ""
        if node.base:
            base = self.ts_type(self.base_type(node.base))
            if self.is_builtin(node.base):
                fields.append({"name": "Value", "type": base})
            else:
                extends = base
        return self._class(node, fields, extends)

    def _declare_group(self, node: Group) -> dict[str, Any]:
        fields = [self._element_field(element) for element in node.elements]
        fields.extend(self._group_field(group) for group in node.groups)
        return self._class(node, fields)

    def _declare_attribute_group(self, node: AttributeGroup) -> dict[str, Any]:
        fields = [self._attribute_group_field(group) for group in node.attribute_groups]
        fields.extend(self._attribute_field(attribute) for attribute in node.attributes)
        return self._class(node, fields)
