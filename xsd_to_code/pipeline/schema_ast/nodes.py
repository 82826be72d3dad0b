"""
Schema node definitions.

The walker produces an ordered list of these frozen nodes per file (the
prototype tree). Every node kind has a mutable ``*Builder`` counterpart that
accumulates fields while the construct's tags are open; ``build()`` returns
the finished node when the end tag closes it.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Restriction:
    """Facets constraining a simple type."""

    doc: str = ""
    enum: tuple[str, ...] = ()
    pattern: str | None = None
    length: int | None = None
    min_length: int | None = None
    max_length: int | None = None
    min: float | None = None
    max: float | None = None
    min_exclusive: bool = False
    max_exclusive: bool = False
    # Number of fraction digits
    precision: int | None = None
    total_digits: int | None = None


@dataclass(frozen=True)
class SchemaNode:
    """Base class for all prototype tree nodes."""

    name: str = ""
    doc: str = ""


@dataclass(frozen=True)
class SimpleType(SchemaNode):
    """A named simple type: a restriction, a list or a union."""

    base: str = ""
    anonymous: bool = False
    is_list: bool = False
    is_union: bool = False
    # Unprefixed member type name -> resolved type
    member_types: dict[str, str] = field(default_factory=dict)
    restriction: Restriction = field(default_factory=Restriction)


@dataclass(frozen=True)
class Element(SchemaNode):
    """An element declaration, free-standing or inside a content model."""

    type: str = ""
    plural: bool = False
    optional: bool = False
    nillable: bool = False
    abstract: bool = False
    default: str | None = None
    wildcard: bool = False


@dataclass(frozen=True)
class Attribute(SchemaNode):
    """An attribute declaration."""

    type: str = ""
    optional: bool = True
    plural: bool = False
    default: str | None = None


@dataclass(frozen=True)
class Group(SchemaNode):
    """A model group definition or a reference to one."""

    ref: str = ""
    elements: tuple[Element, ...] = ()
    groups: tuple[Group, ...] = ()
    plural: bool = False


@dataclass(frozen=True)
class AttributeGroup(SchemaNode):
    """An attribute group definition or a reference to one."""

    ref: str = ""
    attributes: tuple[Attribute, ...] = ()
    attribute_groups: tuple[AttributeGroup, ...] = ()


@dataclass(frozen=True)
class ComplexType(SchemaNode):
    """A complex type, named or derived from the element declaring it inline."""

    base: str = ""
    anonymous: bool = False
    elements: tuple[Element, ...] = ()
    attributes: tuple[Attribute, ...] = ()
    groups: tuple[Group, ...] = ()
    attribute_groups: tuple[AttributeGroup, ...] = ()
    mixed: bool = False


@dataclass
class RestrictionBuilder:
    doc: str = ""
    enum: list[str] = field(default_factory=list)
    pattern: str | None = None
    length: int | None = None
    min_length: int | None = None
    max_length: int | None = None
    min: float | None = None
    max: float | None = None
    min_exclusive: bool = False
    max_exclusive: bool = False
    precision: int | None = None
    total_digits: int | None = None

    def build(self) -> Restriction:
        return Restriction(
            doc=self.doc,
            enum=tuple(self.enum),
            pattern=self.pattern,
            length=self.length,
            min_length=self.min_length,
            max_length=self.max_length,
            min=self.min,
            max=self.max,
            min_exclusive=self.min_exclusive,
            max_exclusive=self.max_exclusive,
            precision=self.precision,
            total_digits=self.total_digits,
        )


@dataclass
class SimpleTypeBuilder:
    name: str = ""
    doc: str = ""
    base: str = ""
    anonymous: bool = False
    is_list: bool = False
    is_union: bool = False
    member_types: dict[str, str] = field(default_factory=dict)
    restriction: RestrictionBuilder = field(default_factory=RestrictionBuilder)

    def effective_type(self) -> str:
        """Type an owner should use for this simple type when it is anonymous.

        A union without a base falls back to its first member type.
        """
        if self.base:
            return self.base
        if self.is_union and self.member_types:
            return next(iter(self.member_types.values()))
        return ""

    def build(self) -> SimpleType:
        return SimpleType(
            name=self.name,
            doc=self.doc,
            base=self.base,
            anonymous=self.anonymous,
            is_list=self.is_list,
            is_union=self.is_union,
            member_types=dict(self.member_types),
            restriction=self.restriction.build(),
        )


@dataclass
class ElementBuilder:
    name: str = ""
    doc: str = ""
    type: str = ""
    plural: bool = False
    optional: bool = False
    nillable: bool = False
    abstract: bool = False
    default: str | None = None
    wildcard: bool = False

    # Type comes from an inline complexType named after this element
    inline_complex: bool = False

    def build(self) -> Element:
        return Element(
            name=self.name,
            doc=self.doc,
            type=self.type,
            plural=self.plural,
            optional=self.optional,
            nillable=self.nillable,
            abstract=self.abstract,
            default=self.default,
            wildcard=self.wildcard,
        )


@dataclass
class AttributeBuilder:
    name: str = ""
    doc: str = ""
    type: str = ""
    optional: bool = True
    plural: bool = False
    default: str | None = None

    def build(self) -> Attribute:
        return Attribute(
            name=self.name,
            doc=self.doc,
            type=self.type,
            optional=self.optional,
            plural=self.plural,
            default=self.default,
        )


@dataclass
class GroupBuilder:
    name: str = ""
    doc: str = ""
    ref: str = ""
    elements: list[ElementBuilder] = field(default_factory=list)
    groups: list[GroupBuilder] = field(default_factory=list)
    plural: bool = False

    def build(self) -> Group:
        return Group(
            name=self.name,
            doc=self.doc,
            ref=self.ref,
            elements=tuple(e.build() for e in self.elements),
            groups=tuple(g.build() for g in self.groups),
            plural=self.plural,
        )


@dataclass
class AttributeGroupBuilder:
    name: str = ""
    doc: str = ""
    ref: str = ""
    attributes: list[AttributeBuilder] = field(default_factory=list)
    attribute_groups: list[AttributeGroupBuilder] = field(default_factory=list)

    def build(self) -> AttributeGroup:
        return AttributeGroup(
            name=self.name,
            doc=self.doc,
            ref=self.ref,
            attributes=tuple(a.build() for a in self.attributes),
            attribute_groups=tuple(g.build() for g in self.attribute_groups),
        )


@dataclass
class ComplexTypeBuilder:
    name: str = ""
    doc: str = ""
    base: str = ""
    anonymous: bool = False
    elements: list[ElementBuilder] = field(default_factory=list)
    attributes: list[AttributeBuilder] = field(default_factory=list)
    groups: list[GroupBuilder] = field(default_factory=list)
    attribute_groups: list[AttributeGroupBuilder] = field(default_factory=list)
    mixed: bool = False

    def find_element(self, name: str, type_name: str) -> ElementBuilder | None:
        """Return the element already declared with this name and type, if any."""
        for element in self.elements:
            if element.name == name and element.type == type_name:
                return element
        return None

    def has_group(self, name: str) -> bool:
        return any(group.name == name for group in self.groups)

    def build(self) -> ComplexType:
        return ComplexType(
            name=self.name,
            doc=self.doc,
            base=self.base,
            anonymous=self.anonymous,
            elements=tuple(e.build() for e in self.elements),
            attributes=tuple(a.build() for a in self.attributes),
            groups=tuple(g.build() for g in self.groups),
            attribute_groups=tuple(g.build() for g in self.attribute_groups),
            mixed=self.mixed,
        )


def find_base_in_tree(name: str, proto_tree: list[SchemaNode]) -> str | None:
    """
    Look up the resolved type behind a name in a prototype tree.

    Only plain simple types (neither list nor union), attributes and elements
    carry a type that another reference can borrow.

    Args:
        name: Unprefixed type name
        proto_tree: Nodes to search, in discovery order

    Returns:
        The base/type of the first matching node, or None when no node matches
        or the match does not lead anywhere but back to ``name``
    """
    for node in proto_tree:
        if node.name != name:
            continue
        if isinstance(node, SimpleType):
            if node.is_list or node.is_union:
                continue
            found = node.base
        elif isinstance(node, (Attribute, Element)):
            found = node.type
        else:
            continue
        if found and found != name:
            return found
        return None
    return None
