"""
Schema AST module.

Contains the prototype tree node definitions, the parser state and the
streaming XSD parser.
"""

from __future__ import annotations

from .nodes import (
    Attribute,
    AttributeGroup,
    ComplexType,
    Element,
    Group,
    Restriction,
    SchemaNode,
    SimpleType,
)
from .stack import Stack
from .context import Frame, ParseContext, ParseSession
from .parser import SchemaParser

__all__ = [
    "SchemaNode",
    "SimpleType",
    "ComplexType",
    "Element",
    "Attribute",
    "Group",
    "AttributeGroup",
    "Restriction",
    "Stack",
    "Frame",
    "ParseContext",
    "ParseSession",
    "SchemaParser",
]
