"""
Extension hooks for customizing parsing and code generation.

A hook sees every parse event before the default handler runs and every
schema node before and after it is rendered. Returning ``False`` from a
``on_*`` method vetoes the default processing for that event; raising an
exception aborts the whole run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .schema_ast.context import ParseContext
    from .schema_ast.nodes import SchemaNode


@dataclass
class ElementEvent:
    """A start or end tag as seen by the schema walker."""

    # Qualified tag, e.g. "{http://www.w3.org/2001/XMLSchema}element"
    tag: str = ""

    # Local part of the tag, e.g. "element"
    local_name: str = ""

    # Attributes keyed by local name
    attrib: dict[str, str] = field(default_factory=dict)

    # Namespace declarations in scope (prefix -> URI, None for the default namespace)
    nsmap: dict[str | None, str] = field(default_factory=dict)

    # Source line of the tag, when known
    line: int | None = None


class Hook:
    """Base hook with no-op defaults. Subclass and override what you need."""

    def on_start_element(self, ctx: ParseContext, event: ElementEvent) -> bool:
        """Called before the default start-tag handler. Return False to skip it."""
        return True

    def on_end_element(self, ctx: ParseContext, event: ElementEvent) -> bool:
        """Called before the default end-tag handler. Return False to skip it."""
        return True

    def on_char_data(self, ctx: ParseContext, text: str) -> bool:
        """Called before character data is attached as documentation. Return False to skip it."""
        return True

    def on_generate(self, backend: Any, name: str, node: SchemaNode) -> bool:
        """Called before a schema node is rendered. Return False to leave it out of the output."""
        return True

    def on_generated(self, backend: Any, name: str, node: SchemaNode, text: str) -> str:
        """Called with the rendered text of a node; the returned text is what gets written."""
        return text
