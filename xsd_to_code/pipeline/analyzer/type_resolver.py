"""
Type resolution engine.

Turns a raw XSD type reference (``xs:string``, ``tns:Address``,
``common:Id``...) into either a target language builtin or the name of a
type defined in this file or in one of its dependencies, parsing those
dependencies on demand.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ...utils import is_valid_url, trim_ns_prefix
from ..errors import SchemaIOError
from ..schema_ast.context import cache_key
from ..schema_ast.nodes import SchemaNode, find_base_in_tree
from .builtin_types import builtin_type

if TYPE_CHECKING:
    from ..schema_ast.context import ParseContext
    from ..schema_ast.parser import SchemaParser

logger = logging.getLogger(__name__)


class TypeResolver:
    """Resolves type references for a schema parser."""

    def __init__(self, parser: SchemaParser):
        """
        Initialize the resolver.

        Args:
            parser: The parser used to load dependency files
        """
        self.parser = parser

    def resolve_type(self, ctx: ParseContext, raw_reference: str, proto_tree: list[SchemaNode]) -> str:
        """
        Resolve a type reference.

        Resolution order, first match wins:
        1. XSD builtin datatype -> target language builtin
        2. A node of ``proto_tree`` with that name -> its resolved type
        3. Extract mode -> the unprefixed name (no further file access)
        4. Namespace without a schema file -> search the files included by ``ctx``
        5. Namespace with a schema file -> parse it (once) and search it

        Args:
            ctx: Context of the file containing the reference
            raw_reference: The reference as written, possibly prefixed
            proto_tree: Nodes already discovered in the current file

        Returns:
            The resolved type name; the unprefixed reference when nothing matches

        Raises:
            SchemaIOError: If a schema file the reference points to is missing
        """
        name = trim_ns_prefix(raw_reference)

        builtin = builtin_type(raw_reference, self.parser.config.lang)
        if builtin is not None:
            return builtin

        found = find_base_in_tree(name, proto_tree)
        if found:
            return found

        if ctx.extract:
            return self._fallback(ctx, name)

        namespace = ctx.namespaces.resolve_namespace_prefix(raw_reference)
        schema_location = ctx.namespaces.resolve_schema_location(namespace)
        if is_valid_url(schema_location):
            return self._fallback(ctx, name)

        xsd_file = ctx.file_dir / schema_location
        if not xsd_file.exists():
            raise SchemaIOError(f"schema file for {raw_reference!r} not found", path=str(xsd_file))

        if xsd_file.is_dir():
            return self._resolve_from_includes(ctx, name)
        return self._resolve_from_file(ctx, xsd_file, name)

    def _resolve_from_includes(self, ctx: ParseContext, name: str) -> str:
        """Search every file included by the current one, in include order."""
        for include in ctx.namespaces.includes:
            tree = self.parser.extract(ctx.file_dir / include)
            found = find_base_in_tree(name, tree)
            if found:
                logger.debug("Resolved %s to %s via include %s", name, found, include)
                return found
        return self._fallback(ctx, name)

    def _resolve_from_file(self, ctx: ParseContext, xsd_file: Path, name: str) -> str:
        """Search a dependency file, parsing it fully first if this run has not seen it yet."""
        tree = self.parser.session.parsed_files.get(cache_key(xsd_file))
        if tree is None:
            logger.debug("Parsing dependency %s for %s", xsd_file, name)
            tree = self.parser.parse_file(xsd_file)

        found = find_base_in_tree(name, tree)
        if found:
            return found

        found = find_base_in_tree(name, self.parser.extract(xsd_file))
        if found:
            return found
        return self._fallback(ctx, name)

    def _fallback(self, ctx: ParseContext, name: str) -> str:
        ctx.unresolved.append(name)
        return name
