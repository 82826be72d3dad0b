"""
Namespace bookkeeping for one schema file.

Maps the prefixes declared on the schema root to namespace URIs, and the
namespaces pulled in by ``import``/``include`` to the files that define them.
"""

from __future__ import annotations

import logging

from ...utils import get_ns_prefix, is_valid_url

logger = logging.getLogger(__name__)


class NamespaceResolver:
    """Resolves prefixes to namespaces and namespaces to schema locations."""

    def __init__(self):
        self.prefixes: dict[str, str] = {}
        self.schema_locations: dict[str, str] = {}
        self.includes: list[str] = []

    def register_prefixes(self, nsmap: dict[str | None, str]) -> None:
        """
        Record the prefix declarations of the schema root.

        Args:
            nsmap: Prefix -> URI mapping; the default namespace (None key) is skipped
        """
        for prefix, uri in nsmap.items():
            if prefix:
                self.prefixes[prefix] = uri

    def register_import(self, namespace: str | None, schema_location: str | None) -> None:
        """
        Record where an imported namespace is defined.

        Remote locations are skipped (they are never fetched) and the first
        location registered for a namespace wins.
        """
        if not schema_location:
            return
        namespace = namespace or ""
        if namespace in self.schema_locations:
            return
        if is_valid_url(schema_location):
            logger.debug("Skipping remote schema location %s", schema_location)
            return
        self.schema_locations[namespace] = schema_location

    def register_include(self, schema_location: str | None) -> None:
        """Record an included schema file; duplicates and remote locations are skipped."""
        if not schema_location or schema_location in self.includes:
            return
        if is_valid_url(schema_location):
            logger.debug("Skipping remote include %s", schema_location)
            return
        self.includes.append(schema_location)

    def resolve_namespace_prefix(self, qualified_name: str) -> str:
        """Return the namespace URI bound to the prefix of ``qualified_name`` (empty if none)."""
        return self.prefixes.get(get_ns_prefix(qualified_name), "")

    def resolve_schema_location(self, namespace: str) -> str:
        """Return the schema file registered for a namespace (empty if none)."""
        return self.schema_locations.get(namespace, "")
