"""
Parser state.

``ParseSession`` is shared by every file parsed during one run (caches,
configuration, hook). ``ParseContext`` is created fresh for each file and
passed explicitly to every handler, so recursive parses of dependencies
never touch the state of the file that triggered them.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..analyzer.namespace_resolver import NamespaceResolver
from ..config import ParserConfig
from ..hooks import Hook
from .nodes import SchemaNode
from .stack import Stack

# Constructs that own the elements/attributes declared inside them
CONTAINER_KINDS = frozenset({"schema", "complexType", "group", "attributeGroup", "element", "attribute"})

# Model group compositors
COMPOSITOR_KINDS = frozenset({"sequence", "choice", "all"})


def cache_key(path: str | Path) -> str:
    """Normalized absolute path used to key the parsed-file caches."""
    return os.path.normpath(os.path.abspath(path))


@dataclass
class Frame:
    """One open tag on the walker's unified context stack."""

    kind: str
    name: str = ""
    # Number of open tags enclosing this one
    depth: int = 0
    builder: Any = None
    plural: bool = False
    # The construct was attached to an enclosing container when it opened
    attached: bool = False


@dataclass
class ParseSession:
    """State shared across all files parsed in one run."""

    config: ParserConfig = field(default_factory=ParserConfig)
    hook: Hook = field(default_factory=Hook)

    # Fully parsed files: cache key -> prototype tree. Filled when a parse
    # starts so that import cycles see the (partial) tree instead of recursing.
    parsed_files: dict[str, list[SchemaNode]] = field(default_factory=dict)

    # Extract-mode parses: cache key -> prototype tree
    extracted_files: dict[str, list[SchemaNode]] = field(default_factory=dict)

    # Called with (path, prototype tree) after each successful full parse
    on_file_parsed: Callable[[Path, list[SchemaNode]], None] | None = None

    def known_names(self) -> set[str]:
        """Names of every node in every cached tree."""
        names = set()
        for trees in (self.parsed_files, self.extracted_files):
            for tree in trees.values():
                names.update(node.name for node in tree)
        return names


@dataclass
class ParseContext:
    """Walker state for one file."""

    file_path: Path
    extract: bool = False
    namespaces: NamespaceResolver = field(default_factory=NamespaceResolver)
    proto_tree: list[SchemaNode] = field(default_factory=list)

    # Every open tag, innermost on top
    frames: Stack = field(default_factory=Stack)

    # References that fell back to their own name, checked in strict mode
    unresolved: list[str] = field(default_factory=list)

    @property
    def file_dir(self) -> Path:
        return self.file_path.parent

    def emit(self, node: SchemaNode) -> None:
        """Append a finished node to this file's prototype tree."""
        self.proto_tree.append(node)

    def parent_frame(self) -> Frame | None:
        """The frame just below the innermost one."""
        frames = iter(self.frames)
        next(frames, None)
        return next(frames, None)

    def enclosing_builder(self, kinds: frozenset[str] | set[str] | tuple[str, ...]) -> Any:
        """
        Find the builder of the nearest enclosing construct of the given kinds.

        The innermost frame (the tag being handled) is skipped, as are frames
        of those kinds that hold no builder (references).

        Returns:
            The builder, or None when no such construct is open
        """
        frames = iter(self.frames)
        next(frames, None)
        for frame in frames:
            if frame.kind in kinds and frame.builder is not None:
                return frame.builder
        return None

    def enclosing_compositor_plural(self) -> bool:
        """
        Plurality inherited from the nearest sequence/choice around the current tag.

        The search stops at the first container (complex type, group, element,
        ...), so a nested anonymous type does not inherit from outside it.
        """
        frames = iter(self.frames)
        next(frames, None)
        for frame in frames:
            if frame.kind in COMPOSITOR_KINDS:
                return frame.plural
            if frame.kind in CONTAINER_KINDS:
                return False
        return False
