"""
Base class for code generation backends.

A backend turns the prototype tree of one schema file into source text.
Each node is rendered into a declaration block through the language's
``type`` template; the blocks are framed by the ``prefix`` and ``suffix``
templates.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import jinja2

from ...utils import make_first_upper_case, trim_ns_prefix
from ..config import ParserConfig
from ..hooks import Hook
from ..schema_ast.nodes import SchemaNode, find_base_in_tree


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Target types that are emitted as they are
    BUILTIN_TYPES: frozenset[str] = frozenset()

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    # Characters dropped from generated identifiers
    STRIP_CHARS: str = "-"

    COMMENT_PREFIX: str = "//"

    def __init__(self, config: ParserConfig, hook: Hook | None = None):
        """
        Initialize the backend.

        Args:
            config: Parser and generation configuration
            hook: Hook consulted before and after each node is rendered
        """
        self.config = config
        self.hook = hook or Hook()
        self.proto_tree: list[SchemaNode] = []
        # Node name -> rendered declaration, first one wins
        self.struct_ast: dict[str, str] = {}
        self.field_name_count: dict[str, int] = {}
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.jinja_env.filters["comment"] = self._format_comment

        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")
        self.type_template = self.jinja_env.get_template(f"type.{self.FILE_EXTENSION}.jinja2")
        self.suffix_template = self.jinja_env.get_template(f"suffix.{self.FILE_EXTENSION}.jinja2")

    def generate(self, proto_tree: list[SchemaNode], generation_comment: str = "") -> str:
        """
        Generate source code for a prototype tree.

        Args:
            proto_tree: Nodes of one schema file, in discovery order
            generation_comment: Header line identifying the generator run

        Returns:
            Generated code as a string
        """
        self.proto_tree = list(proto_tree)
        self.struct_ast = {}
        self.field_name_count = {}
        self.reset()

        body = ""
        for node in self.proto_tree:
            if node.name in self.struct_ast:
                continue
            if not self.hook.on_generate(self, node.name, node):
                continue
            declaration = self.declare(node)
            if declaration is None:
                continue
            text = self.type_template.render(declaration)
            self.struct_ast[node.name] = text
            body += self.hook.on_generated(self, node.name, node, text)

        prefix = self.prefix_template.render(self.prefix_context(generation_comment))
        return prefix + body + self.suffix_template.render()

    def reset(self) -> None:
        """Clear per-file state before a new tree is generated."""

    def prefix_context(self, generation_comment: str) -> dict[str, Any]:
        return {"generation_comment": generation_comment, "package": self.config.package}

    @abstractmethod
    def declare(self, node: SchemaNode) -> dict[str, Any] | None:
        """
        Build the template context declaring one node.

        Args:
            node: A top-level node of the prototype tree

        Returns:
            Variables for the ``type`` template, or None to emit nothing
        """

    def field_name(self, name: str, unique: bool = False) -> str:
        """
        Mangle a schema name into an identifier.

        Prefix and dotted parts are capitalized and joined. With ``unique``,
        the n-th use of the same identifier in a file gets ``n`` appended.
        """
        field_name = "".join(make_first_upper_case(part) for part in name.split(":"))
        field_name = "".join(make_first_upper_case(part) for part in field_name.split("."))
        for char in self.STRIP_CHARS:
            field_name = field_name.replace(char, "")
        if unique:
            self.field_name_count[field_name] = self.field_name_count.get(field_name, 0) + 1
            count = self.field_name_count[field_name]
            if count != 1:
                field_name = f"{field_name}{count}"
        return field_name

    def base_type(self, type_name: str) -> str:
        """The type behind a (possibly prefixed) name in the current tree, or the bare name."""
        name = trim_ns_prefix(type_name)
        return find_base_in_tree(name, self.proto_tree) or name

    def is_builtin(self, type_name: str) -> bool:
        return type_name in self.BUILTIN_TYPES

    def _format_comment(self, doc: str, name: str) -> str:
        """Comment line preceding a declaration."""
        if not doc:
            return f"{self.COMMENT_PREFIX} {name} ..."
        doc = doc.replace("\t", "").replace("\n", f"\n{self.COMMENT_PREFIX} ")
        return f"{self.COMMENT_PREFIX} {name} is {doc}"
