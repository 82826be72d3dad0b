"""
Pipeline generator: schema files in, source files out.

One ``PipelineGenerator`` is one run. Every file it parses in full mode,
the requested ones and the dependencies they import, is handed to the
language backend and written under the output directory, keeping its path
relative to the input directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..utils import get_file_list
from .backends import CodeBackend, get_backend
from .config import ParserConfig
from .errors import SchemaIOError
from .hooks import Hook
from .schema_ast.context import ParseSession, cache_key
from .schema_ast.nodes import SchemaNode
from .schema_ast.parser import SchemaParser
from .writer import AtomicWriter

logger = logging.getLogger(__name__)


class PipelineGenerator:
    """Parses schema files and generates code for them."""

    def __init__(self, config: ParserConfig | None = None, hook: Hook | None = None, generation_comment: str = ""):
        """
        Initialize the generator.

        Args:
            config: Parser and generation configuration
            hook: Hook for parse and generation events
            generation_comment: Header line written at the top of every generated file

        Raises:
            UnsupportedLanguageError: If code emission is on and no backend generates ``config.lang``
        """
        self.config = config or ParserConfig()
        self.hook = hook or Hook()
        self.generation_comment = generation_comment

        self.backend: CodeBackend | None = None
        if self.config.emit:
            self.backend = get_backend(self.config.lang)(self.config, self.hook)

        self.session = ParseSession(config=self.config, hook=self.hook, on_file_parsed=self._emit)
        self.parser = SchemaParser(session=self.session)
        self.writer = AtomicWriter()
        # Files written so far, in generation order
        self.written: list[Path] = []

    def process(self, path: str | Path) -> list[SchemaNode]:
        """
        Parse one schema file, generating code for it and its dependencies.

        A file already parsed as a dependency earlier in the run is not parsed again.

        Returns:
            The prototype tree of the file
        """
        tree = self.session.parsed_files.get(cache_key(path))
        if tree is not None:
            logger.debug("Skipping %s, already parsed in this run", path)
            return tree
        return self.parser.parse_file(path)

    def process_all(self, path: str | Path) -> dict[Path, list[SchemaNode]]:
        """
        Process a schema file or every ``.xsd`` file under a directory.

        Returns:
            Prototype tree per processed file, in processing order

        Raises:
            SchemaIOError: If the path does not exist
        """
        if not Path(path).exists():
            raise SchemaIOError("no such file or directory", path=str(path))
        return {file: self.process(file) for file in get_file_list(path)}

    def output_path(self, path: Path) -> Path:
        """Where the code generated for a schema file goes."""
        input_dir = Path(self.config.input_dir).resolve() if self.config.input_dir else path.parent.resolve()
        source = path.resolve()
        relative = source.relative_to(input_dir) if source.is_relative_to(input_dir) else Path(source.name)
        extension = self.backend.FILE_EXTENSION if self.backend is not None else ""
        return Path(self.config.output_dir) / relative.with_name(f"{relative.name}.{extension}")

    def _emit(self, path: Path, proto_tree: list[SchemaNode]) -> None:
        if self.backend is None:
            return
        code = self.backend.generate(proto_tree, self.generation_comment)
        output = self.output_path(path)
        self.writer.write(output, code)
        self.written.append(output)
        logger.info("Generated %s from %s", output, path)
