"""
Atomic file writer for generated code.

A schema that fails half way through generation must not leave a truncated
file behind, so output is written to a temporary file next to the target
and moved over it once complete.
"""

from __future__ import annotations

import tempfile
from pathlib import Path


class AtomicWriter:
    """Writes files through a temporary sibling and an atomic rename."""

    def write(self, path: Path, content: str) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path; missing parent directories are created
            content: Content to write

        Raises:
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory, so the final rename stays on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            temp_path.replace(path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise
