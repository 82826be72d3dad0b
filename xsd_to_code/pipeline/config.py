"""
Configuration for the XSD parsing and code generation pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Language(str, Enum):
    """Target languages known to the builtin type table.

    The order matches the columns of ``BUILTIN_TYPES``.
    """

    GO = "Go"
    TYPESCRIPT = "TypeScript"
    C = "C"
    JAVA = "Java"
    RUST = "Rust"


@dataclass
class ParserConfig:
    """Configuration options for schema parsing and code generation."""

    # Target language used to map XSD builtin datatypes
    lang: str = Language.GO.value

    # Package name for emitters that need one
    package: str = "schema"

    # Input root; emitted files keep their path relative to it
    input_dir: str = ""

    # Directory receiving the generated code
    output_dir: str = "xsd_to_code_out"

    # Raise on type references that resolve to nothing but their own name
    strict: bool = False

    # Hand every fully parsed file to the language backend
    emit: bool = True

    def __post_init__(self):
        # Accept Language members as well as their string values
        self.lang = Language(self.lang).value

    @property
    def language(self) -> Language:
        return Language(self.lang)

    @staticmethod
    def from_dict(d: dict) -> ParserConfig:
        """Create a config from a dictionary."""
        config = ParserConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        config.lang = Language(config.lang).value
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "lang": self.lang,
            "package": self.package,
            "input_dir": self.input_dir,
            "output_dir": self.output_dir,
            "strict": self.strict,
            "emit": self.emit,
        }
