"""XSD to Code Generator

A Python package for parsing XML Schema Definition files into a prototype
tree of schema nodes and generating Go or TypeScript type declarations
from it.
"""

__version__ = "0.1.0"

from .pipeline import (
    ElementEvent,
    Hook,
    Language,
    MalformedSchemaError,
    ParserConfig,
    PipelineGenerator,
    SchemaIOError,
    SchemaParser,
    UnresolvedTypeError,
    UnsupportedLanguageError,
    XsdToCodeError,
)

__all__ = [
    "PipelineGenerator",
    "SchemaParser",
    "ParserConfig",
    "Language",
    "Hook",
    "ElementEvent",
    "XsdToCodeError",
    "SchemaIOError",
    "MalformedSchemaError",
    "UnresolvedTypeError",
    "UnsupportedLanguageError",
]
