"""
Pipeline - XSD to code generator.

Schemas go through two phases:

1. Parser: stream each XSD file into a prototype tree, resolving type
   references (and parsing the files they point to) on the way
2. Backend: render each prototype tree into source code for the target language
"""

from __future__ import annotations

from .config import Language, ParserConfig
from .errors import (
    MalformedSchemaError,
    SchemaIOError,
    UnresolvedTypeError,
    UnsupportedLanguageError,
    XsdToCodeError,
)
from .hooks import ElementEvent, Hook
from .schema_ast import SchemaParser
from .generator import PipelineGenerator

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
