"""
Exceptions raised while parsing schemas and generating code.
"""

from __future__ import annotations


class XsdToCodeError(Exception):
    """Base class for all errors raised by the pipeline."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class SchemaIOError(XsdToCodeError):
    """Raised when a schema file cannot be read.

    This can happen when:
    - The file does not exist
    - The path points to a directory where a single file was expected
    - The operating system refuses to open the file
    """

    pass


class MalformedSchemaError(XsdToCodeError):
    """Raised when schema data cannot be interpreted.

    Covers XML syntax errors and unparseable numeric attributes such as
    ``maxOccurs="many"`` or ``<xs:maxLength value="ten"/>``. The offending
    element, attribute and value are kept for reporting.
    """

    def __init__(self, message: str, path: str = "", element: str = "", attribute: str = "", value: str = ""):
        super().__init__(message, path)
        self.element = element
        self.attribute = attribute
        self.value = value


class UnresolvedTypeError(XsdToCodeError):
    """Raised in strict mode when a type reference names no known type."""

    def __init__(self, reference: str, path: str = ""):
        super().__init__(f"unresolved type reference {reference!r}", path)
        self.reference = reference


class UnsupportedLanguageError(XsdToCodeError):
    """Raised when code generation is requested for a language without a backend."""

    pass
