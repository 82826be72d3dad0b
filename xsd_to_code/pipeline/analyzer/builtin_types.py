"""
XSD builtin datatypes and their target language equivalents.

https://www.w3.org/TR/xmlschema-2/#datatype
"""

from __future__ import annotations

from ...utils import trim_ns_prefix
from ..config import Language

# Column order follows the Language enum: Go, TypeScript, C, Java, Rust
BUILTIN_TYPES: dict[str, tuple[str, str, str, str, str]] = {
    "anyType": ("string", "string", "char", "String", "String"),
    "anySimpleType": ("string", "string", "char", "String", "String"),
    "ENTITIES": ("[]string", "Array<string>", "char[]", "List<String>", "Vec<String>"),
    "ENTITY": ("string", "string", "char", "String", "String"),
    "ID": ("string", "string", "char", "String", "String"),
    "IDREF": ("string", "string", "char", "String", "String"),
    "IDREFS": ("[]string", "Array<string>", "char[]", "List<String>", "Vec<String>"),
    "NCName": ("string", "string", "char", "String", "String"),
    "NMTOKEN": ("string", "string", "char", "String", "String"),
    "NMTOKENS": ("[]string", "Array<string>", "char[]", "List<String>", "Vec<String>"),
    "NOTATION": ("[]string", "Array<string>", "char[]", "List<String>", "Vec<String>"),
    "Name": ("string", "string", "char", "String", "String"),
    "QName": ("xml.Name", "any", "char", "String", "String"),
    "anyURI": ("string", "string", "char", "QName", "String"),
    "base64Binary": ("[]byte", "Uint8Array", "char[]", "List<Byte>", "String"),
    "boolean": ("bool", "boolean", "bool", "Boolean", "bool"),
    "byte": ("byte", "any", "char[]", "Byte", "u8"),
    "date": ("time.Time", "string", "char", "Byte", "u8"),
    "dateTime": ("time.Time", "string", "char", "Byte", "u8"),
    "decimal": ("float64", "number", "float", "Float", "f64"),
    "double": ("float64", "number", "float", "Float", "f64"),
    "duration": ("string", "string", "char", "String", "String"),
    "float": ("float32", "number", "float", "Float", "f32"),
    "gDay": ("time.Time", "string", "char", "String", "String"),
    "gMonth": ("time.Time", "string", "char", "String", "String"),
    "gMonthDay": ("time.Time", "string", "char", "String", "String"),
    "gYear": ("time.Time", "string", "char", "String", "String"),
    "gYearMonth": ("time.Time", "string", "char", "String", "String"),
    "hexBinary": ("[]byte", "Uint8Array", "char[]", "List<Byte>", "String"),
    "int": ("int", "number", "int", "Integer", "i32"),
    "integer": ("int", "number", "int", "Integer", "i32"),
    "language": ("string", "string", "char", "String", "String"),
    "long": ("int64", "number", "int", "Long", "i64"),
    "negativeInteger": ("int", "number", "int", "Integer", "i32"),
    "nonNegativeInteger": ("int", "number", "int", "Integer", "u32"),
    "normalizedString": ("string", "string", "char", "String", "String"),
    "nonPositiveInteger": ("int", "number", "int", "Integer", "i32"),
    "positiveInteger": ("int", "number", "int", "Integer", "u32"),
    "short": ("int16", "number", "int", "Integer", "i16"),
    "string": ("string", "string", "char", "String", "String"),
    "time": ("time.Time", "string", "char", "String", "String"),
    "token": ("string", "string", "char", "String", "String"),
    "unsignedByte": ("byte", "any", "char", "Byte", "u8"),
    "unsignedInt": ("uint32", "number", "unsigned int", "Integer", "u32"),
    "unsignedLong": ("uint64", "number", "unsigned int", "Long", "u64"),
    "unsignedShort": ("uint16", "number", "unsigned int", "Short", "u16"),
    "xml:lang": ("string", "string", "char", "String", "String"),
    "xml:space": ("string", "string", "char", "String", "String"),
    "xml:base": ("string", "string", "char", "String", "String"),
    "xml:id": ("string", "string", "char", "String", "String"),
}

_COLUMNS = {language: index for index, language in enumerate(Language)}


def builtin_type(reference: str, lang: str | Language) -> str | None:
    """
    Map an XSD datatype reference to the target language builtin.

    The prefix is stripped before the lookup, except for the ``xml:``
    attributes which are listed under their qualified name.

    Args:
        reference: Possibly prefixed type reference, e.g. "xs:dateTime"
        lang: Target language

    Returns:
        The builtin type name, or None when the reference is not a builtin
    """
    column = _COLUMNS[Language(lang)]
    for key in (trim_ns_prefix(reference), reference):
        if key in BUILTIN_TYPES:
            return BUILTIN_TYPES[key][column]
    return None
