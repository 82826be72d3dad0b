import pytest

from xsd_to_code.pipeline.analyzer.builtin_types import BUILTIN_TYPES, builtin_type
from xsd_to_code.pipeline.config import Language


@pytest.mark.parametrize(
    "reference, lang, expected",
    [
        ("xs:string", "Go", "string"),
        ("xsd:dateTime", "Go", "time.Time"),
        ("xs:dateTime", "TypeScript", "string"),
        ("xs:base64Binary", "TypeScript", "Uint8Array"),
        ("xs:long", "Rust", "i64"),
        ("xs:boolean", "Java", "Boolean"),
        ("xs:unsignedInt", "C", "unsigned int"),
        ("xml:lang", "Go", "string"),
        ("anySimpleType", Language.GO, "string"),
    ],
)
def test_builtin_type(reference, lang, expected):
    assert builtin_type(reference, lang) == expected


def test_unknown_type():
    assert builtin_type("tns:Person", "Go") is None


def test_every_language_has_a_column():
    assert all(len(row) == len(Language) for row in BUILTIN_TYPES.values())
