import pytest

from xsd_to_code.utils import (
    get_file_list,
    get_ns_prefix,
    is_valid_url,
    make_first_upper_case,
    trim_ns_prefix,
)


@pytest.mark.parametrize(
    "text, expected",
    [("person", "Person"), ("xmlLang", "XmlLang"), ("a", "A"), ("", "")],
)
def test_make_first_upper_case(text, expected):
    assert make_first_upper_case(text) == expected


def test_namespace_prefix_helpers():
    assert get_ns_prefix("xs:string") == "xs"
    assert get_ns_prefix("string") == ""
    assert trim_ns_prefix("tns:Person") == "Person"
    assert trim_ns_prefix("Person") == "Person"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("https://example.com/a.xsd", True),
        ("http://example.com", True),
        ("common.xsd", False),
        ("../shared/common.xsd", False),
        ("file:common.xsd", False),
        ("", False),
    ],
)
def test_is_valid_url(value, expected):
    assert is_valid_url(value) is expected


def test_get_file_list(tmp_path):
    (tmp_path / "sub").mkdir()
    for name in ["b.xsd", "a.xsd", "sub/c.xsd", "notes.txt"]:
        (tmp_path / name).write_text("")

    assert get_file_list(tmp_path) == [tmp_path / "a.xsd", tmp_path / "b.xsd", tmp_path / "sub" / "c.xsd"]
    assert get_file_list(tmp_path / "notes.txt") == [tmp_path / "notes.txt"]
    with pytest.raises(FileNotFoundError):
        get_file_list(tmp_path / "missing")
