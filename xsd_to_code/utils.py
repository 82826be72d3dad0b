"""
Utility functions for the XSD to code generator.
"""

import os
from pathlib import Path
from urllib.parse import urlparse


def make_first_upper_case(text: str) -> str:
    """Uppercase the first letter of a string, leaving the rest untouched.

    Examples:
        "person" -> "Person"
        "xmlLang" -> "XmlLang"
        "a" -> "A"
    """
    if len(text) < 2:
        return text.upper()
    return text[0].upper() + text[1:]


def get_ns_prefix(qualified_name: str) -> str:
    """Return the namespace prefix of ``prefix:local``, or an empty string."""
    parts = qualified_name.split(":")
    if len(parts) == 2:
        return parts[0]
    return ""


def trim_ns_prefix(qualified_name: str) -> str:
    """Return the local part of ``prefix:local`` (the input itself when unprefixed)."""
    parts = qualified_name.split(":")
    if len(parts) == 2:
        return parts[1]
    return qualified_name


def is_valid_url(value: str) -> bool:
    """Check whether a string is a well-formed absolute URL (scheme and host)."""
    if not value:
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def get_file_list(path: str | Path, suffix: str = ".xsd") -> list[Path]:
    """
    List the schema files under a path.

    Args:
        path: A single file or a directory (walked recursively)
        suffix: File suffix to keep when walking a directory

    Returns:
        Sorted list of file paths; a single file path is returned as-is

    Raises:
        FileNotFoundError: If the path does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No such file or directory: {path}")
    if not path.is_dir():
        return [path]

    files = []
    for root, _dirs, names in os.walk(path):
        for name in names:
            if name.endswith(suffix):
                files.append(Path(root) / name)
    return sorted(files)
