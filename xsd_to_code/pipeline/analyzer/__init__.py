"""
Analyzer module.

Contains the builtin type table, namespace bookkeeping and type reference
resolution.
"""

from __future__ import annotations

from .builtin_types import BUILTIN_TYPES, builtin_type
from .namespace_resolver import NamespaceResolver

__all__ = [
    "BUILTIN_TYPES",
    "builtin_type",
    "NamespaceResolver",
]
