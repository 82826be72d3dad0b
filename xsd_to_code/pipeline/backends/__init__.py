"""
Code generation backends.

Contains language-specific code generators.
"""

from __future__ import annotations

from ..config import Language
from ..errors import UnsupportedLanguageError
from .base import CodeBackend
from .go_backend import GoBackend
from .typescript_backend import TypeScriptBackend

BACKENDS: dict[Language, type[CodeBackend]] = {
    Language.GO: GoBackend,
    Language.TYPESCRIPT: TypeScriptBackend,
}


def get_backend(lang: str | Language) -> type[CodeBackend]:
    """
    Look up the backend class generating code for a language.

    Raises:
        UnsupportedLanguageError: If no backend generates that language
    """
    try:
        return BACKENDS[Language(lang)]
    except (KeyError, ValueError) as err:
        raise UnsupportedLanguageError(f"no code generation backend for language {lang!r}") from err


__all__ = [
    "BACKENDS",
    "CodeBackend",
    "GoBackend",
    "TypeScriptBackend",
    "get_backend",
]
