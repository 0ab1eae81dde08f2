"""
Code generation backends.

Contains one template-driven emitter per target language.
"""

from __future__ import annotations

from .base import CodeBackend
from .go_backend import GoBackend
from .python_backend import PythonBackend
from .typescript_backend import TypeScriptBackend

__all__ = [
    "CodeBackend",
    "GoBackend",
    "PythonBackend",
    "TypeScriptBackend",
]
