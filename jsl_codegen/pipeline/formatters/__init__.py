"""
Post-processing formatters for generated code.
"""

from __future__ import annotations

from .base import Formatter
from .gofmt_formatter import GofmtFormatter
from .ruff_formatter import RuffFormatter

__all__ = [
    "Formatter",
    "GofmtFormatter",
    "RuffFormatter",
]
