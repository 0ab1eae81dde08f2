"""
gofmt formatter for Go code.
"""

from __future__ import annotations

from ..config import FormatterConfig
from .base import Formatter


class GofmtFormatter(Formatter):
    """Formatter using gofmt, which has no options worth exposing."""

    EXECUTABLE = "gofmt"

    def command(self, config: FormatterConfig) -> list[str]:
        return ["gofmt"]
