"""
Ruff formatter for Python code.
"""

from __future__ import annotations

from ..config import FormatterConfig
from .base import Formatter


class RuffFormatter(Formatter):
    """Formatter using ruff for Python code."""

    EXECUTABLE = "ruff"

    def command(self, config: FormatterConfig) -> list[str]:
        cmd = ["ruff", "format", "--stdin-filename", "code.py"]

        if config.line_length:
            cmd.extend(["--line-length", str(config.line_length)])

        if config.target_version:
            cmd.extend(["--target-version", config.target_version])

        return cmd
