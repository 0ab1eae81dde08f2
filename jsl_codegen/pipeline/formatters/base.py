"""
Base class for code formatters.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod

from ..config import FormatterConfig

logger = logging.getLogger(__name__)


class Formatter(ABC):
    """Abstract base class for code formatters.

    Formatters shell out to an external tool. When the tool is missing or
    fails, the code is returned unchanged.
    """

    # Executable looked up on PATH
    EXECUTABLE: str = ""

    def __init__(self):
        self._available: bool | None = None

    @abstractmethod
    def command(self, config: FormatterConfig) -> list[str]:
        """Command line that formats stdin to stdout."""

    def is_available(self) -> bool:
        """
        Check if the formatter is available (executable installed).

        Returns:
            True if the formatter can be used
        """
        if self._available is None:
            self._available = shutil.which(self.EXECUTABLE) is not None
        return self._available

    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format the given code.

        Args:
            code: The source code to format
            config: Formatter configuration

        Returns:
            Formatted code, or the input if formatting is not possible
        """
        if not self.is_available():
            logger.debug("%s not found, leaving output unformatted", self.EXECUTABLE)
            return code

        try:
            result = subprocess.run(
                self.command(config),
                input=code,
                capture_output=True,
                text=True,
                timeout=30,
            )
        except (subprocess.SubprocessError, OSError) as e:
            logger.warning("%s failed: %s", self.EXECUTABLE, e)
            return code

        if result.returncode != 0:
            logger.warning("%s exited with %d: %s", self.EXECUTABLE, result.returncode, result.stderr.strip())
            return code
        return result.stdout
