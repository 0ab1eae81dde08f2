"""
Atomic file writer for safe code generation.

Ensures that file writes are atomic to prevent data corruption
from interrupted operations.
"""

from __future__ import annotations

import ast
import logging
import tempfile
from collections.abc import Callable
from pathlib import Path

from .errors import OutputValidationError

logger = logging.getLogger(__name__)


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file

    This ensures that an interrupted write operation never leaves
    the target file in an incomplete state.
    """

    def __init__(self, validators: dict[str, Callable[[str], None]] | None = None):
        """Initialize the atomic writer.

        Args:
            validators: Per-language validation functions overriding the defaults
        """
        self._validators: dict[str, Callable[[str], None]] = {
            "python": self._default_validate_python,
            "go": self._default_validate_go,
            "typescript": self._default_validate_typescript,
        }
        self._validators.update(validators or {})

    def write(
        self,
        path: Path,
        content: str,
        language: str,
        validate: bool = True,
    ) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            language: Language for validation ("go", "typescript" or "python")
            validate: Whether to validate before finalizing

        Raises:
            OutputValidationError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory keeps the rename on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )

        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self.validate(content, language)

            temp_path.replace(path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

        logger.info("Wrote %s", path)

    def write_if_not_exists(
        self,
        path: Path,
        content: str,
        language: str,
        validate: bool = True,
    ) -> None:
        """Write content only if the file doesn't exist.

        Args:
            path: Target file path
            content: Content to write
            language: Language for validation
            validate: Whether to validate before finalizing

        Raises:
            FileExistsError: If the file already exists
            OutputValidationError: If validation fails
        """
        if path.exists():
            raise FileExistsError(f"Output file already exists: {path}. Use --force to overwrite.")

        self.write(path, content, language, validate)

    def validate(self, content: str, language: str) -> None:
        """Run the validator of ``language``, if any."""
        validator = self._validators.get(language)
        if validator is not None:
            validator(content)

    def _default_validate_python(self, content: str) -> None:
        try:
            ast.parse(content)
        except SyntaxError as e:
            raise OutputValidationError(f"Generated Python code is not valid: {e}") from e

    def _default_validate_go(self, content: str) -> None:
        # Structural checks only; gofmt is optional
        if "package " not in content:
            raise OutputValidationError("Generated Go code is missing its package clause")
        _check_braces(content, "Go")

    def _default_validate_typescript(self, content: str) -> None:
        _check_braces(content, "TypeScript")


def _check_braces(content: str, language: str) -> None:
    open_braces = content.count("{")
    close_braces = content.count("}")
    if open_braces != close_braces:
        raise OutputValidationError(f"Generated {language} code has unbalanced braces: {open_braces} open, {close_braces} close")
