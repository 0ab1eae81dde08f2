"""
Exceptions raised by the code generation pipeline.
"""

from __future__ import annotations

from collections.abc import Sequence


class CodegenError(Exception):
    """Base class for all jsl_codegen errors."""


class SchemaError(CodegenError):
    """Raised when an input document is not a valid JSL schema.

    Attributes:
        source_path: JSON pointer of the offending schema node
    """

    def __init__(self, message: str, source_path: str = "#"):
        super().__init__(f"{source_path}: {message}")
        self.source_path = source_path


class NameCollisionError(CodegenError):
    """Raised when two distinct schema paths fold to the same target identifier.

    Collisions are rejected rather than disambiguated so that identifiers
    stay a pure function of their path.
    """

    def __init__(self, identifier: str, first: Sequence[str], second: Sequence[str]):
        super().__init__(f"identifier {identifier!r} is produced by both {_format_path(first)} and {_format_path(second)}")
        self.identifier = identifier
        self.first = tuple(first)
        self.second = tuple(second)


class InvariantViolation(CodegenError):
    """Raised when input that should have been rejected upstream reaches the core.

    This is the fatal tier: it signals a bug in the validator or in
    hand-constructed data, never a problem with user input.
    """


class OutputValidationError(CodegenError):
    """Raised when generated code fails the pre-write sanity check."""


def _format_path(path: Sequence[str]) -> str:
    return "/".join(path) or "<empty>"
