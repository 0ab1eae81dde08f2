"""JSON Schema Language to Code Generator

Compiles a JSL schema into typed declarations for Go, TypeScript and
Python, including the codec that round-trips discriminated unions.
"""

__version__ = "1.0.0"

from .pipeline import (
    AtomicWriter,
    CodeGeneratorConfig,
    CodegenError,
    FormatterConfig,
    InvariantViolation,
    NameCollisionError,
    OutputConfig,
    OutputMode,
    PipelineGenerator,
    SchemaError,
    generate_targets,
)

__all__ = [
    "PipelineGenerator",
    "generate_targets",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "OutputConfig",
    "OutputMode",
    "CodegenError",
    "SchemaError",
    "NameCollisionError",
    "InvariantViolation",
    "AtomicWriter",
]
