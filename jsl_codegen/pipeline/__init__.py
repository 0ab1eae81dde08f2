"""
Pipeline - JSL schema to code generator.

1. Phase 1 (Parser): Validate the JSON document into a schema AST
2. Phase 2 (Transformer): Build the target-neutral IR, one per target
3. Phase 3 (Backend): Render the IR through Jinja2 templates
4. Phase 4 (Formatter): Optional post-processing (gofmt, ruff)
5. Phase 5 (Writer): Validate and atomically write each file
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter
from .config import CodeGeneratorConfig, FormatterConfig, OutputConfig, OutputMode
from .errors import CodegenError, InvariantViolation, NameCollisionError, OutputValidationError, SchemaError
from .generator import PipelineGenerator, generate_targets

__all__ = [
    "PipelineGenerator",
    "generate_targets",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "OutputConfig",
    "OutputMode",
    "AtomicWriter",
    "CodegenError",
    "SchemaError",
    "NameCollisionError",
    "InvariantViolation",
    "OutputValidationError",
]
