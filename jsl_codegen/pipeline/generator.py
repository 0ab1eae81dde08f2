"""
Pipeline generator: schema document in, source files out.

Phases:

1. Parse: validate the JSON document into a schema AST
2. Transform: build the IR of each target with its namer and capabilities
3. Emit: render the IR through the target backend's templates
4. Format: optional post-processing (gofmt, ruff)
5. Write: atomic, validated, one file per target
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .atomic_writer import AtomicWriter
from .backends import CodeBackend, GoBackend, PythonBackend, TypeScriptBackend
from .config import CodeGeneratorConfig, OutputMode
from .formatters import Formatter, GofmtFormatter, RuffFormatter
from .ir_nodes import IR
from .schema_ast import SchemaAST, SchemaParser
from .transformer import TypeTransformer

logger = logging.getLogger(__name__)

BACKENDS: dict[str, type[CodeBackend]] = {
    "go": GoBackend,
    "typescript": TypeScriptBackend,
    "python": PythonBackend,
}

FORMATTERS: dict[str, type[Formatter]] = {
    "go": GofmtFormatter,
    "python": RuffFormatter,
}


class PipelineGenerator:
    """Generates the source of one target from a JSL schema."""

    def __init__(
        self,
        root_name: str,
        schema: dict[str, Any],
        config: CodeGeneratorConfig | None = None,
        language: str = "go",
        output_dir: Path | None = None,
        ast: SchemaAST | None = None,
    ):
        """
        Initialize the generator.

        Args:
            root_name: Name of the root declaration (PascalCased by the namer)
            schema: The decoded JSON schema document
            config: Code generation configuration
            language: One of "go", "typescript" or "python"
            output_dir: Directory the file will be written to (names the Go package)
            ast: An already parsed schema, shared between targets
        """
        if language not in BACKENDS:
            raise ValueError(f"Unsupported language: {language}. Expected one of {sorted(BACKENDS)}")

        self.root_name = root_name
        self.schema = schema
        self.config = config or CodeGeneratorConfig()
        self.language = language
        self.output_dir = output_dir
        self.ast = ast
        self.ir: IR | None = None

        if language == "go":
            self.backend: CodeBackend = GoBackend(self.config, package_name=output_dir.name if output_dir else "")
        else:
            self.backend = BACKENDS[language](self.config)

    def parse(self) -> SchemaAST:
        if self.ast is None:
            self.ast = SchemaParser().parse(self.schema, self.root_name)
        return self.ast

    def transform(self) -> IR:
        """Build (once) and return the IR of this target."""
        if self.ir is None:
            transformer = TypeTransformer(
                self.backend.namer,
                self.backend.capabilities,
                target=self.language,
                include_descriptions=self.config.include_descriptions,
            )
            self.ir = transformer.transform(self.parse())
        return self.ir

    def render(self) -> str:
        """Emit the IR as source text, formatted when configured."""
        code = self.backend.generate(self.transform())

        if self.config.formatter.enabled and self.language in FORMATTERS:
            code = FORMATTERS[self.language]().format(code, self.config.formatter)

        return code

    def generate(self) -> str:
        """
        Generate code for the schema.

        Returns:
            Generated code as a string
        """
        return self.render()

    def output_path(self, output_dir: Path | None = None) -> Path:
        output_dir = Path(output_dir or self.output_dir or ".")
        return output_dir / self.backend.output_filename(self.transform().root_name, output_dir)

    def write(self, code: str, output_dir: Path | None = None, writer: AtomicWriter | None = None) -> Path:
        """
        Write generated code honoring the output configuration.

        Raises:
            FileExistsError: If the file exists and the mode is ERROR_IF_EXISTS
            OutputValidationError: If the code fails the pre-write check
            OSError: If file operations fail
        """
        path = self.output_path(output_dir)
        writer = writer or AtomicWriter()
        output = self.config.output
        validate = output.validate_before_write

        if output.atomic_write:
            if output.mode == OutputMode.FORCE:
                writer.write(path, code, self.language, validate=validate)
            else:
                writer.write_if_not_exists(path, code, self.language, validate=validate)
            return path

        if output.mode == OutputMode.ERROR_IF_EXISTS and path.exists():
            raise FileExistsError(f"Output file already exists: {path}. Use --force to overwrite.")
        if validate:
            writer.validate(code, self.language)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(code, encoding="utf-8")
        logger.info("Wrote %s", path)
        return path


def generate_targets(
    root_name: str,
    schema: dict[str, Any],
    targets: Mapping[str, Path],
    config: CodeGeneratorConfig | None = None,
) -> list[Path]:
    """
    Generate and write every requested target.

    The schema is parsed once. Every target is transformed and rendered
    before the first file is written, so a failure in any target leaves
    all outputs untouched.

    Args:
        root_name: Name of the root declaration
        schema: The decoded JSON schema document
        targets: Language -> output directory
        config: Code generation configuration

    Returns:
        Paths of the written files, in the order of ``targets``
    """
    config = config or CodeGeneratorConfig()
    ast = SchemaParser().parse(schema, root_name)

    generators = [
        PipelineGenerator(root_name, schema, config, language, output_dir=Path(output_dir), ast=ast) for language, output_dir in targets.items()
    ]

    for generator in generators:
        generator.transform()
        logger.debug("%s: %d declarations", generator.language, len(generator.ir.declarations))

    rendered = [(generator, generator.render()) for generator in generators]

    if config.output.mode == OutputMode.ERROR_IF_EXISTS:
        for generator in generators:
            path = generator.output_path()
            if path.exists():
                raise FileExistsError(f"Output file already exists: {path}. Use --force to overwrite.")

    writer = AtomicWriter()
    return [generator.write(code, writer=writer) for generator, code in rendered]
