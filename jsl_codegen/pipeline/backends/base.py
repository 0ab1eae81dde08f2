"""
Base class for code generation backends.

A backend is the emitter of one target: it owns the target's namer and
capabilities (which the transformer consults) and renders the resulting IR
through Jinja2 templates. Rendering is purely syntactic; every naming and
structural decision has already been made by the transformer.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import jinja2

from ... import __version__
from ...cli_utils import reconstruct_command_line
from ..config import CodeGeneratorConfig
from ..errors import InvariantViolation
from ..ir_nodes import IR, ClassDef, ConstantDef, Declaration, EnumDef, TypeAlias, TypeKind, TypeRef, UnionDef
from ..naming import IdentifierNamer
from ..transformer import TargetCapabilities

TEMPLATE_DIR = Path(__file__).parent.parent.parent / "templates"


def quote_string(value: str) -> str:
    """Render a string literal valid in Go, TypeScript and Python."""
    return json.dumps(value, ensure_ascii=False)


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    COMMENT_PREFIX: str = "//"

    # Text between two rendered declarations
    DECLARATION_SEPARATOR: str = "\n"

    # Declaration kind -> template stem
    TEMPLATES: dict[type[Declaration], str] = {}

    capabilities = TargetCapabilities()

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self.namer = self.create_namer()
        self._declarations: dict[str, Declaration] = {}
        self._setup_templates()

    @abstractmethod
    def create_namer(self) -> IdentifierNamer:
        """Return the identifier namer of this target."""

    @abstractmethod
    def translate_type(self, type_ref: TypeRef) -> str:
        """
        Translate an inline type expression to target syntax.

        Args:
            type_ref: The type reference

        Returns:
            Language-specific type string
        """

    @abstractmethod
    def output_filename(self, root_name: str, output_dir: Path) -> str:
        """File name of the generated unit inside ``output_dir``."""

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR / self.TEMPLATE_LANG)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
            undefined=jinja2.StrictUndefined,
        )
        # Add custom filters
        self.jinja_env.filters["quote"] = quote_string
        self.jinja_env.filters["type"] = self.translate_type

        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")
        self.declaration_templates = {
            kind: self.jinja_env.get_template(f"{stem}.{self.FILE_EXTENSION}.jinja2") for kind, stem in self.TEMPLATES.items()
        }

    def generate(self, ir: IR) -> str:
        """
        Generate code from IR.

        Args:
            ir: The intermediate representation

        Returns:
            Generated code as a string
        """
        self._declarations = ir.by_name()

        rendered = [self._render_declaration(decl) for decl in ir.declarations]
        prefix = self.prefix_template.render(self._prepare_prefix_context(ir))
        return prefix + self.DECLARATION_SEPARATOR.join(rendered)

    def _render_declaration(self, decl: Declaration) -> str:
        template = self.declaration_templates.get(type(decl))
        if template is None:
            raise InvariantViolation(f"{self.TEMPLATE_LANG} backend cannot render {type(decl).__name__} {decl.name}")
        return template.render(self._prepare_context(decl))

    def _prepare_prefix_context(self, ir: IR) -> dict[str, Any]:
        return {
            "generation_comment": self._generation_comment(),
            "imports": self._collect_imports(ir),
        }

    def _prepare_context(self, decl: Declaration) -> dict[str, Any]:
        """
        Prepare the template context for a declaration.

        Args:
            decl: The declaration to render

        Returns:
            Dictionary of template variables
        """
        context: dict[str, Any] = {
            "name": decl.name,
            "comment_lines": self._comment_lines(decl.description),
        }

        if isinstance(decl, ClassDef):
            context["fields"] = [self._prepare_field_context(decl, field) for field in decl.fields]
            context["variant_of"] = decl.variant_of
        elif isinstance(decl, UnionDef):
            codec = decl.codec
            context["codec"] = codec
            context["cases"] = codec.cases
            context["variants"] = codec.variant_names
        elif isinstance(decl, TypeAlias):
            context["target"] = self.translate_type(decl.target)
        elif isinstance(decl, EnumDef):
            context["values"] = decl.values
        elif isinstance(decl, ConstantDef):
            context["type_name"] = decl.type_name
            context["value"] = decl.value

        return context

    def _prepare_field_context(self, class_def: ClassDef, field) -> dict[str, Any]:
        return {
            "name": field.name,
            "json_name": field.json_name,
            "type": self.translate_type(field.type_ref),
            "is_required": field.is_required,
            "comment_lines": self._comment_lines(field.description),
        }

    def _collect_imports(self, ir: IR) -> list[str]:
        """Imports the generated unit needs, sorted."""
        return []

    def _generation_comment(self) -> str:
        """Header comment naming the generator and the command that ran it."""
        if not self.config.add_generation_comment:
            return ""

        # Reconstruct command line using CLI utilities
        try:
            from ...jsl_codegen import jsl_codegen as click_command  # noqa

            command_line = reconstruct_command_line(click_command)
        except (ImportError, AttributeError):
            command_line = "jsl_codegen"

        return "\n".join(
            [
                f"{self.COMMENT_PREFIX} Code generated by jsl_codegen v{__version__}. DO NOT EDIT.",
                f"{self.COMMENT_PREFIX} Command: {command_line}",
            ]
        )

    def _comment_lines(self, text: str | None) -> list[str]:
        if not text:
            return []
        return [f"{self.COMMENT_PREFIX} {line}".rstrip() for line in text.splitlines()]

    def resolve(self, name: str) -> Declaration:
        """Declaration named ``name`` in the IR being rendered."""
        try:
            return self._declarations[name]
        except KeyError:
            raise InvariantViolation(f"reference to undeclared type {name}") from None

    def iter_type_refs(self, ir: IR) -> Iterator[TypeRef]:
        """Every inline expression in the IR, nested ones included."""
        stack: list[TypeRef] = []
        for decl in ir.declarations:
            if isinstance(decl, ClassDef):
                stack.extend(field.type_ref for field in decl.fields)
            elif isinstance(decl, TypeAlias):
                stack.append(decl.target)
        while stack:
            type_ref = stack.pop()
            yield type_ref
            stack.extend(type_ref.type_args)

    def uses_kind(self, ir: IR, kind: TypeKind) -> bool:
        return any(type_ref.kind == kind for type_ref in self.iter_type_refs(ir))
