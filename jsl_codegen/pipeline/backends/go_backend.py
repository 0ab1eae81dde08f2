"""
Go code generation backend.

Renders aggregates as structs with json tags, enums as string-backed
defined types with one constant per member, and discriminated unions as a
holder struct with hand-written MarshalJSON/UnmarshalJSON methods.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from ..config import CodeGeneratorConfig
from ..ir_nodes import IR, ClassDef, ConstantDef, EnumDef, TypeAlias, TypeKind, TypeRef, UnionDef
from ..naming import GoNamer
from ..transformer import TargetCapabilities
from .base import CodeBackend

_NOT_PACKAGE_CHAR = re.compile(r"[^a-z0-9]")


def go_package_name(name: str) -> str:
    """Fold a directory or schema name into a valid Go package clause."""
    package = _NOT_PACKAGE_CHAR.sub("", name.lower())
    if not package or package[0].isdigit():
        package = "x" + package
    return package


class GoBackend(CodeBackend):
    """Go code generation backend."""

    TEMPLATE_LANG = "go"
    FILE_EXTENSION = "go"

    TEMPLATES = {
        ClassDef: "class",
        UnionDef: "union",
        TypeAlias: "alias",
        EnumDef: "enum",
        ConstantDef: "constant",
    }

    TYPE_MAP = {
        TypeKind.ANY: "interface{}",
        TypeKind.BOOLEAN: "bool",
        TypeKind.NUMBER: "float64",
        TypeKind.STRING: "string",
        TypeKind.TIMESTAMP: "time.Time",
        TypeKind.LITERAL: "string",
    }

    capabilities = TargetCapabilities(enum_constants=True, native_tagged_unions=False)

    def __init__(self, config: CodeGeneratorConfig, package_name: str = ""):
        super().__init__(config)
        self.package_name = package_name

    def create_namer(self) -> GoNamer:
        return GoNamer()

    def translate_type(self, type_ref: TypeRef) -> str:
        if type_ref.kind == TypeKind.IDENTIFIER:
            return type_ref.name
        if type_ref.kind == TypeKind.ARRAY:
            return f"[]{self.translate_type(type_ref.item)}"
        if type_ref.kind == TypeKind.MAP:
            return f"map[string]{self.translate_type(type_ref.item)}"
        return self.TYPE_MAP[type_ref.kind]

    def output_filename(self, root_name: str, output_dir: Path) -> str:
        return f"{self._package(root_name, output_dir.name)}.go"

    def _package(self, root_name: str, fallback: str = "") -> str:
        return go_package_name(self.config.go_package or self.package_name or fallback or root_name)

    def _prepare_prefix_context(self, ir: IR) -> dict[str, Any]:
        context = super()._prepare_prefix_context(ir)
        context["package"] = self._package(ir.root_name)
        return context

    def _prepare_context(self, decl) -> dict[str, Any]:
        context = super()._prepare_context(decl)
        if isinstance(decl, ClassDef) and decl.variant_of is not None:
            union = self.resolve(decl.variant_of[0])
            context["variant_interface"] = union.codec.variant_type_name
        else:
            context["variant_interface"] = ""
        if isinstance(decl, TypeAlias):
            # "type X = Y" keeps the method set of Y
            context["alias_of_declaration"] = decl.target.kind == TypeKind.IDENTIFIER
        return context

    def _prepare_field_context(self, class_def: ClassDef, field) -> dict[str, Any]:
        context = super()._prepare_field_context(class_def, field)
        context["tag_options"] = "" if field.is_required else ",omitempty"
        # omitempty never drops a struct or time.Time value, only a nil pointer
        if not field.is_required and field.type_ref.kind != TypeKind.ANY:
            context["type"] = "*" + context["type"]
        return context

    def _collect_imports(self, ir: IR) -> list[str]:
        imports = set()
        if ir.of_type(UnionDef):
            imports.update(["encoding/json", "fmt"])
        if self.uses_kind(ir, TypeKind.TIMESTAMP):
            imports.add("time")
        return sorted(imports)
